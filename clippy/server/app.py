from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from clippy.render.compose import render_error_png, render_png
from clippy.server.cache import IMMUTABLE_CACHE_CONTROL, CachedResponse, request_key
from clippy.server.params import build_render_query, parse_render_params
from clippy.server.schemas import Health, PublishedEntry, PublishedList
from clippy.server.state import SharedResources


logger = logging.getLogger(__name__)

_CLIPPY_ROOT = Path(__file__).resolve().parent.parent.parent


def _png_response(body: bytes, media_type: str = "image/png", headers: Optional[Dict[str, str]] = None) -> Response:
  return Response(
    content=body,
    media_type=media_type,
    headers=dict(headers or {"Cache-Control": IMMUTABLE_CACHE_CONTROL}),
  )


def create_app(res: Optional[SharedResources] = None) -> FastAPI:
  res = res if res is not None else SharedResources(_CLIPPY_ROOT)

  app = FastAPI(title="clippy server", version="1.0")
  app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )
  app.state.resources = res

  def _error_png() -> bytes:
    try:
      measurer = res.measurer()
    except Exception:
      logger.exception("Font unavailable for the error image, using Pillow's default")
      measurer = None
    return render_error_png(measurer)

  @app.get("/health", response_model=Health)
  def health() -> Health:
    return Health(status="ok", cache_entries=len(res.cache), published=len(res.store))

  @app.get("/r")
  def render(request: Request) -> Response:
    key = request_key(request.method, str(request.url))
    cached = res.cache.get(key)
    if cached is not None:
      logger.debug("Cache hit: %s", key)
      return _png_response(cached.body, cached.media_type, cached.headers)

    try:
      req = parse_render_params(request.query_params)
      body = render_png(req, res.mascot(), res.measurer(), res.style)
    except Exception:
      logger.exception("Render failed for %s", request.url)
      return _png_response(_error_png())

    entry = CachedResponse(body=body)
    res.cache.put(key, entry)
    return _png_response(entry.body, entry.media_type, entry.headers)

  @app.post("/api/publish")
  def publish(payload: Dict[str, Any] = Body(default_factory=dict)) -> Response:
    text = payload.get("text")
    options = payload.get("options")
    transparent = payload.get("transparent", False)
    if not text or options is None:
      raise HTTPException(status_code=400, detail="missing_required_fields")
    if (
      not isinstance(text, str)
      or not isinstance(options, list)
      or any(not isinstance(o, str) for o in options)
      or not isinstance(transparent, bool)
    ):
      raise HTTPException(status_code=400, detail="invalid_input")

    entry = res.store.publish(text, options, transparent)
    logger.info("Published %s (%d options)", entry["id"], len(options))
    return Response(status_code=200)

  @app.get("/api/published", response_model=PublishedList)
  def published() -> PublishedList:
    items = []
    for e in res.store.list():
      query = build_render_query(e.get("text") or "", e.get("options") or [], bool(e.get("transparent")))
      items.append(
        PublishedEntry(
          id=e["id"],
          created_at=e.get("created_at") or "",
          text=e.get("text") or "",
          options=list(e.get("options") or []),
          transparent=bool(e.get("transparent")),
          render_url=f"/r?{query}",
        )
      )
    return PublishedList(items=items)

  return app


app = create_app()
