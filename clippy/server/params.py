from __future__ import annotations

from typing import List, Mapping, Optional, Sequence
from urllib.parse import urlencode, quote

from clippy.render.compose import DEFAULT_MESSAGE, RenderRequest


OPTION_SEPARATOR = "|"


def split_options(raw: Optional[str]) -> List[str]:
  if not raw:
    return []
  return raw.split(OPTION_SEPARATOR)


def parse_render_params(query: Mapping[str, str]) -> RenderRequest:
  """
  Build a sanitized RenderRequest from already URL-decoded query parameters.

  Missing or empty `text` falls back to the default greeting; `transparent`
  is on only for the literal "true".
  """
  text = query.get("text") or DEFAULT_MESSAGE
  options = split_options(query.get("options"))
  transparent = query.get("transparent") == "true"
  return RenderRequest.build(text, options, transparent)


def build_render_query(text: str, options: Sequence[str] = (), transparent: bool = False) -> str:
  params = [("text", text)]
  if options:
    params.append(("options", OPTION_SEPARATOR.join(options)))
  if transparent:
    params.append(("transparent", "true"))
  return urlencode(params, quote_via=quote)
