from __future__ import annotations

import argparse
import sys
from pathlib import Path

from clippy.logs import setup_logger
from clippy.render.compose import RenderRequest, render_png
from clippy.server.params import split_options
from clippy.server.state import SharedResources, default_server_config


ROOT = Path(__file__).resolve().parent.parent


def _serve(args: argparse.Namespace) -> int:
  import uvicorn

  from clippy.server.app import create_app

  config = default_server_config(ROOT, Path(args.config) if args.config else None)
  setup_logger(config["logging"]["dir"], debug=config["logging"]["debug"])
  app = create_app(SharedResources(ROOT, config))
  uvicorn.run(
    app,
    host=args.host or config["server"]["host"],
    port=int(args.port or config["server"]["port"]),
  )
  return 0


def _render(args: argparse.Namespace) -> int:
  config = default_server_config(ROOT, Path(args.config) if args.config else None)
  logger = setup_logger(config["logging"]["dir"], debug=config["logging"]["debug"])
  res = SharedResources(ROOT, config)

  req = RenderRequest.build(args.text, split_options(args.options), args.transparent)
  try:
    body = render_png(req, res.mascot(), res.measurer(), res.style)
  except Exception as e:
    logger.error("Render failed: %s", e)
    return 1

  out = Path(args.out)
  out.parent.mkdir(parents=True, exist_ok=True)
  out.write_bytes(body)
  logger.info("Saved %s (%d bytes)", out, len(body))
  return 0


def main(argv=None) -> int:
  common = argparse.ArgumentParser(add_help=False)
  common.add_argument("--config", default=None, help="Path to config.yaml")

  parser = argparse.ArgumentParser(description="Clippy speech-bubble renderer")
  sub = parser.add_subparsers(dest="command", required=True)

  p_serve = sub.add_parser("serve", parents=[common], help="Run the HTTP server")
  p_serve.add_argument("--host", default=None)
  p_serve.add_argument("--port", type=int, default=None)
  p_serve.set_defaults(func=_serve)

  p_render = sub.add_parser("render", parents=[common], help="Render a single bubble to a PNG file")
  p_render.add_argument("--text", default="Hello! I'm Clippy!")
  p_render.add_argument("--options", default="", help="Options separated by '|'")
  p_render.add_argument("--transparent", action="store_true")
  p_render.add_argument("--out", default="clippy.png")
  p_render.set_defaults(func=_render)

  args = parser.parse_args(argv)
  return args.func(args)


if __name__ == "__main__":
  sys.exit(main())
