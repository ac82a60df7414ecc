from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from PIL import Image

from clippy.render.compose import load_mascot
from clippy.render.layout import DEFAULT_STYLE, BubbleStyle
from clippy.render.measure import TextMeasurer
from clippy.server.cache import ResponseCache
from clippy.server.store import PublishStore


logger = logging.getLogger(__name__)


def _load_yaml_config(path: Path) -> Dict[str, Any]:
  if not path.exists():
    return {}
  with path.open("r", encoding="utf-8") as f:
    data = yaml.safe_load(f) or {}
  return data if isinstance(data, dict) else {}


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
  sec = cfg.get(name)
  return sec if isinstance(sec, dict) else {}


def _resolve(root: Path, raw: Any) -> Optional[Path]:
  if not raw:
    return None
  p = Path(str(raw))
  if not p.is_absolute():
    p = (root / p).resolve()
  return p


def _int_value(raw: Any, default: int) -> int:
  # Empty yaml keys load as None; 0 is a real value.
  return default if raw is None else int(raw)


def default_server_config(root: Path, config_path: Optional[Path] = None) -> Dict[str, Any]:
  """
  Built-in defaults, overlaid with config.yaml and then environment variables.

  Resolution of the yaml file: explicit `config_path`, CLIPPY_CONFIG, <root>/config.yaml.
  """
  env_cfg = (os.environ.get("CLIPPY_CONFIG") or "").strip()
  path = config_path or (Path(env_cfg) if env_cfg else root / "config.yaml")
  cfg = _load_yaml_config(path)

  srv = _section(cfg, "server")
  rnd = _section(cfg, "render")
  cache = _section(cfg, "cache")
  store = _section(cfg, "store")
  log = _section(cfg, "logging")

  package_dir = Path(__file__).resolve().parent.parent
  mascot_path = (
    _resolve(root, os.environ.get("CLIPPY_MASCOT_PATH"))
    or _resolve(root, rnd.get("mascot_path"))
    or package_dir / "static" / "clippy.png"
  )
  store_dir = (
    _resolve(root, os.environ.get("CLIPPY_STORE_DIR"))
    or _resolve(root, store.get("dir"))
    or (root / "published").resolve()
  )
  font_path = (os.environ.get("CLIPPY_FONT_PATH") or "").strip() or rnd.get("font_path")

  return {
    "server": {
      "host": str(srv.get("host", "127.0.0.1")),
      "port": _int_value(srv.get("port"), 8000),
    },
    "render": {
      "font_path": str(font_path) if font_path else None,
      "mascot_path": str(mascot_path),
    },
    "cache": {
      "max_entries": _int_value(cache.get("max_entries"), 1024),
    },
    "store": {
      "dir": str(store_dir),
    },
    "logging": {
      "dir": str(_resolve(root, log.get("dir"))) if log.get("dir") else None,
      "debug": bool(log.get("debug", False)),
    },
  }


class SharedResources:
  """Process-wide, read-mostly state shared by all requests."""

  def __init__(self, root: Path, config: Optional[Dict[str, Any]] = None, style: BubbleStyle = DEFAULT_STYLE):
    self.root = root
    self.config = config if config is not None else default_server_config(root)
    self.style = style

    self.cache = ResponseCache(max_entries=self.config["cache"]["max_entries"])
    self.store = PublishStore(Path(self.config["store"]["dir"]))

    self._mascot: Optional[Image.Image] = None
    self._mascot_lock = threading.Lock()
    self._measurer: Optional[TextMeasurer] = None
    self._measurer_lock = threading.Lock()

  def mascot(self) -> Image.Image:
    # Loaded once; callers only read it (resize returns a new image).
    if self._mascot is None:
      with self._mascot_lock:
        if self._mascot is None:
          path = Path(self.config["render"]["mascot_path"])
          logger.info("Loading mascot image from %s", path)
          self._mascot = load_mascot(path)
    return self._mascot

  def measurer(self) -> TextMeasurer:
    if self._measurer is None:
      with self._measurer_lock:
        if self._measurer is None:
          self._measurer = TextMeasurer.for_size(self.style.font_size, self.config["render"]["font_path"])
    return self._measurer
