from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont


logger = logging.getLogger(__name__)

# Liberation Sans shares Arial's metrics, so widths match the browser rendering closely.
_FONT_CANDIDATES = (
  "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
  "/usr/share/fonts/truetype/liberation2/LiberationSans-Regular.ttf",
  "/usr/share/fonts/liberation-sans/LiberationSans-Regular.ttf",
  "/Library/Fonts/Arial.ttf",
  "C:\\Windows\\Fonts\\arial.ttf",
  "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
  "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
)

_FONT_CACHE: Dict[Tuple[Optional[str], int], ImageFont.FreeTypeFont] = {}
_FONT_LOCK = threading.Lock()


def pick_font_path(font_path: Optional[str] = None) -> Optional[str]:
  for p in (font_path or None, *_FONT_CANDIDATES):
    if not p:
      continue
    try:
      if Path(p).exists():
        return str(p)
    except OSError:
      continue
  return None


def load_font(font_path: Optional[str], size: int) -> ImageFont.FreeTypeFont:
  """
  Load (once) the bubble font at `size` px.

  Falls back to Pillow's bundled FreeType font when no system font is found,
  which keeps metrics deterministic across calls in the same environment.
  """
  resolved = pick_font_path(font_path)
  key = (resolved, int(size))
  with _FONT_LOCK:
    font = _FONT_CACHE.get(key)
    if font is None:
      if resolved:
        font = ImageFont.truetype(resolved, int(size))
      else:
        logger.warning("No TrueType font found, using Pillow's default font")
        font = ImageFont.load_default(size=int(size))
      _FONT_CACHE[key] = font
    return font


class TextMeasurer:
  """Pixel widths of single-line strings for one font, measured on a scratch surface."""

  def __init__(self, font: ImageFont.FreeTypeFont):
    self.font = font
    self._draw = ImageDraw.Draw(Image.new("RGBA", (1, 1)))

  @classmethod
  def for_size(cls, size: int, font_path: Optional[str] = None) -> "TextMeasurer":
    return cls(load_font(font_path, size))

  def width(self, text: str) -> float:
    if not text:
      return 0.0
    return float(self._draw.textlength(text, font=self.font))
