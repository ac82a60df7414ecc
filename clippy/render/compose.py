from __future__ import annotations

import io
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageDraw

from clippy.render.bubble import BubbleRender, bubble_footprint, draw_bubble
from clippy.render.layout import DEFAULT_STYLE, BubbleMetrics, BubbleStyle, compute_bubble_metrics
from clippy.render.measure import TextMeasurer
from clippy.render.sanitize import sanitize_options, sanitize_text


DEFAULT_MESSAGE = "Hello! I'm Clippy!"
ERROR_MESSAGE = "Error generating image"
ERROR_IMAGE_SIZE = (400, 300)
ERROR_TEXT_XY = (50, 150)


class RenderError(RuntimeError):
  pass


class MascotNotFoundError(FileNotFoundError):
  pass


@dataclass(frozen=True)
class RenderRequest:
  message: str
  options: Tuple[str, ...] = ()
  transparent: bool = False

  @classmethod
  def build(cls, message: Optional[str], options: Iterable[Optional[str]] = (), transparent: bool = False) -> "RenderRequest":
    return cls(
      message=sanitize_text(message),
      options=tuple(sanitize_options(options)),
      transparent=bool(transparent),
    )


@dataclass
class RenderResult:
  image: Image.Image
  metrics: BubbleMetrics
  bubble: BubbleRender


def load_mascot(path: Path) -> Image.Image:
  if not path.exists():
    raise MascotNotFoundError(str(path))
  with Image.open(path) as img:
    img.load()
    return img.convert("RGBA")


def canvas_size(metrics: BubbleMetrics, style: BubbleStyle = DEFAULT_STYLE) -> Tuple[int, int]:
  fp = bubble_footprint(metrics, style)
  width = fp.width + style.mascot_size
  height = max(fp.height + style.canvas_margin + style.mascot_size, style.mascot_size + style.canvas_margin)
  return int(math.ceil(width)), int(math.ceil(height))


def render_image(
  req: RenderRequest,
  mascot: Image.Image,
  measurer: TextMeasurer,
  style: BubbleStyle = DEFAULT_STYLE,
) -> RenderResult:
  """
  Lay out `req`, size a canvas to fit, then draw the bubble and paste the mascot
  into the bottom-right corner. The layout is computed once and reused for drawing.
  """
  metrics = compute_bubble_metrics(req.message, req.options, measurer, style)
  width, height = canvas_size(metrics, style)

  background = (0, 0, 0, 0) if req.transparent else (255, 255, 255, 255)
  canvas = Image.new("RGBA", (width, height), background)
  bubble = draw_bubble(ImageDraw.Draw(canvas), metrics, measurer, style)

  size = style.mascot_size
  sprite = mascot.convert("RGBA").resize((size, size), Image.Resampling.LANCZOS)
  canvas.alpha_composite(sprite, dest=(width - size, height - size))
  return RenderResult(image=canvas, metrics=metrics, bubble=bubble)


def encode_png(img: Image.Image) -> bytes:
  buf = io.BytesIO()
  img.save(buf, format="PNG")
  return buf.getvalue()


def render_png(
  req: RenderRequest,
  mascot: Image.Image,
  measurer: TextMeasurer,
  style: BubbleStyle = DEFAULT_STYLE,
) -> bytes:
  try:
    return encode_png(render_image(req, mascot, measurer, style).image)
  except Exception as e:
    raise RenderError(f"render_failed: {e}") from e


def render_error_png(measurer: Optional[TextMeasurer] = None) -> bytes:
  """Fixed white 400x300 image with an error notice; must not depend on request data."""
  img = Image.new("RGB", ERROR_IMAGE_SIZE, (255, 255, 255))
  draw = ImageDraw.Draw(img)
  font = measurer.font if measurer is not None else None
  draw.text(ERROR_TEXT_XY, ERROR_MESSAGE, fill=(0, 0, 0), font=font)
  return encode_png(img)
