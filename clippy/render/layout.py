from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from clippy.render.measure import TextMeasurer
from clippy.render.wrap import wrap_text


@dataclass(frozen=True)
class BubbleStyle:
  """
  Fixed rendering profile. All lengths are canvas pixels.

  max_canvas_width: width budget the bubble is laid out against.
  mascot_reserve: part of that budget kept free for the mascot and margins.
  marker_reserve: extra width counted per option when sizing the bubble.
  marker_inset: marker centre measured from the text column.
  marker_offset: indent of option text from the text column.
  tail_*: tail corners measured from the bubble's left edge, tail_depth below the bottom edge.
  """

  max_canvas_width: int = 600
  font_size: int = 24
  line_height_factor: float = 1.4
  padding: int = 20
  corner_radius: int = 10
  bubble_x: int = 20
  bubble_y: int = 20
  border_width: int = 2
  tail_right: int = 20
  tail_left: int = 60
  tail_depth: int = 30
  marker_radius: int = 8
  marker_inset: int = 10
  marker_offset: int = 30
  marker_reserve: int = 40
  mascot_size: int = 200
  mascot_reserve: int = 250
  min_footprint_width: int = 250
  canvas_margin: int = 40
  background_color: str = "#ffffcb"
  border_color: str = "#434340"
  text_color: str = "#000000"
  marker_color: str = "#1e90ff"

  @property
  def line_height(self) -> float:
    return self.font_size * self.line_height_factor


DEFAULT_STYLE = BubbleStyle()


@dataclass(frozen=True)
class WrappedBlock:
  lines: Tuple[str, ...]
  height: float


@dataclass(frozen=True)
class BubbleMetrics:
  width: float
  height: float
  message_lines: Tuple[str, ...]
  wrapped_options: Tuple[WrappedBlock, ...]
  options_height: float
  line_height: float

  @property
  def has_options(self) -> bool:
    return len(self.wrapped_options) > 0


def max_text_width(message: str, options: Sequence[str], measurer: TextMeasurer, marker_reserve: float) -> float:
  width = max(measurer.width(p) for p in message.split("\n"))
  for option in options:
    width = max(width, measurer.width(option) + marker_reserve)
  return width


def content_max_width(text_width: float, style: BubbleStyle = DEFAULT_STYLE) -> float:
  min_bubble_width = text_width + style.padding * 2
  return max(0.0, min(float(style.max_canvas_width - style.mascot_reserve), min_bubble_width))


def compute_bubble_metrics(
  message: str,
  options: Sequence[str],
  measurer: TextMeasurer,
  style: BubbleStyle = DEFAULT_STYLE,
) -> BubbleMetrics:
  """
  Size the bubble to its wrapped content.

  `message` and `options` are expected to be sanitized already. The content
  width is the widest paragraph/option, capped so the mascot always has room.
  Everything the renderer needs is returned so nothing is measured twice.
  """
  pad = style.padding
  line_height = style.line_height

  max_width = content_max_width(max_text_width(message, options, measurer, style.marker_reserve), style)

  message_lines = tuple(wrap_text(message, max_width - pad * 2, measurer))
  message_height = len(message_lines) * line_height

  wrapped_options = []
  for option in options:
    lines = tuple(wrap_text(option, max_width - pad * 2 - style.marker_offset, measurer))
    wrapped_options.append(WrappedBlock(lines=lines, height=len(lines) * line_height))

  options_height = 0.0
  if wrapped_options:
    options_height = sum(o.height for o in wrapped_options) + (pad / 2) * (len(wrapped_options) - 1)

  total_height = message_height + options_height + (pad * 3 if wrapped_options else pad * 2)

  return BubbleMetrics(
    width=max_width + pad * 2,
    height=total_height,
    message_lines=message_lines,
    wrapped_options=tuple(wrapped_options),
    options_height=options_height,
    line_height=line_height,
  )
