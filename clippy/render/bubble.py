from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import ImageDraw, ImageFont

from clippy.render.layout import DEFAULT_STYLE, BubbleMetrics, BubbleStyle
from clippy.render.measure import TextMeasurer


logger = logging.getLogger(__name__)

PLACEHOLDER_GLYPH = "?"
FALLBACK_MESSAGE = "Error displaying message"

Point = Tuple[float, float]


@dataclass(frozen=True)
class LineOutcome:
  text: str
  xy: Point
  ok: bool
  error: Optional[str] = None


@dataclass(frozen=True)
class Footprint:
  width: float
  height: float


@dataclass
class BubbleRender:
  width: float
  height: float
  outcomes: List[LineOutcome] = field(default_factory=list)
  markers: List[Point] = field(default_factory=list)
  fallback: bool = False

  @property
  def failed_lines(self) -> List[LineOutcome]:
    return [o for o in self.outcomes if not o.ok]


def bubble_footprint(metrics: BubbleMetrics, style: BubbleStyle = DEFAULT_STYLE) -> Footprint:
  """Canvas space taken by the bubble, never narrower than the mascot floor."""
  return Footprint(
    width=max(metrics.width + style.bubble_x * 2, float(style.min_footprint_width)),
    height=metrics.height,
  )


def _arc(cx: float, cy: float, r: float, start_deg: float, end_deg: float, steps: int = 8) -> List[Point]:
  angles = np.radians(np.linspace(start_deg, end_deg, steps + 1))
  xs = cx + r * np.cos(angles)
  ys = cy + r * np.sin(angles)
  return [(float(x), float(y)) for x, y in zip(xs, ys)]


def bubble_path(x: float, y: float, width: float, height: float, style: BubbleStyle = DEFAULT_STYLE) -> List[Point]:
  """
  Outline of the bubble as a closed polygon, clockwise from the top-left corner.

  Corners are sampled arcs (screen coordinates, so -90 deg points up). The
  bottom edge is interrupted by the tail, which drops `tail_depth` below the
  bubble at `width - tail_right` and returns to the edge at `width - tail_left`.
  """
  r = float(style.corner_radius)
  right = x + width
  bottom = y + height

  pts: List[Point] = []
  pts += _arc(right - r, y + r, r, -90, 0)
  pts += _arc(right - r, bottom - r, r, 0, 90)
  pts += [
    (right - style.tail_right, bottom),
    (right - style.tail_right, bottom + style.tail_depth),
    (right - style.tail_left, bottom),
  ]
  pts += _arc(x + r, bottom - r, r, 90, 180)
  pts += _arc(x + r, y + r, r, 180, 270)
  return pts


def draw_line(draw: ImageDraw.ImageDraw, xy: Point, text: str, font: ImageFont.FreeTypeFont, fill: str) -> LineOutcome:
  """Draw one baseline-anchored line and report how it went instead of raising."""
  try:
    draw.text(xy, text, font=font, fill=fill, anchor="ls")
  except Exception as e:
    return LineOutcome(text=text, xy=xy, ok=False, error=f"{type(e).__name__}: {e}")
  return LineOutcome(text=text, xy=xy, ok=True)


def _draw_lines(
  draw: ImageDraw.ImageDraw,
  lines: Sequence[str],
  x: float,
  y: float,
  font: ImageFont.FreeTypeFont,
  style: BubbleStyle,
  out: BubbleRender,
  *,
  advance_first: bool,
) -> float:
  line_height = style.line_height
  for line in lines:
    if advance_first:
      y += line_height
    if line.strip():
      outcome = draw_line(draw, (x, y), line, font, style.text_color)
      out.outcomes.append(outcome)
      if not outcome.ok:
        logger.warning("Failed to draw line %r (%s), using placeholder", line, outcome.error)
        draw.text((x, y), PLACEHOLDER_GLYPH, font=font, fill=style.text_color, anchor="ls")
    if not advance_first:
      y += line_height
  return y


def _draw_text(draw: ImageDraw.ImageDraw, metrics: BubbleMetrics, font: ImageFont.FreeTypeFont, style: BubbleStyle, out: BubbleRender) -> None:
  pad = style.padding
  text_x = style.bubble_x + pad
  y = style.bubble_y + pad * 0.6

  y = _draw_lines(draw, metrics.message_lines, text_x, y, font, style, out, advance_first=True)

  if not metrics.has_options:
    return

  y += pad * 2
  r = style.marker_radius
  for option in metrics.wrapped_options:
    cx = text_x + style.marker_inset
    cy = y - style.font_size / 2 + 2
    draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=style.marker_color)
    out.markers.append((cx, cy))

    y = _draw_lines(draw, option.lines, text_x + style.marker_offset, y, font, style, out, advance_first=False)
    y += pad / 2


def draw_bubble(
  draw: ImageDraw.ImageDraw,
  metrics: BubbleMetrics,
  measurer: TextMeasurer,
  style: BubbleStyle = DEFAULT_STYLE,
) -> BubbleRender:
  """
  Draw the bubble and its text at (bubble_x, bubble_y) using precomputed metrics.

  A line that fails to draw is replaced by a placeholder glyph. If text drawing
  breaks down entirely a single fallback message is drawn instead; the bubble
  shape is kept either way.
  """
  bx, by = style.bubble_x, style.bubble_y
  path = bubble_path(bx, by, metrics.width, metrics.height, style)
  draw.polygon(path, fill=style.background_color, outline=style.border_color, width=style.border_width)

  fp = bubble_footprint(metrics, style)
  out = BubbleRender(width=fp.width, height=fp.height)
  try:
    _draw_text(draw, metrics, measurer.font, style, out)
  except Exception:
    logger.exception("Drawing bubble text failed, drawing fallback message")
    out.fallback = True
    draw.text(
      (bx + style.padding, by + style.padding + style.line_height),
      FALLBACK_MESSAGE,
      font=measurer.font,
      fill=style.text_color,
      anchor="ls",
    )
  return out
