"""End-to-end rendering tests (layout + bubble + mascot + PNG)."""

import io
import math

import pytest
from PIL import Image

from clippy.render.compose import (
  ERROR_IMAGE_SIZE,
  RenderError,
  RenderRequest,
  canvas_size,
  encode_png,
  render_error_png,
  render_image,
  render_png,
)
from clippy.render.layout import compute_bubble_metrics

from conftest import MASCOT_COLOR

LONG = "A very long sentence that should wrap across multiple lines because it exceeds the maximum content width"


def _open(body):
  return Image.open(io.BytesIO(body))


class TestRenderRequest:
  def test_build_sanitizes_message_and_options(self):
    req = RenderRequest.build("Hi—there", ["“Yes”", "No…"], True)
    assert req.message == "Hi-there"
    assert req.options == ("\"Yes\"", "No...")
    assert req.transparent is True

  def test_is_immutable(self):
    req = RenderRequest.build("Hi")
    with pytest.raises(AttributeError):
      req.message = "changed"  # type: ignore


class TestCanvasSize:
  def test_short_message(self, fake_measurer):
    m = compute_bubble_metrics("Hi", [], fake_measurer)
    assert canvas_size(m) == (250 + 200, math.ceil(m.height + 40 + 200))

  def test_wide_message(self, fake_measurer):
    m = compute_bubble_metrics("word " * 40, [], fake_measurer)
    assert canvas_size(m)[0] == math.ceil(m.width + 40 + 200)


class TestRenderImage:
  def test_scenario_short_message(self, mascot, measurer):
    result = render_image(RenderRequest.build("Hi"), mascot, measurer)

    assert result.metrics.message_lines == ("Hi",)
    assert result.bubble.markers == []
    assert result.image.size == canvas_size(result.metrics)
    assert result.image.height == math.ceil(result.metrics.height + 40 + 200)

  def test_scenario_long_message_wraps(self, mascot, measurer):
    result = render_image(RenderRequest.build(LONG), mascot, measurer)

    lines = result.metrics.message_lines
    limit = result.metrics.width - 2 * 20 - 2 * 20
    assert len(lines) >= 2
    for line in lines:
      assert measurer.width(line) <= limit or " " not in line

  def test_scenario_options_in_order(self, mascot, measurer):
    result = render_image(RenderRequest.build("Continue?", ["Yes", "No"]), mascot, measurer)

    assert [o.lines for o in result.metrics.wrapped_options] == [("Yes",), ("No",)]
    assert len(result.bubble.markers) == 2
    assert result.bubble.markers[0][1] < result.bubble.markers[1][1]

  def test_scenario_transparent_background(self, mascot, measurer):
    img = render_image(RenderRequest.build("Hi", transparent=True), mascot, measurer).image
    assert img.getpixel((img.width - 1, 0)) == (0, 0, 0, 0)

  def test_scenario_opaque_background(self, mascot, measurer):
    img = render_image(RenderRequest.build("Hi"), mascot, measurer).image
    assert img.getpixel((img.width - 1, 0)) == (255, 255, 255, 255)

  def test_mascot_is_in_bottom_right_corner(self, mascot, measurer):
    img = render_image(RenderRequest.build("Hi"), mascot, measurer).image
    assert img.getpixel((img.width - 1, img.height - 1)) == MASCOT_COLOR
    assert img.getpixel((img.width - 200, img.height - 200)) == MASCOT_COLOR
    assert img.getpixel((img.width - 201, img.height - 1)) != MASCOT_COLOR

  def test_scenario_smart_punctuation_matches_ascii(self, mascot, measurer):
    curly = render_png(RenderRequest.build("It’s done — really"), mascot, measurer)
    plain = render_png(RenderRequest.build("It's done - really"), mascot, measurer)
    assert curly == plain


class TestRenderPng:
  def test_returns_png(self, mascot, measurer):
    body = render_png(RenderRequest.build("Hi", ["a", "b"]), mascot, measurer)
    img = _open(body)
    assert img.format == "PNG"
    assert img.mode == "RGBA"

  def test_failure_is_wrapped(self, measurer):
    with pytest.raises(RenderError):
      render_png(RenderRequest.build("Hi"), object(), measurer)  # type: ignore[arg-type]


def test_error_image(measurer):
  img = _open(render_error_png(measurer))
  assert img.size == ERROR_IMAGE_SIZE
  assert img.convert("RGB").getpixel((0, 0)) == (255, 255, 255)


def test_error_image_without_font():
  assert _open(render_error_png()).size == ERROR_IMAGE_SIZE


def test_encode_png_roundtrip():
  img = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
  assert _open(encode_png(img)).getpixel((2, 1)) == (1, 2, 3, 4)
