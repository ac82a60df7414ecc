"""Shared fixtures: a fixed-width fake measurer, a solid mascot, and server resources on tmp dirs."""

import pytest
from PIL import Image

from clippy.render.measure import TextMeasurer
from clippy.server.state import SharedResources

MASCOT_COLOR = (255, 0, 0, 255)


class FixedWidthMeasurer:
  """Every character is `char_width` pixels wide, so expected layouts can be computed by hand."""

  def __init__(self, char_width: float = 10.0):
    self.char_width = char_width
    self.font = None

  def width(self, text: str) -> float:
    return len(text or "") * self.char_width


@pytest.fixture
def fake_measurer():
  return FixedWidthMeasurer()


@pytest.fixture(scope="session")
def measurer():
  return TextMeasurer.for_size(24)


@pytest.fixture
def mascot():
  return Image.new("RGBA", (64, 64), MASCOT_COLOR)


@pytest.fixture
def mascot_path(tmp_path, mascot):
  path = tmp_path / "mascot.png"
  mascot.save(path)
  return path


@pytest.fixture
def server_config(tmp_path, mascot_path):
  return {
    "server": {"host": "127.0.0.1", "port": 8000},
    "render": {"font_path": None, "mascot_path": str(mascot_path)},
    "cache": {"max_entries": 16},
    "store": {"dir": str(tmp_path / "published")},
    "logging": {"dir": None, "debug": False},
  }


@pytest.fixture
def resources(tmp_path, server_config):
  return SharedResources(tmp_path, server_config)


@pytest.fixture
def client(resources):
  from fastapi.testclient import TestClient

  from clippy.server.app import create_app

  with TestClient(create_app(resources)) as c:
    yield c
