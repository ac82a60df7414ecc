"""Tests for the command line entry point and logger setup."""

import logging

from PIL import Image

from clippy.logs import setup_logger
from clippy.main import main


def test_render_command_writes_png(tmp_path, mascot_path, monkeypatch):
  for name in ("CLIPPY_CONFIG", "CLIPPY_STORE_DIR", "CLIPPY_MASCOT_PATH", "CLIPPY_FONT_PATH"):
    monkeypatch.delenv(name, raising=False)
  cfg = tmp_path / "config.yaml"
  cfg.write_text(f"render:\n  mascot_path: {mascot_path}\nstore:\n  dir: {tmp_path / 'pub'}\n", encoding="utf-8")
  out = tmp_path / "out" / "bubble.png"

  rc = main(["render", "--config", str(cfg), "--text", "Hi", "--options", "Yes|No", "--transparent", "--out", str(out)])

  assert rc == 0
  with Image.open(out) as img:
    assert img.format == "PNG"
    assert img.getpixel((img.width - 1, 0))[3] == 0


def test_render_command_reports_missing_mascot(tmp_path, monkeypatch):
  monkeypatch.delenv("CLIPPY_MASCOT_PATH", raising=False)
  cfg = tmp_path / "config.yaml"
  cfg.write_text(f"render:\n  mascot_path: {tmp_path / 'none.png'}\n", encoding="utf-8")

  assert main(["render", "--config", str(cfg), "--out", str(tmp_path / "x.png")]) == 1
  assert not (tmp_path / "x.png").exists()


def test_serve_command_reads_config(tmp_path, monkeypatch):
  import uvicorn

  monkeypatch.delenv("CLIPPY_CONFIG", raising=False)
  cfg = tmp_path / "config.yaml"
  cfg.write_text(f"server:\n  port: 9123\nstore:\n  dir: {tmp_path / 'pub'}\n", encoding="utf-8")
  calls = []
  monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

  assert main(["serve", "--config", str(cfg), "--host", "0.0.0.0"]) == 0
  assert calls == [{"host": "0.0.0.0", "port": 9123}]


def test_setup_logger_file_handler(tmp_path):
  logger = setup_logger(tmp_path / "logs", debug=True)
  try:
    assert logger.name == "clippy"
    assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    assert list((tmp_path / "logs").glob("clippy_*.log"))
  finally:
    for h in list(logger.handlers):
      h.close()
    logger.handlers.clear()
