from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def setup_logger(log_dir: Optional[Union[str, Path]] = None, debug: bool = False) -> logging.Logger:
  """Setup the `clippy` logger with console output and an optional debug log file."""
  logger = logging.getLogger("clippy")
  logger.setLevel(logging.DEBUG)

  # Clear existing handlers
  logger.handlers.clear()

  console_handler = logging.StreamHandler()
  console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
  console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
  logger.addHandler(console_handler)

  if log_dir:
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"clippy_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(file_handler)

  return logger
