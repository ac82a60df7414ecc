from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence


logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
  return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _atomic_write_json(path: Path, data: Dict[str, Any]) -> None:
  path.parent.mkdir(parents=True, exist_ok=True)
  fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
  try:
    with os.fdopen(fd, "w", encoding="utf-8") as f:
      json.dump(data, f, ensure_ascii=False, indent=2)
      f.write("\n")
    Path(tmp).replace(path)
  finally:
    try:
      os.unlink(tmp)
    except FileNotFoundError:
      pass


def read_json(path: Path) -> Dict[str, Any]:
  if not path.exists():
    return {}
  with path.open("r", encoding="utf-8") as f:
    return json.load(f)


def new_entry_id() -> str:
  from uuid import uuid4

  ts = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S-%f")
  return f"{ts}__{uuid4().hex[:8]}"


class PublishStore:
  """
  Append-only store of published messages, one JSON file per entry.

  Ids start with a UTC timestamp, so sorting file names gives publish order.
  """

  def __init__(self, root: Path):
    self.root = Path(root)
    self._lock = threading.Lock()

  def publish(self, text: str, options: Sequence[str], transparent: bool = False) -> Dict[str, Any]:
    entry = {
      "schema_version": 1,
      "id": new_entry_id(),
      "created_at": _utc_now_iso(),
      "text": text,
      "options": list(options),
      "transparent": bool(transparent),
    }
    with self._lock:
      _atomic_write_json(self.root / f"{entry['id']}.json", entry)
    return entry

  def list(self) -> List[Dict[str, Any]]:
    """Newest first."""
    entries: List[Dict[str, Any]] = []
    for path in sorted(self.root.glob("*.json"), reverse=True):
      try:
        data = read_json(path)
      except (OSError, ValueError) as e:
        logger.warning("Skipping unreadable entry %s: %s", path.name, e)
        continue
      if isinstance(data, dict) and data.get("id"):
        entries.append(data)
    return entries

  def __len__(self) -> int:
    return len(self.list())
