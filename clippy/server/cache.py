from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Optional


IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


@dataclass(frozen=True)
class CachedResponse:
  body: bytes
  media_type: str = "image/png"
  headers: Dict[str, str] = field(default_factory=lambda: {"Cache-Control": IMMUTABLE_CACHE_CONTROL})


def request_key(method: str, url: str) -> str:
  return f"{(method or 'GET').upper()} {url}"


class ResponseCache:
  """
  Encoded responses keyed by request identity (method + full URL).

  Bounded LRU: the least recently served entry is dropped once `max_entries`
  is exceeded. `max_entries=0` disables storing.
  """

  def __init__(self, max_entries: int = 1024):
    self.max_entries = max(0, int(max_entries))
    self._items: "OrderedDict[str, CachedResponse]" = OrderedDict()
    self._lock = threading.Lock()

  def get(self, key: str) -> Optional[CachedResponse]:
    with self._lock:
      item = self._items.get(key)
      if item is not None:
        self._items.move_to_end(key)
      return item

  def put(self, key: str, value: CachedResponse) -> None:
    if self.max_entries <= 0:
      return
    with self._lock:
      self._items[key] = value
      self._items.move_to_end(key)
      while len(self._items) > self.max_entries:
        self._items.popitem(last=False)

  def __len__(self) -> int:
    with self._lock:
      return len(self._items)
