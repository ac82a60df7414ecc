from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional


_INVISIBLE_RE = re.compile("[\u200b-\u200d\ufeff]")
_UNSUPPORTED_RE = re.compile(r"[^\x20-\x7e\n]")

_SMART_PUNCT: Dict[str, str] = {
  "\u2018": "'",
  "\u2019": "'",
  "\u201c": "\"",
  "\u201d": "\"",
  "\u2013": "-",
  "\u2014": "-",
  "\u2026": "...",
}
_SMART_PUNCT_RE = re.compile("[" + "".join(_SMART_PUNCT) + "]")


def sanitize_text(text: Optional[str]) -> str:
  """
  Reduce text to what the bubble font can draw: printable ASCII plus newline.

  Smart quotes, dashes and the ellipsis become their ASCII spelling, zero-width
  characters disappear, anything else outside the range is dropped.
  """
  if not text:
    return ""
  text = _INVISIBLE_RE.sub("", str(text))
  text = _SMART_PUNCT_RE.sub(lambda m: _SMART_PUNCT[m.group(0)], text)
  return _UNSUPPORTED_RE.sub("", text)


def sanitize_options(options: Iterable[Optional[str]]) -> List[str]:
  return [sanitize_text(o) for o in (options or [])]
