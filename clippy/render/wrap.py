from __future__ import annotations

from typing import List

from clippy.render.measure import TextMeasurer


def wrap_text(text: str, max_width: float, measurer: TextMeasurer) -> List[str]:
  """
  Greedy word wrap, paragraph by paragraph.

  Blank paragraphs come back as "" so the author's empty lines survive.
  A paragraph that fits is returned as-is; otherwise words are appended while
  the line stays strictly narrower than `max_width`. A word wider than the
  limit on its own is never split and ends up alone on its line.
  """
  lines: List[str] = []
  for para in (text or "").split("\n"):
    if para.strip() == "":
      lines.append("")
      continue

    if measurer.width(para) <= max_width:
      lines.append(para)
      continue

    words = para.split(" ")
    line = words[0]
    for word in words[1:]:
      cand = line + " " + word
      if measurer.width(cand) < max_width:
        line = cand
      else:
        lines.append(line)
        line = word
    if line:
      lines.append(line)
  return lines
