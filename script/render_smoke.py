from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
  repo_root = Path(__file__).resolve().parents[1]
  sys.path.insert(0, str(repo_root))

  from clippy.render.compose import RenderRequest, render_image
  from clippy.server.state import SharedResources, default_server_config

  res = SharedResources(repo_root, default_server_config(repo_root))
  out_dir = repo_root / "out"
  out_dir.mkdir(parents=True, exist_ok=True)

  samples = [
    ("short", RenderRequest.build("Hi")),
    ("long", RenderRequest.build(
      "A very long sentence that should wrap across multiple lines because it exceeds the maximum content width"
    )),
    ("options", RenderRequest.build("It looks like you're writing a letter.", ["Get help", "Just type"])),
    ("transparent", RenderRequest.build("See-through", transparent=True)),
  ]

  for name, req in samples:
    result = render_image(req, res.mascot(), res.measurer(), res.style)
    if result.bubble.fallback or result.bubble.failed_lines:
      print(f"[FAIL] {name}: text drawing fell back", file=sys.stderr)
      return 1
    if result.image.width < 450:
      print(f"[FAIL] {name}: canvas narrower than the mascot floor ({result.image.width})", file=sys.stderr)
      return 1
    path = out_dir / f"{name}.png"
    result.image.save(path)
    print(f"[INFO] {name}: {result.image.width}x{result.image.height}, {len(result.metrics.message_lines)} lines -> {path}")

  print("[OK] render_smoke")
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
