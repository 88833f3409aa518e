"""Run saved assistant messages through the extraction API and write drill JSON.

Each .txt/.md file in the input folder is one assistant message. Every drill
found is written to output/<message-stem>_<n>.json.

Usage:
    .venv\\Scripts\\python scripts/extract_drills.py transcripts/    # Windows
    .venv/bin/python scripts/extract_drills.py transcripts/         # Linux/macOS
"""

import json
import re
import sys
from pathlib import Path
from urllib.error import URLError
from urllib.request import Request, urlopen

API_BASE = "http://localhost:8005"
OUTPUT_DIR = Path(__file__).resolve().parent.parent / "output"


def _safe_stem(path: Path) -> str:
    """Derive a clean output filename stem from a message file."""
    return re.sub(r'[<>:"/\\|?*\s]', "_", path.stem)


def _extract(content: str) -> dict:
    body = json.dumps({"content": content}).encode("utf-8")
    req = Request(
        f"{API_BASE}/api/drills/extract",
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urlopen(req, timeout=30) as resp:
        return json.loads(resp.read())


def main() -> None:
    if len(sys.argv) != 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)

    input_dir = Path(sys.argv[1])
    messages = sorted(
        p for p in input_dir.iterdir() if p.suffix.lower() in (".txt", ".md")
    )
    print(f"Found {len(messages)} messages in {input_dir}")
    OUTPUT_DIR.mkdir(exist_ok=True)

    total = 0
    for path in messages:
        try:
            result = _extract(path.read_text(encoding="utf-8"))
        except URLError as e:
            print(f"ERROR: Cannot reach API at {API_BASE}. Is the service running?\n  {e}", file=sys.stderr)
            sys.exit(1)

        stem = _safe_stem(path)
        for n, drill in enumerate(result.get("drills", []), start=1):
            out_path = OUTPUT_DIR / f"{stem}_{n}.json"
            with open(out_path, "w", encoding="utf-8") as f:
                json.dump(drill, f, indent=2, ensure_ascii=False)
        total += result.get("count", 0)
        print(f"  {path.name}: {result.get('count', 0)} drills")

    print(f"\nDone: {total} drills written to {OUTPUT_DIR}/")


if __name__ == "__main__":
    main()
