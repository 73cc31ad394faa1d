"""
EduDash: seed the local zone file.

Writes the built-in starter document (folders, a sample video and a sample
PDF, plus the derived categories and videos) to the file the service uses
as its local mirror and read fallback.

Usage:
    uv run scripts/write_default_zone.py [--output PATH] [--force]
"""

import argparse
import json
import sys
from pathlib import Path

# Add the core package to sys.path so the script runs from a plain checkout.
_CORE_SRC = Path(__file__).resolve().parent.parent / "packages" / "core" / "src"
if str(_CORE_SRC) not in sys.path:
    sys.path.insert(0, str(_CORE_SRC))

from dashboard.defaults import default_zone  # type: ignore


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Write the starter zone document to a JSON file."
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("folder-structure.json"),
        help="Output path (default: folder-structure.json)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the file if it already exists",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if args.output.exists() and not args.force:
        print(f"{args.output} already exists; use --force to overwrite.", file=sys.stderr)
        return 1

    document = default_zone().to_dict()
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(document, indent=2), encoding="utf-8")
    print(
        f"Wrote {len(document['contents'])} content item(s) and "
        f"{len(document['videos'])} video(s) to {args.output}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
