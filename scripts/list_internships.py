#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from utils.store import InternshipStore  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump stored internships as a JSON array.")
    parser.add_argument("db", nargs="?", default="output/internships.db")
    parser.add_argument("--unpublished", action="store_true", help="Only records whose notification was never attempted")
    parser.add_argument("--out", default="", help="Optional output path (writes JSON array). If omitted, prints to stdout.")
    args = parser.parse_args()

    db_path = Path(args.db)
    if not db_path.exists():
        raise SystemExit(f"No database at {db_path}")

    records = InternshipStore(db_path).list_records()
    if args.unpublished:
        records = [r for r in records if not r.is_published]

    out_json = json.dumps([r.to_json_dict() for r in records], indent=2, ensure_ascii=False)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(out_json + "\n", encoding="utf-8")
    else:
        print(out_json)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
