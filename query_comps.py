#!/usr/bin/env python3
"""
Run one comps query against the local IPEDS files, without the HTTP server.

Loads the directory and completions years exactly as the API does (same
APP_* environment variables), runs the query, and prints a ranked table or
the JSON payload the API would return.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path

from ipeds.errors import CompsError
from ipeds.service import CompsService, parse_awlevel
from utils.config import AppConfig


def display_results(payload: dict, top: int) -> None:
    """Print a ranked institution table for a flat comps payload."""
    years = payload["years"]
    results = payload["results"]
    level = payload.get("awlevel", "all")
    print(f"\nCIP {payload['cip']}  awlevel={level}  "
          f"{len(results)} institution(s)  years {years[0] if years else '-'}"
          f"–{years[-1] if years else '-'}")
    print("=" * 100)
    header = f"{'UNITID':<8} {'Institution':<40} {'ST':<3}" + "".join(f"{y:>7}" for y in years) + f"{'Total':>8}"
    print(header)
    print("-" * len(header))
    for r in results[:top]:
        name = (r["instnm"] or "")[:39]
        cells = "".join(f"{r['completions'].get(y, 0):>7}" for y in years)
        print(f"{r['unitid']:<8} {name:<40} {(r['stabbr'] or ''):<3}{cells}{r['total']:>8}")
    if len(results) > top:
        print(f"... and {len(results) - top} more")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Query IPEDS completions by CIP code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
            Examples:
              python query_comps.py 51.2001
              python query_comps.py 512001 --awlevel 7
              python query_comps.py 11.0701 --by-award --json
              python query_comps.py 52.0201 --data-dir /data/ipeds --top 50
        """),
    )
    parser.add_argument("cip", help="CIP code (51.2001, 512001 and 51.2 all accepted)")
    parser.add_argument("--awlevel", default=None,
                        help="Award level filter (ignored if not an integer)")
    parser.add_argument("--by-award", action="store_true",
                        help="Group completions by award level (implies --json)")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Directory holding HD and C files (default: APP_DATA_DIR)")
    parser.add_argument("--top", type=int, default=25,
                        help="Number of institutions to display (default: 25)")
    parser.add_argument("--json", action="store_true",
                        help="Print the full JSON payload instead of a table")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log per-year scan progress")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    cfg = AppConfig.from_env()
    if args.data_dir is not None:
        cfg.data_dir = args.data_dir

    try:
        service = CompsService.from_config(cfg)
        if args.by_award:
            payload = service.query_by_award(args.cip)
        else:
            payload = service.query(args.cip, parse_awlevel(args.awlevel))
    except CompsError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.json or args.by_award:
        print(json.dumps(payload, indent=2))
    else:
        display_results(payload, args.top)


if __name__ == "__main__":
    main()
