#!/usr/bin/env python3
"""
IPEDS Comps API — launch the server.

Usage:
    python main.py                          # http://localhost:3000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 0.0.0.0           # bind to all interfaces
    python main.py --data-dir /data/ipeds
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the IPEDS Comps API.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("PORT", "3000")),
        help="Port to listen on (default: 3000 or PORT env var)",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None,
        help="Directory holding HD and C files (default: data/ipeds or APP_DATA_DIR env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    args = parser.parse_args()

    # api.app reads its configuration from the environment at import time
    if args.data_dir is not None:
        os.environ["APP_DATA_DIR"] = str(args.data_dir)

    data_dir = Path(os.getenv("APP_DATA_DIR", "data/ipeds"))
    if not data_dir.is_dir():
        print(f"Warning: data directory not found at {data_dir}")
        print("  Download the IPEDS HD and C survey CSVs into it,")
        print("  or pass --data-dir /path/to/ipeds")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting IPEDS Comps API at {url}")
    print(f"Data directory: {data_dir}")
    print()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
