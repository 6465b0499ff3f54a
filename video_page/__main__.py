"""Command line entry point.

    python -m video_page --root ./videos --allow 192.168.65.1 --port 8080
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import ServerConfig
from .main import run


def main() -> None:
    try:
        defaults = ServerConfig.from_env()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    parser = argparse.ArgumentParser(
        prog="video_page",
        description="List a folder as an HTML page and serve its files under /videos/.",
    )
    parser.add_argument("--root", type=Path, default=defaults.serving_root,
                        help="Directory to serve (default: %(default)s)")
    parser.add_argument("--allow", default=defaults.allowed_caller,
                        help="Only address allowed to see listings (default: %(default)s)")
    parser.add_argument("--host", default=defaults.host,
                        help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=defaults.port,
                        help="Port (default: %(default)s)")
    parser.add_argument("--root-only", action="store_true",
                        default=not defaults.allow_subpaths,
                        help="List only the top folder, no sub-path navigation")
    parser.add_argument("--log-level", default="info",
                        choices=["debug", "info", "warning", "error"])
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.root.is_dir():
        print(f"Serving root is not a directory: {args.root}", file=sys.stderr)
        sys.exit(1)

    config = ServerConfig(
        serving_root=args.root,
        allowed_caller=args.allow,
        host=args.host,
        port=args.port,
        allow_subpaths=not args.root_only,
    )
    run(config, log_level=args.log_level)


if __name__ == "__main__":
    main()
