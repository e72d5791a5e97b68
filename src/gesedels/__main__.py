"""Entry point for the gesedels server.

Usage:
    python -m gesedels [--addr HOST:PORT] [--path FILE] [--log-level LEVEL]

Flags override the ``GESEDELS_*`` environment settings.
"""

from __future__ import annotations

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from gesedels.config import Settings, get_settings
from gesedels.server import create_app


def parse_settings(argv: list[str] | None = None) -> Settings:
    """Return the environment settings with command-line overrides applied."""
    defaults = get_settings()
    parser = argparse.ArgumentParser(prog="gesedels", description="A plaintext key-value API.")
    parser.add_argument("--addr", default=defaults.addr, help="set server address")
    parser.add_argument("--path", default=defaults.path, help="set database path")
    parser.add_argument("--log-level", default=defaults.log_level, help="set log level")
    args = parser.parse_args(argv)

    try:
        return Settings(addr=args.addr, path=args.path, log_level=args.log_level)
    except ValidationError as e:
        parser.error(str(e))


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 after a clean shutdown)
    """
    settings = parse_settings(argv)
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        workers=1,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
