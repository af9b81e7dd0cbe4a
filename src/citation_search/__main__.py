"""
Run the citation search HTTP server: python -m citation_search
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from citation_search.api.server import DEFAULT_API_PORT, run_api_server
from citation_search.config import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Citation Search HTTP API Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_API_PORT, help="Port to bind to")
    parser.add_argument(
        "--crawler-enabled",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Query live sources instead of mock data (default: CITATION_CRAWLER_ENABLED)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    settings = Settings.from_env()
    if args.crawler_enabled is not None:
        settings = replace(settings, crawler_enabled=args.crawler_enabled)

    run_api_server(
        host=args.host,
        port=args.port,
        settings=settings,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
