#!/usr/bin/env python3
"""
fetch_neu_yz_feed.py

Build one yz.neu.edu.cn feed without the HTTP server and print it to stdout.

Usage:
    python scripts/fetch_neu_yz_feed.py master1
    python scripts/fetch_neu_yz_feed.py download --format rss
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

THIS_FILE = Path(__file__).resolve()
SCRIPTS_DIR = THIS_FILE.parent
BACKEND_DIR = SCRIPTS_DIR.parent

if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import httpx  # noqa: E402

from app.config import get_log_level  # noqa: E402
from app.core.logging import configure_logging, get_logger  # noqa: E402
from app.models.neu_yz import CATEGORY_SECTION_CODES  # noqa: E402
from services.feed_render import render_rss  # noqa: E402
from services.neu_yz_service import build_neu_yz_feed  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print a yz.neu.edu.cn feed.")
    parser.add_argument(
        "category",
        help=f"Category name ({', '.join(CATEGORY_SECTION_CODES)}) or a raw section code.",
    )
    parser.add_argument("--format", choices=("json", "rss"), default="json")
    return parser.parse_args(argv)


async def run(category: str, output_format: str) -> str:
    feed = await build_neu_yz_feed(category)
    if output_format == "rss":
        return render_rss(feed)
    return feed.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(service_name="cli", level=get_log_level())
    logger = get_logger(module="fetch_neu_yz_feed")

    try:
        output = asyncio.run(run(args.category, args.format))
    except httpx.HTTPError as exc:
        logger.error(
            "neu_yz_cli_fetch_failed",
            category=args.category,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return 1

    sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
