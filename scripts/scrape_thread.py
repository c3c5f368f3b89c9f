#!/usr/bin/env python
"""Fetch a Reddit thread and print its cleaned JSON document.

Run from the project root::

    python scripts/scrape_thread.py https://www.reddit.com/r/python/comments/abc/title/

Usage::

    python scripts/scrape_thread.py URL [--no-mirror] [--indent N]

Options:
    URL          (required) Reddit thread URL.
    --no-mirror  Fetch from the URL's own host instead of ``REDDIT_MIRROR_HOST``.
    --indent     JSON indentation (default 2; 0 prints a single line).

Exit codes:
    0: Success.
    1: The thread could not be fetched or parsed.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure the src layout is on sys.path when run as a standalone script.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)


async def _run(url: str, use_mirror: bool, indent: int) -> int:
    """Scrape ``url`` and print the result.

    Returns:
        The process exit code.
    """
    from reddit_thread_scraper.config.settings import get_settings  # noqa: PLC0415
    from reddit_thread_scraper.core.exceptions import ThreadFetchError  # noqa: PLC0415
    from reddit_thread_scraper.core.logging_config import configure_logging  # noqa: PLC0415
    from reddit_thread_scraper.scraper.service import scrape_thread  # noqa: PLC0415

    settings = get_settings()
    configure_logging(settings.log_level)
    if not use_mirror:
        settings = settings.model_copy(update={"reddit_mirror_host": ""})

    try:
        thread = await scrape_thread(url, settings)
    except ThreadFetchError as exc:
        print(f"[scrape_thread] ERROR: {exc}", file=sys.stderr)
        return 1

    print(thread.model_dump_json(indent=indent or None))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Fetch a Reddit thread and print its post and flattened comments as JSON."
    )
    parser.add_argument("url", help="Reddit thread URL")
    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Do not rewrite the host to the configured mirror.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 = compact).")
    args = parser.parse_args()

    sys.exit(asyncio.run(_run(args.url, use_mirror=not args.no_mirror, indent=args.indent)))


if __name__ == "__main__":
    main()
