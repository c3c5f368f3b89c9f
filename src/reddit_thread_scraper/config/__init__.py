"""Configuration package for the Reddit thread scraper.

Re-exports the settings symbols so that callers can write::

    from reddit_thread_scraper.config import get_settings
"""

from __future__ import annotations

from reddit_thread_scraper.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
