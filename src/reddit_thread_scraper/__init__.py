"""Reddit thread scraper: fetch a Reddit thread and return it as clean JSON."""

__version__ = "0.1.0"
