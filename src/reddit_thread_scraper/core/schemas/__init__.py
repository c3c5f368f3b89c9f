"""Pydantic schemas for raw Reddit payloads and API responses."""

from reddit_thread_scraper.core.schemas.thread import (
    CleanedComment,
    CleanedPost,
    CleanedThread,
    ErrorResponse,
    Listing,
    ListingData,
    ScrapeResponse,
    Thing,
    ThingData,
)

__all__ = [
    "CleanedComment",
    "CleanedPost",
    "CleanedThread",
    "ErrorResponse",
    "Listing",
    "ListingData",
    "ScrapeResponse",
    "Thing",
    "ThingData",
]
