"""Pydantic schemas for Reddit thread payloads and the cleaned thread document.

Two groups of models live here:

- **Raw models** (``Listing``, ``Thing``, ``ThingData``) describe the subset of
  Reddit's ``<thread>.json`` response that the cleaner reads.  They are
  deliberately lenient: ``null``, missing and wrong-container values are
  coerced to empty defaults at validation time, so the cleaner never has to
  probe for field presence.  Reddit encodes "no replies" as ``""``; that
  becomes ``replies=None``.
- **Cleaned models** (``CleanedPost``, ``CleanedComment``, ``CleanedThread``)
  and the ``/api/scrape`` response envelopes.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Raw Reddit payload
# ---------------------------------------------------------------------------


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ThingData(_RawModel):
    """The ``data`` object of a post (``t3``) or comment (``t1``) thing.

    Post-only and comment-only fields share one model; whichever side is
    absent simply keeps its default.
    """

    title: str = ""
    author: str = ""
    selftext: str = ""
    body: str = ""
    subreddit: str = ""
    score: int = 0
    num_comments: int = 0
    url: str = ""
    created_utc: float = 0
    permalink: str = ""
    replies: Optional[Listing] = None

    @field_validator(
        "title",
        "author",
        "selftext",
        "body",
        "subreddit",
        "url",
        "permalink",
        mode="before",
    )
    @classmethod
    def _none_to_empty_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("score", "num_comments", "created_utc", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("replies", mode="before")
    @classmethod
    def _blank_replies_to_none(cls, value: Any) -> Any:
        # Reddit sends "" for a comment without replies.
        return value if isinstance(value, (dict, Listing)) else None


class Thing(_RawModel):
    """A listing child: ``{"kind": "t1", "data": {...}}``."""

    kind: str = ""
    data: ThingData = Field(default_factory=ThingData)

    @field_validator("kind", mode="before")
    @classmethod
    def _none_kind(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def _non_object_data(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, ThingData)) else {}


class ListingData(_RawModel):
    children: list[Thing] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _object_children_only(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [child for child in value if isinstance(child, (dict, Thing))]


class Listing(_RawModel):
    """Reddit's collection envelope: ``{"kind": "Listing", "data": {"children": [...]}}``."""

    kind: str = ""
    data: ListingData = Field(default_factory=ListingData)

    @field_validator("kind", mode="before")
    @classmethod
    def _none_kind(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("data", mode="before")
    @classmethod
    def _non_object_data(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, ListingData)) else {}

    @property
    def children(self) -> list[Thing]:
        return self.data.children

    @classmethod
    def from_raw(cls, value: Any) -> Listing:
        """Validate one top-level payload element; non-objects become an empty listing."""
        if not isinstance(value, dict):
            return cls()
        return cls.model_validate(value)


ThingData.model_rebuild()


# ---------------------------------------------------------------------------
# Cleaned thread document
# ---------------------------------------------------------------------------


class CleanedPost(BaseModel):
    """Summary of the thread's submission.  ``content`` is the post's selftext."""

    title: str = ""
    author: str = ""
    content: str = ""
    subreddit: str = ""
    score: int = 0
    num_comments: int = 0
    url: str = ""
    created_utc: float = 0
    permalink: str = ""


class CleanedComment(BaseModel):
    """A single comment; ``depth`` is 0 for top-level comments."""

    author: str
    content: str
    score: int = 0
    depth: int = 0


class CleanedThread(BaseModel):
    """The post plus its comments in depth-first order."""

    post: CleanedPost = Field(default_factory=CleanedPost)
    comments: list[CleanedComment] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# API envelopes
# ---------------------------------------------------------------------------


class ScrapeResponse(BaseModel):
    """Successful ``POST /api/scrape`` body."""

    success: bool = True
    data: CleanedThread


class ErrorResponse(BaseModel):
    """Body of every non-2xx ``/api/scrape`` response."""

    error: str
