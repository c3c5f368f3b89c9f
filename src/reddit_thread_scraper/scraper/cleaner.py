"""Reduce Reddit's nested thread JSON to a post summary and a flat comment list.

A thread response is ``[post_listing, comments_listing]``.  Each comment
(``t1``) carries its own replies as another ``Listing`` (or ``""`` when it
has none), so the comment tree is walked depth-first and every kept comment
is tagged with its nesting depth.

Comments by deleted accounts or with an empty body are left out of the
output, but their replies are still walked: a live reply to a deleted
comment keeps its place and its depth.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from reddit_thread_scraper.core.schemas.thread import (
    CleanedComment,
    CleanedPost,
    CleanedThread,
    Listing,
    Thing,
    ThingData,
)
from reddit_thread_scraper.scraper.config import COMMENT_KIND, DELETED_AUTHOR, LISTING_KIND


def _clean_comment(data: ThingData, depth: int) -> Optional[CleanedComment]:
    """Return the cleaned comment, or ``None`` if it must be left out."""
    author = data.author or DELETED_AUTHOR
    if author == DELETED_AUTHOR or not data.body:
        return None
    return CleanedComment(author=author, content=data.body, score=data.score, depth=depth)


def _walk(children: Sequence[Thing], depth: int) -> list[CleanedComment]:
    """Flatten ``children`` and everything below them, in pre-order.

    Uses an explicit ``(thing, depth)`` stack instead of recursion.  Children
    are pushed in reverse so they pop in source order.
    """
    comments: list[CleanedComment] = []
    stack: list[tuple[Thing, int]] = [(child, depth) for child in reversed(children)]

    while stack:
        thing, level = stack.pop()
        if thing.kind != COMMENT_KIND:
            continue

        comment = _clean_comment(thing.data, level)
        if comment is not None:
            comments.append(comment)

        replies = thing.data.replies
        if replies is not None and replies.kind == LISTING_KIND:
            stack.extend((child, level + 1) for child in reversed(replies.children))

    return comments


def flatten_replies(replies: Listing | dict | str | None, depth: int = 0) -> list[CleanedComment]:
    """Flatten a ``replies`` listing into comments starting at ``depth``.

    Args:
        replies: The ``replies`` value of a comment, either validated or
            as raw JSON.  ``None``, ``""`` and non-``Listing`` kinds yield
            no comments.
        depth: Depth assigned to the listing's direct children.

    Returns:
        Comments in depth-first order, each parent before its descendants
        and siblings in the order Reddit returned them.
    """
    if not isinstance(replies, Listing):
        if not isinstance(replies, dict):
            return []
        replies = Listing.model_validate(replies)
    if replies.kind != LISTING_KIND:
        return []
    return _walk(replies.children, depth)


def clean_post(post_listing: Listing) -> CleanedPost:
    """Build the post summary from the first child of the post listing."""
    if not post_listing.children:
        return CleanedPost()
    data = post_listing.children[0].data
    return CleanedPost(
        title=data.title,
        author=data.author,
        content=data.selftext,
        subreddit=data.subreddit,
        score=data.score,
        num_comments=data.num_comments,
        url=data.url,
        created_utc=data.created_utc,
        permalink=data.permalink,
    )


def clean_thread(payload: Sequence[Any]) -> CleanedThread:
    """Build a :class:`CleanedThread` from a validated thread payload.

    Args:
        payload: Decoded ``<thread>.json`` list.  Element 0 is the post
            listing, element 1 the comments listing; further elements are
            ignored.  Elements that are not JSON objects count as empty
            listings.

    Returns:
        The cleaned thread.

    Raises:
        pydantic.ValidationError: If a listing contains values that cannot
            be coerced (e.g. a non-numeric score).
    """
    thread = CleanedThread()
    if len(payload) > 0:
        thread.post = clean_post(Listing.from_raw(payload[0]))
    if len(payload) > 1:
        # The comments listing's kind is not checked, only its children.
        thread.comments = _walk(Listing.from_raw(payload[1]).children, 0)
    return thread
