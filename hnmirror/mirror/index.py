"""
Existing-post index built from several subreddit listing views.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..config import ListingView
from .exceptions import IndexBuildError, MirrorError
from .models import ExistingPost, ListingPost

if TYPE_CHECKING:
    from ..clients.base import CommunityClient

LOGGER = logging.getLogger(__name__)

DEFAULT_VIEWS = (ListingView.NEW, ListingView.HOT, ListingView.TOP)


def listing_params(view: ListingView, limit: int, top_time_filter: str) -> dict[str, str | int]:
    """Request parameters for one listing view."""

    params: dict[str, str | int] = {"limit": limit}
    if view is ListingView.TOP:
        params["t"] = top_time_filter
    return params


def _retained(posts: Sequence[ListingPost]) -> list[ExistingPost]:
    return [
        ExistingPost(url=post.url, title=post.title, created_at=post.created_at)
        for post in posts
        if post.url and not post.deleted
    ]


async def build_index(
    client: CommunityClient,
    board: str,
    *,
    views: Sequence[ListingView] = DEFAULT_VIEWS,
    limit: int = 100,
    top_time_filter: str = "week",
) -> list[ExistingPost]:
    """
    Merge the posts of every listing view into one index.

    A failing view is logged and skipped; IndexBuildError is raised only when
    all of them failed.
    """

    LOGGER.info("Getting existing posts from r/%s", board)

    outcomes: list[tuple[ListingView, list[ListingPost] | MirrorError]] = []
    for view in views:
        params = listing_params(view, limit, top_time_filter)
        try:
            outcomes.append((view, await client.fetch_listing(board, view.value, params)))
        except MirrorError as exc:
            LOGGER.warning("Failed to get %s listings: %s", view.value, exc)
            outcomes.append((view, exc))

    posts: list[ExistingPost] = []
    failures: list[MirrorError] = []
    for view, outcome in outcomes:
        if isinstance(outcome, MirrorError):
            failures.append(outcome)
            continue
        posts.extend(_retained(outcome))

    if failures and len(failures) == len(outcomes):
        raise IndexBuildError(
            f"Failed to fetch any listings: {failures[-1]}",
            context={"board": board, "views": [view.value for view, _ in outcomes]},
        ) from failures[-1]

    if posts:
        LOGGER.info(
            "Found %d existing posts across %s",
            len(posts),
            "/".join(view.value for view, _ in outcomes),
        )
    else:
        LOGGER.info("No existing posts found")
    return posts


__all__ = ["DEFAULT_VIEWS", "build_index", "listing_params"]
