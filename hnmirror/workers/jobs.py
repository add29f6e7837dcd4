"""
The mirror job: fetch the feed, then hand it to the FeedProcessor.

Any run-fatal condition (feed failure, no listing baseline, exhausted error
budget, missing credentials) ends the run with a failed TaskResult carrying a
human-readable cause. Posts made before a failure are kept.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import UTC, datetime

from ..clients.base import CommunityClient, FeedSource
from ..clients.feed import FeedClient
from ..clients.reddit import RedditClient
from ..config import Settings
from ..mirror.exceptions import (
    ConfigurationError,
    EmptyFeedError,
    FetchError,
    IndexBuildError,
    MirrorError,
    ParseError,
    RunAbortedError,
)
from ..mirror.processor import FeedProcessor
from .types import TaskResult

LOGGER = logging.getLogger(__name__)

TASK_NAME = "mirror_feed"


def _failure(
    message: str, started_at: datetime, details: dict[str, object] | None = None
) -> TaskResult:
    LOGGER.error(message)
    return TaskResult(
        task_name=TASK_NAME,
        success=False,
        message=message,
        details=dict(details or {}),
        started_at=started_at,
        finished_at=datetime.now(UTC),
    )


async def mirror_feed(
    settings: Settings,
    *,
    feed: FeedSource,
    community: CommunityClient,
) -> TaskResult:
    """Run one mirror pass with the given collaborators."""

    started_at = datetime.now(UTC)
    LOGGER.info("Starting mirror run into r/%s", settings.reddit.subreddit)

    try:
        entries = await feed.fetch_feed()
    except (FetchError, ParseError, EmptyFeedError) as exc:
        return _failure(f"Error getting feed: {exc}", started_at, exc.context)

    processor = FeedProcessor(
        community,
        settings.reddit.subreddit,
        mirror=settings.mirror,
        listing=settings.listing,
        discussion_host=settings.feed.discussion_host,
    )

    try:
        result = await processor.run(entries)
    except IndexBuildError as exc:
        return _failure(f"Error getting existing posts: {exc}", started_at, exc.context)
    except RunAbortedError as exc:
        return _failure(f"Error processing: {exc}", started_at, exc.context)

    return TaskResult(
        task_name=TASK_NAME,
        success=True,
        message=f"Mirrored {result.processed_count} of {len(entries)} feed entries",
        details=asdict(result),
        started_at=started_at,
        finished_at=datetime.now(UTC),
    )


async def run_mirror(settings: Settings) -> TaskResult:
    """Build the real clients from settings, run once, and close them."""

    started_at = datetime.now(UTC)
    try:
        community = RedditClient.from_settings(settings.reddit, settings.listing)
    except ConfigurationError as exc:
        return _failure(f"Error creating Reddit client: {exc}", started_at)

    feed = FeedClient(settings.feed)
    try:
        return await mirror_feed(settings, feed=feed, community=community)
    except MirrorError as exc:
        return _failure(f"Mirror run failed: {exc}", started_at, exc.context)
    finally:
        await feed.aclose()
        await community.aclose()


__all__ = ["TASK_NAME", "mirror_feed", "run_mirror"]
