"""
Reddit client built on asyncpraw: listings, link submissions and replies.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import asyncpraw
from asyncpraw import Reddit
from asyncpraw.exceptions import AsyncPRAWException
from asyncprawcore.exceptions import AsyncPrawcoreException

from ..config import ListingSettings, ListingView, RedditSettings
from ..mirror.exceptions import ConfigurationError, ListingError, PostingError
from ..mirror.models import ListingPost
from ..ratelimiter import AsyncRateLimiter
from ..retry import async_retry

LOGGER = logging.getLogger(__name__)

REDDIT_ERRORS = (
    AsyncPRAWException,
    AsyncPrawcoreException,
    asyncio.TimeoutError,
)


def build_reddit_client(settings: RedditSettings) -> Reddit:
    """Create an authenticated script-app client from settings."""

    if not settings.client_id:
        raise ConfigurationError(
            "No Reddit client id provided in environment variable REDDIT__CLIENT_ID"
        )
    if not settings.client_secret:
        raise ConfigurationError(
            "No Reddit secret provided in environment variable REDDIT__CLIENT_SECRET"
        )
    if not settings.password:
        raise ConfigurationError(
            "No Reddit password provided in environment variable REDDIT__PASSWORD"
        )

    return asyncpraw.Reddit(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        username=settings.username,
        password=settings.password,
        user_agent=settings.user_agent,
        timeout=int(settings.timeout_seconds),
    )


def to_listing_post(submission: Any) -> ListingPost:
    """Convert an asyncpraw Submission into a ListingPost."""

    created_utc = getattr(submission, "created_utc", None)
    if isinstance(created_utc, (int, float)):
        created_at = datetime.fromtimestamp(float(created_utc), tz=UTC)
    else:
        created_at = datetime.now(UTC)
    removed = getattr(submission, "removed_by_category", None) is not None
    return ListingPost(
        url=getattr(submission, "url", "") or "",
        title=getattr(submission, "title", "") or "",
        deleted=removed or bool(getattr(submission, "removed", False)),
        created_at=created_at,
    )


class RedditClient:
    """Thin wrapper translating asyncpraw calls and errors for the mirror."""

    def __init__(
        self,
        client: Reddit,
        *,
        listing: ListingSettings | None = None,
        rate_limiter: AsyncRateLimiter | None = None,
    ) -> None:
        self._client = client
        self._listing = listing or ListingSettings()
        self._rate_limiter = rate_limiter

    @classmethod
    def from_settings(
        cls, settings: RedditSettings, listing: ListingSettings | None = None
    ) -> "RedditClient":
        return cls(
            build_reddit_client(settings),
            listing=listing,
            rate_limiter=AsyncRateLimiter(settings.write_interval_seconds),
        )

    async def aclose(self) -> None:
        try:
            await self._client.close()
        except Exception:  # noqa: BLE001
            LOGGER.debug("Failed to close Reddit client cleanly.")

    async def fetch_listing(
        self, board: str, view: str, params: Mapping[str, str | int]
    ) -> list[ListingPost]:
        """Return the submissions of one listing view (``new``, ``hot`` or ``top``)."""

        listing_view = ListingView(view)
        limit = int(params.get("limit", self._listing.limit))

        async def _op() -> list[ListingPost]:
            subreddit = await self._client.subreddit(board)
            if listing_view is ListingView.NEW:
                generator = subreddit.new(limit=limit)
            elif listing_view is ListingView.HOT:
                generator = subreddit.hot(limit=limit)
            else:
                time_filter = str(params.get("t", self._listing.top_time_filter))
                generator = subreddit.top(time_filter=time_filter, limit=limit)
            return [to_listing_post(submission) async for submission in generator]

        try:
            return await async_retry(
                _op,
                retries=self._listing.retries,
                base_delay=self._listing.retry_base_delay,
                retry_exceptions=REDDIT_ERRORS,
                description=f"Fetching {view} listing for r/{board}",
            )
        except REDDIT_ERRORS as exc:
            raise ListingError(
                f"Failed to fetch {view} listing for r/{board}: {exc}",
                context={"board": board, "view": view},
            ) from exc

    async def create_post(self, board: str, title: str, link: str) -> str:
        """Submit a link post and return the new submission id."""

        await self._throttle()
        try:
            subreddit = await self._client.subreddit(board)
            submission = await subreddit.submit(title, url=link)
        except REDDIT_ERRORS as exc:
            raise PostingError(
                f"Failed to create Reddit post: {exc}", context={"board": board, "link": link}
            ) from exc

        post_id = getattr(submission, "id", None)
        if not post_id:
            raise PostingError("No post id returned", context={"board": board, "link": link})
        return str(post_id)

    async def create_reply(self, post_id: str, body: str) -> str:
        """Reply to submission ``post_id`` and return the comment id."""

        await self._throttle()
        try:
            submission = await self._client.submission(id=post_id, fetch=False)
            comment = await submission.reply(body)
        except REDDIT_ERRORS as exc:
            raise PostingError(
                f"Failed to post comment: {exc}", context={"post_id": post_id}
            ) from exc

        comment_id = getattr(comment, "id", None)
        if not comment_id:
            raise PostingError("No comment id returned", context={"post_id": post_id})
        return str(comment_id)

    async def _throttle(self) -> None:
        if self._rate_limiter:
            await self._rate_limiter.acquire("reddit")


__all__ = ["REDDIT_ERRORS", "RedditClient", "build_reddit_client", "to_listing_post"]
