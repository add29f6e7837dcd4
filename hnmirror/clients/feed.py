"""
RSS client for the Hacker News front page served by hnrss.org.
"""

from __future__ import annotations

import asyncio
import calendar
import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlencode

import feedparser
import httpx

from ..config import FeedSettings
from ..mirror.exceptions import EmptyFeedError, FetchError, ParseError
from ..mirror.models import FeedEntry

LOGGER = logging.getLogger(__name__)


def build_feed_url(settings: FeedSettings) -> str:
    """Return the feed URL with the upstream count/points/comments thresholds."""

    params = urlencode(
        {
            "count": settings.count,
            "points": settings.points,
            "comments": settings.comments,
        }
    )
    return f"{settings.base_url.rstrip('/')}/{settings.feed.strip('/')}?{params}"


def _to_datetime(parsed: time.struct_time | None) -> datetime | None:
    if parsed is None:
        return None
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=UTC)


def parse_feed(content: str) -> list[FeedEntry]:
    """
    Parse RSS/Atom text into feed entries.

    Raises ParseError when the document is not a feed or an entry lacks a
    publish date, and EmptyFeedError when it has no entries.
    """

    parsed = feedparser.parse(content)
    entries: list[dict[str, Any]] = list(parsed.entries)

    if parsed.bozo and not entries:
        raise ParseError(
            "Failed to parse feed.",
            context={"reason": str(parsed.get("bozo_exception", ""))},
        )
    if not entries:
        raise EmptyFeedError("Feed items are empty.")

    items: list[FeedEntry] = []
    for index, entry in enumerate(entries):
        published_at = _to_datetime(
            entry.get("published_parsed") or entry.get("updated_parsed")
        )
        if published_at is None:
            raise ParseError(
                f"Feed item at index {index} has no publish date.",
                context={"index": index, "title": entry.get("title", "")},
            )
        items.append(
            FeedEntry(
                title=(entry.get("title") or "").strip(),
                link=(entry.get("link") or "").strip(),
                guid=(entry.get("id") or "").strip(),
                published_at=published_at,
            )
        )
    return items


class FeedClient:
    """Fetches and parses the configured feed with a bounded timeout."""

    def __init__(
        self,
        settings: FeedSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or FeedSettings()
        self._client = client or httpx.AsyncClient(
            headers={
                "User-Agent": self._settings.user_agent,
                "Accept": "application/rss+xml, application/xml;q=0.9, */*;q=0.8",
            },
            timeout=httpx.Timeout(self._settings.timeout_seconds, connect=5.0),
            follow_redirects=True,
        )
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return build_feed_url(self._settings)

    async def aclose(self) -> None:
        """Close the owned HTTP client."""

        if self._owns_client:
            await self._client.aclose()

    async def fetch_feed(self) -> list[FeedEntry]:
        """Download the feed and return its entries in feed order."""

        url = self.url
        LOGGER.info("Getting feed from %s", url)

        # httpx timeouts bound each phase; the deadline bounds the whole fetch.
        try:
            async with asyncio.timeout(self._settings.timeout_seconds):
                response = await self._client.get(url)
            response.raise_for_status()
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise FetchError(f"Feed request timed out for {url}", context={"url": url}) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Feed request failed for {url}", context={"url": url}) from exc

        entries = parse_feed(response.text)
        LOGGER.info("Feed returned %d entries", len(entries))
        return entries


__all__ = ["FeedClient", "build_feed_url", "parse_feed"]
