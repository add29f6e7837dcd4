"""
Protocols describing the remote collaborators of a mirror run.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from ..mirror.models import FeedEntry, ListingPost


class FeedSource(Protocol):
    """Anything that can produce the current feed entries."""

    async def fetch_feed(self) -> list[FeedEntry]:
        """Return the feed entries in feed order."""


class CommunityClient(Protocol):
    """Listing, posting and replying against the target community."""

    async def fetch_listing(
        self, board: str, view: str, params: Mapping[str, str | int]
    ) -> list[ListingPost]:
        """Return the posts visible in one listing view."""

    async def create_post(self, board: str, title: str, link: str) -> str:
        """Submit a link post and return its id."""

    async def create_reply(self, post_id: str, body: str) -> str:
        """Reply to a post and return the reply id."""


__all__ = ["CommunityClient", "FeedSource"]
