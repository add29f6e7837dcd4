"""
Data structures shared by the feed client, the Reddit client and the processor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .urls import normalize_url


@dataclass(slots=True, frozen=True)
class FeedEntry:
    """A single item of the upstream feed."""

    title: str
    link: str
    guid: str
    published_at: datetime | None


@dataclass(slots=True, frozen=True)
class ListingPost:
    """A submission as returned by a subreddit listing view."""

    url: str
    title: str
    deleted: bool
    created_at: datetime


@dataclass(slots=True, frozen=True)
class ExistingPost:
    """A post already present in the subreddit, used for duplicate checks."""

    url: str
    title: str
    created_at: datetime

    @property
    def normalized_url(self) -> str:
        """Canonical key of ``url``; recomputed on every access."""

        return normalize_url(self.url)


@dataclass(slots=True)
class RunState:
    """Mutable bookkeeping owned by a single processor run."""

    existing_posts: list[ExistingPost]
    cutoff_time: datetime
    processed_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    duplicate_count: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class RunResult:
    """Outcome of a run that visited every entry without aborting."""

    processed_count: int
    skipped_count: int
    duplicate_count: int
    error_count: int
    index_size: int


__all__ = ["ExistingPost", "FeedEntry", "ListingPost", "RunResult", "RunState"]
