"""
Custom exception hierarchy for the mirror pipeline and its collaborators.
"""

from __future__ import annotations

from typing import Any


class MirrorError(Exception):
    """Base exception for all mirror-related errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(MirrorError):
    """Raised when required settings or credentials are missing."""


class FetchError(MirrorError):
    """Raised when the feed cannot be retrieved."""


class ParseError(MirrorError):
    """Raised when the feed payload or one of its entries cannot be parsed."""


class EmptyFeedError(MirrorError):
    """Raised when the feed parsed correctly but contains no entries."""


class ListingError(MirrorError):
    """Raised when a subreddit listing view cannot be fetched."""


class IndexBuildError(MirrorError):
    """Raised when every listing view failed and no baseline index exists."""


class PostingError(MirrorError):
    """Raised when a submission or reply is rejected by the remote service."""


class RunAbortedError(MirrorError):
    """Raised when the posting error budget of a run is exhausted."""


__all__ = [
    "ConfigurationError",
    "EmptyFeedError",
    "FetchError",
    "IndexBuildError",
    "ListingError",
    "MirrorError",
    "ParseError",
    "PostingError",
    "RunAbortedError",
]
