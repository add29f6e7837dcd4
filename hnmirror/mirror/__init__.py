"""
Deduplication engine and feed-to-post pipeline.
"""

from .duplicates import is_duplicate
from .exceptions import (
    ConfigurationError,
    EmptyFeedError,
    FetchError,
    IndexBuildError,
    ListingError,
    MirrorError,
    ParseError,
    PostingError,
    RunAbortedError,
)
from .index import build_index
from .models import ExistingPost, FeedEntry, ListingPost, RunResult, RunState
from .processor import EntryOutcome, FeedProcessor
from .titles import similar
from .urls import normalize_community_url, normalize_url

__all__ = [
    "ConfigurationError",
    "EmptyFeedError",
    "EntryOutcome",
    "ExistingPost",
    "FeedEntry",
    "FeedProcessor",
    "FetchError",
    "IndexBuildError",
    "ListingError",
    "ListingPost",
    "MirrorError",
    "ParseError",
    "PostingError",
    "RunAbortedError",
    "RunResult",
    "RunState",
    "build_index",
    "is_duplicate",
    "normalize_community_url",
    "normalize_url",
    "similar",
]
