"""
Duplicate detection against the existing-post index.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from .models import ExistingPost
from .titles import similar

LOGGER = logging.getLogger(__name__)


def is_duplicate(
    normalized_url: str,
    title: str,
    existing_posts: Iterable[ExistingPost],
    cutoff_time: datetime,
) -> bool:
    """
    Return True if a post created at or after ``cutoff_time`` has the same
    normalized URL or a similar title.
    """

    title_lower = title.lower()
    for post in existing_posts:
        if post.created_at < cutoff_time:
            continue

        if post.normalized_url == normalized_url:
            return True

        if similar(title_lower, post.title.lower()):
            LOGGER.info("Similar title found: '%s' vs '%s'", title, post.title)
            return True

    return False


__all__ = ["is_duplicate"]
