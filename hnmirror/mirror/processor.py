"""
Feed-to-post orchestration.

A run builds the existing-post index once, then walks the feed entries in
order. Each entry is validated, checked for duplicates, posted, and appended
to the in-memory index so that later entries of the same run see it. Entries
are handled strictly one at a time because the duplicate check depends on
every earlier post being in the index.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from ..config import ListingSettings, MirrorSettings
from .duplicates import is_duplicate
from .exceptions import MirrorError, PostingError, RunAbortedError
from .index import build_index
from .models import ExistingPost, FeedEntry, RunResult, RunState
from .urls import normalize_url

if TYPE_CHECKING:
    from ..clients.base import CommunityClient

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


class EntryOutcome(str, Enum):
    """What happened to a single feed entry."""

    POSTED = "posted"
    SKIPPED = "skipped"
    DUPLICATE = "duplicate"
    FAILED = "failed"


class FeedProcessor:
    """Mirrors feed entries into a subreddit without posting duplicates."""

    def __init__(
        self,
        client: CommunityClient,
        board: str,
        *,
        mirror: MirrorSettings | None = None,
        listing: ListingSettings | None = None,
        discussion_host: str = "news.ycombinator.com",
        clock: Clock = utcnow,
    ) -> None:
        if not board:
            raise ValueError("board must be provided.")
        self._client = client
        self._board = board
        self._mirror = mirror or MirrorSettings()
        self._listing = listing or ListingSettings()
        self._discussion_host = discussion_host
        self._clock = clock

    @property
    def recency_window(self) -> timedelta:
        return timedelta(hours=self._mirror.recency_window_hours)

    async def run(self, entries: Sequence[FeedEntry]) -> RunResult:
        """
        Process ``entries`` in order and return the run counters.

        Raises IndexBuildError when no listing view could be fetched and
        RunAbortedError once the posting error budget is exhausted. Posts made
        before an abort are kept.
        """

        LOGGER.info("Processing feed with %d entries", len(entries))

        existing_posts = await build_index(
            self._client,
            self._board,
            views=self._listing.views,
            limit=self._listing.limit,
            top_time_filter=self._listing.top_time_filter,
        )
        state = RunState(
            existing_posts=existing_posts,
            cutoff_time=self._clock() - self.recency_window,
        )
        index_size = len(existing_posts)

        for position, entry in enumerate(entries):
            outcome = await self._process_entry(state, position, entry)
            if outcome is EntryOutcome.FAILED and state.error_count >= self._mirror.max_errors:
                raise RunAbortedError(
                    f"Too many posting errors ({state.error_count}): aborting",
                    context={
                        "processed": state.processed_count,
                        "errors": list(state.errors),
                        "position": position,
                    },
                )

        LOGGER.info("Successfully processed %d items", state.processed_count)
        return RunResult(
            processed_count=state.processed_count,
            skipped_count=state.skipped_count,
            duplicate_count=state.duplicate_count,
            error_count=state.error_count,
            index_size=index_size,
        )

    async def _process_entry(
        self, state: RunState, position: int, entry: FeedEntry
    ) -> EntryOutcome:
        if not self._is_valid(position, entry):
            state.skipped_count += 1
            return EntryOutcome.SKIPPED

        normalized_link = normalize_url(entry.link)
        if is_duplicate(normalized_link, entry.title, state.existing_posts, state.cutoff_time):
            LOGGER.info("Post already exists, skipping: %s", entry.link)
            state.duplicate_count += 1
            return EntryOutcome.DUPLICATE

        try:
            outcome = await self._post_entry(state, entry, normalized_link)
        except PostingError as exc:
            state.error_count += 1
            state.errors.append(str(exc))
            LOGGER.error("Error posting item %d (%s): %s", position, entry.title, exc)
            return EntryOutcome.FAILED

        if outcome is EntryOutcome.POSTED:
            state.processed_count += 1
        else:
            state.duplicate_count += 1
        return outcome

    def _is_valid(self, position: int, entry: FeedEntry) -> bool:
        if entry.published_at is None:
            LOGGER.warning("Skipping item %d with no publish date: %s", position, entry.title)
            return False
        if not entry.link:
            LOGGER.warning("Skipping item %d with empty link: %s", position, entry.title)
            return False
        if not entry.title:
            LOGGER.warning("Skipping item %d with empty title: %s", position, entry.link)
            return False
        return True

    async def _post_entry(
        self, state: RunState, entry: FeedEntry, normalized_link: str
    ) -> EntryOutcome:
        LOGGER.info("Posting: %s", entry.title)

        # The index may have grown since the first check.
        if is_duplicate(normalized_link, entry.title, state.existing_posts, state.cutoff_time):
            LOGGER.info("Post already exists (double-check), skipping: %s", entry.link)
            return EntryOutcome.DUPLICATE

        post_id = await self._client.create_post(self._board, entry.title, entry.link)
        state.existing_posts.append(
            ExistingPost(url=entry.link, title=entry.title, created_at=self._clock())
        )

        await self._link_discussion(post_id, entry)
        return EntryOutcome.POSTED

    async def _link_discussion(self, post_id: str, entry: FeedEntry) -> None:
        """Reply with the discussion link; failures here never count as errors."""

        if self._discussion_host in entry.link:
            return

        discussion_link = entry.guid
        if not discussion_link:
            LOGGER.warning(
                "No discussion link found in GUID for '%s', skipping comment", entry.title
            )
            return
        if self._discussion_host not in discussion_link:
            LOGGER.warning(
                "GUID is not a discussion link for '%s': %s, skipping comment",
                entry.title,
                discussion_link,
            )
            return

        body = self._mirror.reply_template.format(link=discussion_link)
        try:
            await self._client.create_reply(post_id, body)
        except MirrorError as exc:
            LOGGER.warning("Failed to post discussion comment for '%s': %s", entry.title, exc)


__all__ = ["EntryOutcome", "FeedProcessor", "utcnow"]
