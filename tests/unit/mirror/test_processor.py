"""
Unit tests for FeedProcessor.

The fake community client records every submission attempt, so the tests
assert on what would have been posted to Reddit.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from hnmirror.config import MirrorSettings
from hnmirror.mirror.exceptions import IndexBuildError, RunAbortedError
from hnmirror.mirror.processor import FeedProcessor
from tests.factories import FeedEntryFactory, ListingPostFactory
from tests.fakes import FakeCommunityClient


def make_processor(client: FakeCommunityClient, clock, **mirror_overrides) -> FeedProcessor:
    return FeedProcessor(
        client,
        "hackernews",
        mirror=MirrorSettings(**mirror_overrides),
        clock=clock,
    )


class TestFeedProcessor:
    """End-to-end runs of the processor against an in-memory client."""

    @pytest.mark.asyncio
    async def test_posts_every_new_entry_in_feed_order(self, community, clock) -> None:
        entries = FeedEntryFactory.build_batch(3)

        result = await make_processor(community, clock).run(entries)

        assert result.processed_count == 3
        assert community.attempted_links == [entry.link for entry in entries]

    @pytest.mark.asyncio
    async def test_same_run_duplicate_is_skipped(self, community, clock) -> None:
        """Entries 2 and 4 normalize to the same URL: only 4 posts are attempted."""
        entries = FeedEntryFactory.build_batch(5)
        entries[1] = FeedEntryFactory(link="http://www.example.com/story/")
        entries[3] = FeedEntryFactory(link="https://example.com/story#comments")

        result = await make_processor(community, clock).run(entries)

        assert len(community.post_attempts) == 4
        assert entries[3].link not in community.attempted_links
        assert result.processed_count == 4
        assert result.duplicate_count == 1
        assert result.error_count == 0

    @pytest.mark.asyncio
    async def test_retitled_repost_in_same_run_is_skipped(self, community, clock) -> None:
        first = FeedEntryFactory(title="Postgres 18 released with async IO support")
        second = FeedEntryFactory(title="Postgres 18 Released With Async IO Support (2025)")

        result = await make_processor(community, clock).run([first, second])

        assert community.attempted_links == [first.link]
        assert result.duplicate_count == 1

    @pytest.mark.asyncio
    async def test_existing_subreddit_post_is_skipped(self, clock, now: datetime) -> None:
        entry = FeedEntryFactory(link="https://example.com/already-posted")
        client = FakeCommunityClient(
            {
                "new": [
                    ListingPostFactory(
                        url="https://www.example.com/already-posted/",
                        created_at=now - timedelta(hours=2),
                    )
                ]
            }
        )

        result = await make_processor(client, clock).run([entry])

        assert client.post_attempts == []
        assert result.processed_count == 0
        assert result.index_size == 1

    @pytest.mark.asyncio
    async def test_old_subreddit_post_does_not_block_repost(self, clock, now: datetime) -> None:
        entry = FeedEntryFactory(link="https://example.com/evergreen")
        client = FakeCommunityClient(
            {
                "top": [
                    ListingPostFactory(
                        url="https://example.com/evergreen", created_at=now - timedelta(days=3)
                    )
                ]
            }
        )

        result = await make_processor(client, clock).run([entry])

        assert client.attempted_links == [entry.link]
        assert result.processed_count == 1

    @pytest.mark.asyncio
    async def test_invalid_entries_are_skipped_without_errors(self, community, clock) -> None:
        entries = [
            FeedEntryFactory(published_at=None),
            FeedEntryFactory(link=""),
            FeedEntryFactory(title=""),
            FeedEntryFactory(),
        ]

        result = await make_processor(community, clock).run(entries)

        assert community.attempted_links == [entries[3].link]
        assert result.skipped_count == 3
        assert result.error_count == 0
        assert result.processed_count == 1

    @pytest.mark.asyncio
    async def test_aborts_after_three_posting_failures(self, clock) -> None:
        """Three failures among five entries stop the run; entry 5 is never tried."""
        entries = FeedEntryFactory.build_batch(5)
        client = FakeCommunityClient(failing_links={entry.link for entry in entries[1:4]})

        with pytest.raises(RunAbortedError, match=r"Too many posting errors \(3\)") as excinfo:
            await make_processor(client, clock).run(entries)

        assert client.attempted_links == [entry.link for entry in entries[:4]]
        assert entries[4].link not in client.attempted_links
        assert excinfo.value.context["processed"] == 1
        assert len(excinfo.value.context["errors"]) == 3

    @pytest.mark.asyncio
    async def test_failures_below_budget_do_not_abort(self, clock) -> None:
        entries = FeedEntryFactory.build_batch(4)
        client = FakeCommunityClient(failing_links={entries[0].link, entries[2].link})

        result = await make_processor(client, clock).run(entries)

        assert len(client.post_attempts) == 4
        assert result.processed_count == 2
        assert result.error_count == 2

    @pytest.mark.asyncio
    async def test_configurable_error_budget(self, clock) -> None:
        entries = FeedEntryFactory.build_batch(3)
        client = FakeCommunityClient(failing_links={entries[0].link})

        with pytest.raises(RunAbortedError):
            await make_processor(client, clock, max_errors=1).run(entries)

        assert len(client.post_attempts) == 1

    @pytest.mark.asyncio
    async def test_failed_post_is_not_indexed(self, clock) -> None:
        """A rejected submission does not block a later identical entry."""
        failing = FeedEntryFactory(link="https://example.com/flaky")
        retry = FeedEntryFactory(link="https://example.com/flaky", title="Another title")
        client = FakeCommunityClient(failing_links={"https://example.com/flaky"})

        result = await make_processor(client, clock).run([failing, retry])

        assert len(client.post_attempts) == 2
        assert result.error_count == 2

    @pytest.mark.asyncio
    async def test_index_build_failure_fails_run(self, clock) -> None:
        client = FakeCommunityClient(failing_views={"new", "hot", "top"})

        with pytest.raises(IndexBuildError):
            await make_processor(client, clock).run(FeedEntryFactory.build_batch(2))

        assert client.post_attempts == []


class TestDiscussionReply:
    """The secondary reply linking the Hacker News discussion."""

    @pytest.mark.asyncio
    async def test_reply_links_discussion(self, community, clock) -> None:
        entry = FeedEntryFactory(guid="https://news.ycombinator.com/item?id=45000000")

        await make_processor(community, clock).run([entry])

        assert community.replies == [
            ("p1", "Discussion on HN: https://news.ycombinator.com/item?id=45000000")
        ]

    @pytest.mark.asyncio
    async def test_no_reply_for_discussion_links(self, community, clock) -> None:
        """Ask HN style entries already point at the discussion."""
        entry = FeedEntryFactory(
            link="https://news.ycombinator.com/item?id=45000001",
            guid="https://news.ycombinator.com/item?id=45000001",
        )

        result = await make_processor(community, clock).run([entry])

        assert result.processed_count == 1
        assert community.replies == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("guid", ["", "tag:example.com,2025:1234"])
    async def test_unresolvable_guid_is_tolerated(
        self, community, clock, guid: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        entry = FeedEntryFactory(guid=guid)

        result = await make_processor(community, clock).run([entry])

        assert result.processed_count == 1
        assert result.error_count == 0
        assert community.replies == []
        assert "skipping comment" in caplog.text

    @pytest.mark.asyncio
    async def test_reply_failure_is_tolerated(self, clock) -> None:
        client = FakeCommunityClient(fail_replies=True)
        entries = FeedEntryFactory.build_batch(4)

        result = await make_processor(client, clock).run(entries)

        assert result.processed_count == 4
        assert result.error_count == 0

    @pytest.mark.asyncio
    async def test_custom_reply_template(self, community, clock) -> None:
        entry = FeedEntryFactory(guid="https://news.ycombinator.com/item?id=1")

        await make_processor(community, clock, reply_template="Comments: {link}").run([entry])

        assert community.replies[0][1] == "Comments: https://news.ycombinator.com/item?id=1"


def test_processor_requires_board(community) -> None:
    with pytest.raises(ValueError):
        FeedProcessor(community, "")
