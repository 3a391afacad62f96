from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.domains.feeds import FeedCounterRepository, FeedRepository
from feedstore.models import EntryStatus
from tests.utils.feed_builders import (
    create_category,
    create_user,
    entry_payload,
    feed_payload,
)


@pytest.mark.asyncio
async def test_counters_ignore_other_statuses(
    async_session: AsyncSession,
    feed_repo: FeedRepository,
) -> None:
    user = await create_user(async_session)
    category = await create_category(async_session, user)
    feed = feed_payload(
        user,
        category,
        entries=[
            entry_payload(status=EntryStatus.READ),
            entry_payload(status=EntryStatus.UNREAD),
            entry_payload(status=EntryStatus.REMOVED),
            entry_payload(status=EntryStatus.REMOVED),
        ],
    )
    await feed_repo.create_feed(feed)

    read_counters, unread_counters = await FeedCounterRepository(async_session).fetch_counters(user.id)

    assert read_counters == {feed.id: 1}
    assert unread_counters == {feed.id: 1}


@pytest.mark.asyncio
async def test_counters_are_empty_without_entries(
    async_session: AsyncSession,
    feed_repo: FeedRepository,
) -> None:
    user = await create_user(async_session)
    category = await create_category(async_session, user)
    await feed_repo.create_feed(feed_payload(user, category))

    read_counters, unread_counters = await FeedCounterRepository(async_session).fetch_counters(user.id)

    assert read_counters == {}
    assert unread_counters == {}


@pytest.mark.asyncio
async def test_counters_scope_by_user_and_category(
    async_session: AsyncSession,
    feed_repo: FeedRepository,
) -> None:
    user = await create_user(async_session)
    other = await create_user(async_session)
    news = await create_category(async_session, user, "News")
    blogs = await create_category(async_session, user, "Blogs")
    other_category = await create_category(async_session, other)

    news_feed = feed_payload(user, news, entries=[entry_payload(status=EntryStatus.READ)])
    blog_feed = feed_payload(
        user,
        blogs,
        entries=[entry_payload(status=EntryStatus.UNREAD), entry_payload(status=EntryStatus.UNREAD)],
    )
    foreign_feed = feed_payload(other, other_category, entries=[entry_payload(status=EntryStatus.READ)])
    for feed in (news_feed, blog_feed, foreign_feed):
        await feed_repo.create_feed(feed)

    repo = FeedCounterRepository(async_session)
    read_all, unread_all = await repo.fetch_counters(user.id)
    read_blogs, unread_blogs = await repo.fetch_counters(user.id, blogs.id)

    assert read_all == {news_feed.id: 1}
    assert unread_all == {blog_feed.id: 2}
    assert read_blogs == {}
    assert unread_blogs == {blog_feed.id: 2}
