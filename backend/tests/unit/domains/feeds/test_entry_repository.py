from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.domains.feeds import EntryRepository, FeedRepository
from feedstore.models import EntryStatus
from tests.utils.feed_builders import (
    create_category,
    create_user,
    entry_payload,
    feed_payload,
)


@pytest.mark.asyncio
async def test_entry_exists_after_create(
    async_session: AsyncSession,
    feed_repo: FeedRepository,
) -> None:
    user = await create_user(async_session)
    category = await create_category(async_session, user)
    feed = feed_payload(user, category)
    await feed_repo.create_feed(feed)

    repo = EntryRepository(async_session)
    entry = entry_payload("hash-1")
    entry.feed_id = feed.id
    entry.user_id = user.id

    assert await repo.entry_exists(entry) is False
    await repo.create_entry(entry)
    await async_session.commit()

    assert entry.id is not None
    assert entry.status == EntryStatus.UNREAD
    assert await repo.entry_exists(entry) is True


@pytest.mark.asyncio
async def test_entry_identity_is_scoped_to_feed(
    async_session: AsyncSession,
    feed_repo: FeedRepository,
) -> None:
    user = await create_user(async_session)
    category = await create_category(async_session, user)
    first = feed_payload(user, category, entries=[entry_payload("shared")])
    second = feed_payload(user, category)
    await feed_repo.create_feed(first)
    await feed_repo.create_feed(second)

    probe = entry_payload("shared")
    probe.feed_id = second.id
    probe.user_id = user.id

    assert await EntryRepository(async_session).entry_exists(probe) is False
