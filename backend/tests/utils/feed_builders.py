"""Builders for users, categories and feed payloads used across tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.domains.feeds import CategoryData, EntryData, FeedData
from feedstore.models import Category, EntryStatus, User


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def create_user(
    session: AsyncSession,
    *,
    username: Optional[str] = None,
    tz: str = "UTC",
    is_admin: bool = False,
) -> User:
    user = User(
        username=username or f"user-{uuid4().hex[:8]}",
        timezone=tz,
        is_admin=is_admin,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_category(session: AsyncSession, user: User, title: str = "All") -> Category:
    category = Category(user_id=user.id, title=title)
    session.add(category)
    await session.commit()
    await session.refresh(category)
    return category


def feed_payload(
    user: User,
    category: Category,
    *,
    url: Optional[str] = None,
    title: str = "Example feed",
    **overrides,
) -> FeedData:
    return FeedData(
        user_id=user.id,
        feed_url=url or f"https://example.com/{uuid4().hex}/feed.xml",
        site_url="https://example.com/",
        title=title,
        category=CategoryData(id=category.id),
        **overrides,
    )


def entry_payload(
    hash_value: Optional[str] = None,
    *,
    status: EntryStatus = EntryStatus.UNREAD,
    published_at: Optional[datetime] = None,
    title: str = "Entry",
) -> EntryData:
    hash_value = hash_value or uuid4().hex
    return EntryData(
        hash=hash_value,
        title=title,
        url=f"https://example.com/posts/{hash_value}",
        status=status,
        published_at=published_at,
    )
