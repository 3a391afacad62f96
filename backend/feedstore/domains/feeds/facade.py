"""
Feeds domain facade.

The facade is the entry point for API layers and background jobs. Per-user
calls go straight to ``FeedRepository``; the process-wide maintenance calls
(global counts, error reset) additionally require the acting user to be an
administrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.core.exceptions import AdminRequiredError
from feedstore.models import User

from .dtos import FeedCounts, FeedData
from .repositories import FeedRepository


@dataclass
class FeedsFacade:
    """Facade coordinating feed repositories."""

    session: AsyncSession

    @property
    def repo(self) -> FeedRepository:
        return FeedRepository(self.session)

    async def _require_admin(self, user_id: int, operation: str) -> None:
        result = await self.session.execute(select(User.is_admin).where(User.id == user_id))
        if not result.scalar_one_or_none():
            logger.warning(f"User #{user_id} denied {operation}")
            raise AdminRequiredError(user_id, operation)

    async def feed_exists(self, user_id: int, feed_id: int) -> bool:
        return await self.repo.feed_exists(user_id, feed_id)

    async def feed_url_exists(self, user_id: int, feed_url: str) -> bool:
        return await self.repo.feed_url_exists(user_id, feed_url)

    async def another_feed_url_exists(self, user_id: int, feed_id: int, feed_url: str) -> bool:
        return await self.repo.another_feed_url_exists(user_id, feed_id, feed_url)

    async def get_feed(self, user_id: int, feed_id: int) -> Optional[FeedData]:
        return await self.repo.fetch_by_id(user_id, feed_id)

    async def list_feeds(self, user_id: int, *, with_counters: bool = False) -> List[FeedData]:
        if with_counters:
            return await self.repo.list_feeds_with_counters(user_id)
        return await self.repo.list_feeds(user_id)

    async def list_category_feeds(self, user_id: int, category_id: int) -> List[FeedData]:
        """Feeds of one category; always carries read/unread counters."""
        return await self.repo.list_feeds_by_category_with_counters(user_id, category_id)

    async def count_feeds(self, user_id: int) -> int:
        return await self.repo.count_feeds(user_id)

    async def count_feeds_with_errors(self, user_id: int) -> int:
        return await self.repo.count_user_feeds_with_errors(user_id)

    async def weekly_entry_count(self, user_id: int, feed_id: int) -> int:
        return await self.repo.weekly_feed_entry_count(user_id, feed_id)

    async def create_feed(self, feed: FeedData) -> FeedData:
        await self.repo.create_feed(feed)
        return feed

    async def update_feed(self, feed: FeedData) -> None:
        await self.repo.update_feed(feed)

    async def record_feed_error(self, feed: FeedData, message: str) -> None:
        """Bump the error counter, stamp the check time and persist both."""
        feed.with_error(message)
        feed.checked_now()
        await self.repo.update_feed_error(feed)

    async def record_feed_success(self, feed: FeedData) -> None:
        feed.reset_error_counter()
        feed.checked_now()
        await self.repo.update_feed_error(feed)

    async def remove_feed(self, user_id: int, feed_id: int) -> None:
        await self.repo.remove_feed(user_id, feed_id)

    # Administrative, process-wide operations

    async def count_all_feeds(self, admin_id: int) -> FeedCounts:
        await self._require_admin(admin_id, "count_all_feeds")
        return await self.repo.count_all_feeds()

    async def count_all_feeds_with_errors(self, admin_id: int) -> int:
        await self._require_admin(admin_id, "count_all_feeds_with_errors")
        return await self.repo.count_all_feeds_with_errors()

    async def reset_feed_errors(self, admin_id: int) -> None:
        await self._require_admin(admin_id, "reset_feed_errors")
        await self.repo.reset_feed_errors()
