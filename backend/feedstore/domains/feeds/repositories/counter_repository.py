"""Read/unread counters per feed."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.core.exceptions import FeedStoreError
from feedstore.models import Entry, EntryStatus, Feed

FeedCounters = Dict[int, int]

COUNTED_STATUSES = (EntryStatus.READ, EntryStatus.UNREAD)


class FeedCounterRepository:
    """
    Aggregates entry statuses per feed.

    The query groups by (feed, status); rows are pivoted into two mappings
    keyed by feed id. A feed missing from a mapping has a count of zero.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _build_query(self, user_id: int, category_id: Optional[int] = None):
        criteria = [
            Entry.user_id == user_id,
            Entry.status.in_(COUNTED_STATUSES),
        ]
        stmt = select(Entry.feed_id, Entry.status, func.count().label("count")).select_from(Entry)
        if category_id is not None:
            stmt = stmt.outerjoin(Feed, Feed.id == Entry.feed_id)
            criteria.append(Feed.category_id == category_id)
        return stmt.where(and_(*criteria)).group_by(Entry.feed_id, Entry.status)

    async def fetch_counters(
        self,
        user_id: int,
        category_id: Optional[int] = None,
    ) -> Tuple[FeedCounters, FeedCounters]:
        """Return ``(read_counters, unread_counters)`` for the user's feeds."""
        try:
            result = await self._session.execute(self._build_query(user_id, category_id))
            rows = result.all()
        except SQLAlchemyError as exc:
            raise FeedStoreError(
                f"unable to fetch feed counts: {exc}",
                operation="fetch_counters",
            ) from exc

        read_counters: FeedCounters = {}
        unread_counters: FeedCounters = {}
        for feed_id, status, count in rows:
            if status == EntryStatus.READ:
                read_counters[feed_id] = count
            elif status == EntryStatus.UNREAD:
                unread_counters[feed_id] = count

        return read_counters, unread_counters
