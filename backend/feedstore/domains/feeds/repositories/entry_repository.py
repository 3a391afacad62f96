"""Entry persistence helpers used while creating feeds."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import and_, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.core.exceptions import FeedStoreError
from feedstore.models import Entry, EntryStatus
from feedstore.utils.datetime_utils import to_naive_utc, utc_now_naive

from ..dtos import EntryData


class EntryRepository:
    """
    Existence check and insert for entries.

    Both methods run on the caller's session so they share whatever
    transaction the caller has opened.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def entry_exists(self, entry: EntryData) -> bool:
        stmt = select(Entry.id).where(
            and_(
                Entry.user_id == entry.user_id,
                Entry.feed_id == entry.feed_id,
                Entry.hash == entry.hash,
            )
        )
        try:
            result = await self._session.execute(stmt.limit(1))
        except SQLAlchemyError as exc:
            raise FeedStoreError(
                f"unable to check if entry exists: {exc}",
                operation="entry_exists",
                feed_id=entry.feed_id,
            ) from exc
        return result.first() is not None

    async def create_entry(self, entry: EntryData) -> None:
        now = utc_now_naive()
        stmt = (
            insert(Entry)
            .values(
                user_id=entry.user_id,
                feed_id=entry.feed_id,
                hash=entry.hash,
                title=entry.title,
                url=entry.url,
                comments_url=entry.comments_url,
                author=entry.author,
                content=entry.content,
                published_at=to_naive_utc(entry.published_at) or now,
                status=entry.status or EntryStatus.UNREAD,
                created_at=now,
                changed_at=now,
            )
            .returning(Entry.id, Entry.status)
        )
        try:
            result = await self._session.execute(stmt)
            row = result.one()
        except SQLAlchemyError as exc:
            raise FeedStoreError(
                f"unable to create entry {entry.url!r} (feed #{entry.feed_id}): {exc}",
                operation="create_entry",
                feed_id=entry.feed_id,
            ) from exc

        entry.id = row.id
        entry.status = EntryStatus(row.status)
        logger.debug(f"Created entry #{entry.id} for feed #{entry.feed_id}")
