"""
SQLAlchemy repository for feed persistence.

Feeds are read through one join (categories, feed icons and users, all
outer-joined) and handed out as ``FeedData`` values whose timestamps are
already converted to the owner's timezone. Read/unread counters come from a
second, independent aggregate query and are merged in memory; the two
statements are not wrapped in a shared snapshot, so a concurrent write between
them can leave a counter slightly behind the row set.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedstore.core.config import settings
from feedstore.core.exceptions import FeedNotRemovedError, FeedStoreError
from feedstore.models import Category, Entry, Feed, FeedIcon, User
from feedstore.utils.datetime_utils import convert_timezone, to_naive_utc, utc_now_naive

from ..dtos import (
    MAX_PARSING_ERROR,
    CategoryData,
    EntryData,
    FeedCounts,
    FeedData,
    FeedIconData,
)
from .counter_repository import FeedCounters, FeedCounterRepository
from .entry_repository import EntryRepository

WEEKLY_WINDOW = timedelta(days=7)


class FeedRepository:
    """Encapsulates read and write operations on feeds, scoped by owning user."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._counters = FeedCounterRepository(session)
        self._entries = EntryRepository(session)

    async def _execute(self, stmt, *, operation: str, error: str, feed_id: Optional[int] = None):
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(f"{operation} failed: {exc}")
            raise FeedStoreError(f"{error}: {exc}", operation=operation, feed_id=feed_id) from exc

    async def _write(self, stmt, *, operation: str, error: str, feed_id: Optional[int] = None):
        """Execute and commit a mutation, rolling back on failure."""
        try:
            result = await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error(f"{operation} failed: {exc}")
            raise FeedStoreError(f"{error}: {exc}", operation=operation, feed_id=feed_id) from exc
        return result

    async def _count(self, stmt, *, operation: str, error: str) -> int:
        result = await self._execute(stmt, operation=operation, error=error)
        return result.scalar_one() or 0

    async def _flag(self, criteria, *, operation: str, strict: bool) -> bool:
        stmt = select(Feed.id).where(and_(*criteria)).limit(1)
        # A savepoint keeps a failed check from aborting the caller's transaction.
        try:
            async with self._session.begin_nested():
                result = await self._execute(
                    stmt, operation=operation, error="unable to check feed existence"
                )
                found = result.first() is not None
        except FeedStoreError:
            if strict:
                raise
            logger.warning(f"{operation} could not be evaluated; assuming no match")
            return False
        return found

    async def feed_exists(self, user_id: int, feed_id: int, *, strict: bool = False) -> bool:
        """
        Check if the given feed belongs to the user.

        With ``strict=False`` a database failure reads as ``False``; pass
        ``strict=True`` to get a ``FeedStoreError`` instead.
        """
        return await self._flag(
            [Feed.user_id == user_id, Feed.id == feed_id],
            operation="feed_exists",
            strict=strict,
        )

    async def feed_url_exists(self, user_id: int, feed_url: str, *, strict: bool = False) -> bool:
        return await self._flag(
            [Feed.user_id == user_id, Feed.feed_url == feed_url],
            operation="feed_url_exists",
            strict=strict,
        )

    async def another_feed_url_exists(
        self,
        user_id: int,
        feed_id: int,
        feed_url: str,
        *,
        strict: bool = False,
    ) -> bool:
        """Same as ``feed_url_exists`` but ignores the feed being edited."""
        return await self._flag(
            [Feed.id != feed_id, Feed.user_id == user_id, Feed.feed_url == feed_url],
            operation="another_feed_url_exists",
            strict=strict,
        )

    async def count_all_feeds(self) -> FeedCounts:
        """Count every feed in the store, split by the disabled flag."""
        stmt = select(Feed.disabled, func.count()).group_by(Feed.disabled)
        result = await self._execute(stmt, operation="count_all_feeds", error="unable to count feeds")

        counts = FeedCounts()
        for disabled, count in result.all():
            if disabled:
                counts.disabled = count
            else:
                counts.enabled = count
        return counts

    async def count_feeds(self, user_id: int) -> int:
        stmt = select(func.count()).select_from(Feed).where(Feed.user_id == user_id)
        return await self._count(stmt, operation="count_feeds", error="unable to count user feeds")

    async def count_user_feeds_with_errors(self, user_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(Feed)
            .where(
                and_(
                    Feed.user_id == user_id,
                    Feed.parsing_error_count >= MAX_PARSING_ERROR,
                )
            )
        )
        return await self._count(
            stmt,
            operation="count_user_feeds_with_errors",
            error="unable to count user feeds with errors",
        )

    async def count_all_feeds_with_errors(self) -> int:
        stmt = select(func.count()).select_from(Feed).where(Feed.parsing_error_count >= MAX_PARSING_ERROR)
        return await self._count(
            stmt,
            operation="count_all_feeds_with_errors",
            error="unable to count feeds with errors",
        )

    async def weekly_feed_entry_count(
        self,
        user_id: int,
        feed_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        """Number of entries published during the last seven days, ``now`` included."""
        upper = to_naive_utc(now) if now is not None else utc_now_naive()
        lower = upper - WEEKLY_WINDOW
        stmt = (
            select(func.count())
            .select_from(Entry)
            .where(
                and_(
                    Entry.user_id == user_id,
                    Entry.feed_id == feed_id,
                    Entry.published_at.between(lower, upper),
                )
            )
        )
        result = await self._execute(
            stmt,
            operation="weekly_feed_entry_count",
            error=f"unable to fetch weekly count for feed #{feed_id}",
            feed_id=feed_id,
        )
        return result.scalar() or 0

    @staticmethod
    def _feed_query():
        return (
            select(
                Feed.id,
                Feed.feed_url,
                Feed.site_url,
                Feed.title,
                Feed.etag_header,
                Feed.last_modified_header,
                Feed.user_id,
                Feed.checked_at,
                Feed.next_check_at,
                Feed.parsing_error_count,
                Feed.parsing_error_msg,
                Feed.scraper_rules,
                Feed.rewrite_rules,
                Feed.crawler,
                Feed.user_agent,
                Feed.username,
                Feed.password,
                Feed.ignore_http_cache,
                Feed.fetch_via_proxy,
                Feed.disabled,
                Feed.category_id,
                Category.title.label("category_title"),
                FeedIcon.icon_id,
                User.timezone.label("user_timezone"),
            )
            .select_from(Feed)
            .outerjoin(Category, Category.id == Feed.category_id)
            .outerjoin(FeedIcon, FeedIcon.feed_id == Feed.id)
            .outerjoin(User, User.id == Feed.user_id)
        )

    @staticmethod
    def _ordered(stmt):
        return stmt.order_by(Feed.parsing_error_count.desc(), func.lower(Feed.title).asc())

    @staticmethod
    def _row_to_feed(row) -> FeedData:
        tz_name = row.user_timezone
        feed = FeedData(
            id=row.id,
            user_id=row.user_id,
            feed_url=row.feed_url,
            site_url=row.site_url,
            title=row.title,
            etag_header=row.etag_header,
            last_modified_header=row.last_modified_header,
            checked_at=convert_timezone(tz_name, row.checked_at, settings.DEFAULT_TIMEZONE),
            next_check_at=convert_timezone(tz_name, row.next_check_at, settings.DEFAULT_TIMEZONE),
            parsing_error_count=row.parsing_error_count,
            parsing_error_msg=row.parsing_error_msg,
            scraper_rules=row.scraper_rules,
            rewrite_rules=row.rewrite_rules,
            crawler=row.crawler,
            user_agent=row.user_agent,
            username=row.username,
            password=row.password,
            ignore_http_cache=row.ignore_http_cache,
            fetch_via_proxy=row.fetch_via_proxy,
            disabled=row.disabled,
            category=CategoryData(
                id=row.category_id,
                title=row.category_title or "",
                user_id=row.user_id,
            ),
        )
        if row.icon_id is not None:
            feed.icon = FeedIconData(feed_id=feed.id, icon_id=row.icon_id)
        return feed

    async def _fetch_feeds(self, stmt) -> List[FeedData]:
        result = await self._execute(stmt, operation="fetch_feeds", error="unable to fetch feeds")
        return [self._row_to_feed(row) for row in result.all()]

    async def list_feeds(self, user_id: int) -> List[FeedData]:
        """All feeds of the user, broken feeds first, then by title."""
        stmt = self._ordered(self._feed_query().where(Feed.user_id == user_id))
        return await self._fetch_feeds(stmt)

    async def list_feeds_with_counters(self, user_id: int) -> List[FeedData]:
        stmt = self._ordered(self._feed_query().where(Feed.user_id == user_id))
        feeds = await self._fetch_feeds(stmt)
        return self._apply_counters(feeds, await self._counters.fetch_counters(user_id))

    async def list_feeds_by_category_with_counters(
        self,
        user_id: int,
        category_id: int,
    ) -> List[FeedData]:
        stmt = self._ordered(
            self._feed_query().where(
                and_(
                    Feed.user_id == user_id,
                    Feed.category_id == category_id,
                )
            )
        )
        feeds = await self._fetch_feeds(stmt)
        return self._apply_counters(feeds, await self._counters.fetch_counters(user_id, category_id))

    @staticmethod
    def _apply_counters(
        feeds: List[FeedData],
        counters: Tuple[FeedCounters, FeedCounters],
    ) -> List[FeedData]:
        """Attach counters by feed id; a feed absent from a mapping counts zero."""
        read_counters, unread_counters = counters
        for feed in feeds:
            feed.read_count = read_counters.get(feed.id, 0)
            feed.unread_count = unread_counters.get(feed.id, 0)
        return feeds

    async def fetch_by_id(self, user_id: int, feed_id: int) -> Optional[FeedData]:
        """Return the feed, or ``None`` when the user owns no feed with this id."""
        stmt = self._feed_query().where(
            and_(
                Feed.user_id == user_id,
                Feed.id == feed_id,
            )
        )
        result = await self._execute(
            stmt,
            operation="fetch_by_id",
            error=f"unable to fetch feed #{feed_id}",
            feed_id=feed_id,
        )
        row = result.first()
        if row is None:
            return None
        return self._row_to_feed(row)

    async def create_feed(self, feed: FeedData) -> None:
        """
        Insert the feed and its pending entries.

        Each entry gets its own transaction (check, insert if absent, commit).
        A failure stops the loop and raises; entries committed before the
        failure are kept.
        """
        stmt = (
            insert(Feed)
            .values(
                feed_url=feed.feed_url,
                site_url=feed.site_url,
                title=feed.title,
                category_id=feed.category.id,
                user_id=feed.user_id,
                etag_header=feed.etag_header,
                last_modified_header=feed.last_modified_header,
                crawler=feed.crawler,
                user_agent=feed.user_agent,
                username=feed.username,
                password=feed.password,
                disabled=feed.disabled,
                scraper_rules=feed.scraper_rules,
                rewrite_rules=feed.rewrite_rules,
                ignore_http_cache=feed.ignore_http_cache,
                fetch_via_proxy=feed.fetch_via_proxy,
            )
            .returning(Feed.id)
        )
        try:
            result = await self._session.execute(stmt)
            feed.id = result.scalar_one()
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            feed.id = None
            logger.error(f"Unable to create feed {feed.feed_url!r}: {exc}")
            raise FeedStoreError(
                f"unable to create feed {feed.feed_url!r}: {exc}",
                operation="create_feed",
            ) from exc

        logger.info(f"Created feed #{feed.id} ({feed.feed_url}) for user #{feed.user_id}")

        for entry in feed.entries:
            entry.feed_id = feed.id
            entry.user_id = feed.user_id
            await self._store_entry_once(entry)

    async def _store_entry_once(self, entry: EntryData) -> None:
        try:
            async with self._session.begin():
                if not await self._entries.entry_exists(entry):
                    await self._entries.create_entry(entry)
        except FeedStoreError:
            logger.error(f"Aborting entry ingestion for feed #{entry.feed_id} at hash {entry.hash}")
            raise
        except SQLAlchemyError as exc:
            logger.error(f"Entry transaction failed for feed #{entry.feed_id}: {exc}")
            raise FeedStoreError(
                f"unable to commit transaction: {exc}",
                operation="create_feed",
                feed_id=entry.feed_id,
            ) from exc

    @staticmethod
    def _timestamps(feed: FeedData) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if feed.checked_at is not None:
            values["checked_at"] = to_naive_utc(feed.checked_at)
        if feed.next_check_at is not None:
            values["next_check_at"] = to_naive_utc(feed.next_check_at)
        return values

    async def update_feed(self, feed: FeedData) -> None:
        """Write every configurable column; id and owner are never touched."""
        stmt = (
            update(Feed)
            .where(
                and_(
                    Feed.id == feed.id,
                    Feed.user_id == feed.user_id,
                )
            )
            .values(
                feed_url=feed.feed_url,
                site_url=feed.site_url,
                title=feed.title,
                category_id=feed.category.id,
                etag_header=feed.etag_header,
                last_modified_header=feed.last_modified_header,
                parsing_error_msg=feed.parsing_error_msg,
                parsing_error_count=feed.parsing_error_count,
                scraper_rules=feed.scraper_rules,
                rewrite_rules=feed.rewrite_rules,
                crawler=feed.crawler,
                user_agent=feed.user_agent,
                username=feed.username,
                password=feed.password,
                disabled=feed.disabled,
                ignore_http_cache=feed.ignore_http_cache,
                fetch_via_proxy=feed.fetch_via_proxy,
                **self._timestamps(feed),
            )
            .execution_options(synchronize_session=False)
        )
        await self._write(
            stmt,
            operation="update_feed",
            error=f"unable to update feed #{feed.id} ({feed.feed_url})",
            feed_id=feed.id,
        )

    async def update_feed_error(self, feed: FeedData) -> None:
        """Persist the error state only, leaving configuration columns alone."""
        stmt = (
            update(Feed)
            .where(
                and_(
                    Feed.id == feed.id,
                    Feed.user_id == feed.user_id,
                )
            )
            .values(
                parsing_error_msg=feed.parsing_error_msg,
                parsing_error_count=feed.parsing_error_count,
                **self._timestamps(feed),
            )
            .execution_options(synchronize_session=False)
        )
        await self._write(
            stmt,
            operation="update_feed_error",
            error=f"unable to update feed error #{feed.id} ({feed.feed_url})",
            feed_id=feed.id,
        )

    async def remove_feed(self, user_id: int, feed_id: int) -> None:
        """Delete the feed; raises ``FeedNotRemovedError`` when nothing matched."""
        stmt = (
            delete(Feed)
            .where(
                and_(
                    Feed.id == feed_id,
                    Feed.user_id == user_id,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._write(
            stmt,
            operation="remove_feed",
            error=f"unable to remove feed #{feed_id}",
            feed_id=feed_id,
        )
        if result.rowcount == 0:
            logger.warning(f"No feed #{feed_id} removed for user #{user_id}")
            raise FeedNotRemovedError(feed_id)
        logger.info(f"Removed feed #{feed_id} for user #{user_id}")

    async def reset_feed_errors(self) -> None:
        """Clear the error state of every feed, for all users."""
        stmt = (
            update(Feed)
            .values(parsing_error_count=0, parsing_error_msg="")
            .execution_options(synchronize_session=False)
        )
        result = await self._write(
            stmt,
            operation="reset_feed_errors",
            error="unable to reset feed errors",
        )
        logger.info(f"Reset parsing errors on {result.rowcount} feeds")
