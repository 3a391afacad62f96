from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from feedstore.models.entry import EntryStatus
from feedstore.utils.datetime_utils import utc_now_naive

# Feeds at or above this many consecutive parsing errors are reported as broken.
MAX_PARSING_ERROR = 3


@dataclass
class CategoryData:
    id: int
    title: str = ""
    user_id: Optional[int] = None


@dataclass
class FeedIconData:
    feed_id: int
    icon_id: int


@dataclass
class EntryData:
    """Entry payload produced by the fetch pipeline."""

    hash: str
    title: str = ""
    url: str = ""
    comments_url: str = ""
    author: str = ""
    content: str = ""
    published_at: Optional[datetime] = None
    status: EntryStatus = EntryStatus.UNREAD
    id: Optional[int] = None
    feed_id: Optional[int] = None
    user_id: Optional[int] = None


@dataclass
class FeedData:
    """
    Feed as seen by callers of the storage layer.

    ``read_count`` and ``unread_count`` are derived and only populated by the
    ``*_with_counters`` listings. ``entries`` holds pending children consumed
    by ``FeedRepository.create_feed``.
    """

    user_id: int
    feed_url: str
    category: CategoryData
    site_url: str = ""
    title: str = ""
    id: Optional[int] = None
    icon: Optional[FeedIconData] = None
    etag_header: str = ""
    last_modified_header: str = ""
    crawler: bool = False
    user_agent: str = ""
    scraper_rules: str = ""
    rewrite_rules: str = ""
    username: str = ""
    password: str = ""
    ignore_http_cache: bool = False
    fetch_via_proxy: bool = False
    disabled: bool = False
    checked_at: Optional[datetime] = None
    next_check_at: Optional[datetime] = None
    parsing_error_count: int = 0
    parsing_error_msg: str = ""
    read_count: int = 0
    unread_count: int = 0
    entries: List[EntryData] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.parsing_error_count >= MAX_PARSING_ERROR

    def with_error(self, message: str) -> None:
        self.parsing_error_count += 1
        self.parsing_error_msg = message

    def reset_error_counter(self) -> None:
        self.parsing_error_count = 0
        self.parsing_error_msg = ""

    def checked_now(self) -> None:
        self.checked_at = utc_now_naive()


@dataclass
class FeedCounts:
    enabled: int = 0
    disabled: int = 0

    @property
    def total(self) -> int:
        return self.enabled + self.disabled
