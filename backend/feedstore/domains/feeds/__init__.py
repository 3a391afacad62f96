"""
Feeds domain package.

Provides the facade, repositories and value objects for storing feeds and
reconciling them with entry read/unread counters.
"""

from .facade import FeedsFacade  # noqa: F401
from .repositories import FeedRepository, FeedCounterRepository, EntryRepository  # noqa: F401
from .dtos import (  # noqa: F401
    MAX_PARSING_ERROR,
    CategoryData,
    EntryData,
    FeedCounts,
    FeedData,
    FeedIconData,
)
