from .feed import (  # noqa: F401
    MAX_PARSING_ERROR,
    CategoryData,
    EntryData,
    FeedCounts,
    FeedData,
    FeedIconData,
)
