"""
Repository layer for the feeds domain.

Repositories encapsulate database access and SQLAlchemy queries. Higher layers
should depend on repository interfaces rather than raw sessions.
"""

from .feed_repository import FeedRepository  # noqa: F401
from .counter_repository import FeedCounterRepository  # noqa: F401
from .entry_repository import EntryRepository  # noqa: F401
