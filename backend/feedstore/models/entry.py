"""
Entry model
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint

from .base import BaseModel, IdentifierType, enum_values, utcnow


class EntryStatus(str, enum.Enum):
    """Reading status of an entry"""
    UNREAD = "unread"
    READ = "read"
    REMOVED = "removed"


entry_status_enum = Enum(
    EntryStatus,
    name="entry_status",
    values_callable=enum_values,
    native_enum=True,
)


class Entry(BaseModel):
    """Content item belonging to one feed and one user."""

    __tablename__ = "entries"

    user_id = Column(IdentifierType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    feed_id = Column(IdentifierType, ForeignKey("feeds.id", ondelete="CASCADE"), nullable=False)
    hash = Column(String(255), nullable=False)
    published_at = Column(DateTime, nullable=False, default=utcnow)
    title = Column(Text, nullable=False, default="")
    url = Column(Text, nullable=False, default="")
    comments_url = Column(Text, nullable=False, default="")
    author = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    reading_time = Column(Integer, nullable=False, default=0)
    status = Column(entry_status_enum, nullable=False, default=EntryStatus.UNREAD)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    changed_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("feed_id", "hash", name="uq_entries_feed_hash"),
        Index("ix_entries_user_status", "user_id", "status"),
        Index("ix_entries_feed_published_at", "feed_id", "published_at"),
    )
