"""
Feed, icon and feed-icon association models
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
)

from .base import Base, BaseModel, IdentifierType, utcnow


class Feed(BaseModel):
    """
    Subscription source owned by one user.

    Timestamps are stored as naive UTC; conversion to the owner's timezone
    happens when rows are handed to callers.
    """

    __tablename__ = "feeds"

    user_id = Column(IdentifierType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(IdentifierType, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    feed_url = Column(Text, nullable=False)
    site_url = Column(Text, nullable=False, default="")
    title = Column(Text, nullable=False, default="")
    etag_header = Column(Text, nullable=False, default="")
    last_modified_header = Column(Text, nullable=False, default="")
    checked_at = Column(DateTime, nullable=False, default=utcnow)
    next_check_at = Column(DateTime, nullable=False, default=utcnow)
    parsing_error_count = Column(Integer, nullable=False, default=0)
    parsing_error_msg = Column(Text, nullable=False, default="")
    scraper_rules = Column(Text, nullable=False, default="")
    rewrite_rules = Column(Text, nullable=False, default="")
    crawler = Column(Boolean, nullable=False, default=False)
    user_agent = Column(Text, nullable=False, default="")
    username = Column(Text, nullable=False, default="")
    password = Column(Text, nullable=False, default="")
    ignore_http_cache = Column(Boolean, nullable=False, default=False)
    fetch_via_proxy = Column(Boolean, nullable=False, default=False)
    disabled = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "feed_url", name="uq_feeds_user_feed_url"),
    )


class Icon(BaseModel):
    """Favicon blob shared between feeds."""

    __tablename__ = "icons"

    hash = Column(String(255), nullable=False, unique=True)
    mime_type = Column(String(255), nullable=False)
    content = Column(LargeBinary, nullable=False)


class FeedIcon(Base):
    """Zero-or-one icon per feed."""

    __tablename__ = "feed_icons"

    feed_id = Column(IdentifierType, ForeignKey("feeds.id", ondelete="CASCADE"), primary_key=True)
    icon_id = Column(IdentifierType, ForeignKey("icons.id", ondelete="CASCADE"), primary_key=True)
