"""
Models package
"""

from .base import Base, BaseModel
from .user import User
from .category import Category
from .feed import Feed, FeedIcon, Icon
from .entry import Entry, EntryStatus

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Category",
    "Feed",
    "FeedIcon",
    "Icon",
    "Entry",
    "EntryStatus",
]
