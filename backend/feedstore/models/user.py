"""
User model (only the columns the feed storage reads)
"""

from sqlalchemy import Boolean, Column, String

from .base import BaseModel


class User(BaseModel):
    """Owner of categories, feeds and entries."""

    __tablename__ = "users"

    username = Column(String(255), nullable=False, unique=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    timezone = Column(String(64), nullable=False, default="UTC")
