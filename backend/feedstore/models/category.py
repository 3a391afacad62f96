"""
Category model
"""

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint

from .base import BaseModel, IdentifierType


class Category(BaseModel):
    """User-defined grouping of feeds."""

    __tablename__ = "categories"

    user_id = Column(IdentifierType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "title", name="uq_categories_user_title"),
    )
