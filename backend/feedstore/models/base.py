"""
Declarative base shared by all models
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite only autoincrements "INTEGER PRIMARY KEY" columns
IdentifierType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Metadata root for every table"""


class BaseModel(Base):
    """Abstract model with a server-generated integer identifier"""

    __abstract__ = True

    id = Column(IdentifierType, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id}>"


def utcnow() -> datetime:
    """Return current UTC time without tzinfo (storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls):
    """Helper to extract enum values for SQLAlchemy Enum definition."""
    return [member.value for member in enum_cls]
