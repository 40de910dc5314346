"""
Declarative base for database models (SQLAlchemy 2.0 style)
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def created_at_column() -> Column:
    return Column(DateTime(timezone=True), default=utcnow, nullable=False, comment="Created at")


def updated_at_column() -> Column:
    return Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Updated at",
    )


# Metadata used by migrations
metadata = Base.metadata
