"""
Declarative base and timestamp columns for the SQL session store.

Dependencies: sqlalchemy, ivy.models.session
System role: Foundation for all database models
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ivy.models.session import utc_now


class Base(DeclarativeBase):
    """Registry for Ivy's tables; create_tables() builds everything attached here."""


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime from a column value (SQLite returns naive ones)."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


class TimestampMixin:
    """
    created_at and last_active columns, stored with timezone.

    last_active is indexed because the expiry sweep deletes by it.
    """

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    last_active: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
