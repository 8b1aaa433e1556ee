"""Database tables / schema"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.models import utc_now


class Base(DeclarativeBase):
    pass


class DBSnapshot(Base):
    """One stored game state per save slot. The snapshot itself is kept as a JSON document."""

    __tablename__ = "snapshots"
    slot: Mapped[str] = mapped_column(primary_key=True)
    move_count: Mapped[int] = mapped_column(default=0)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
