"""Module: movement."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

MOVEMENT_KINDS = ("InitialLoad", "Restock", "ManualAdjustment", "Automatic")


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


# Append-only audit trail of stock changes. The medication name is a snapshot
# taken when the movement happened, not a foreign key.
class Movement(Base):
    __tablename__ = "movements"

    movement_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, index=True)
    medication_name: Mapped[str] = mapped_column(String(100), nullable=False)
    delta: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
