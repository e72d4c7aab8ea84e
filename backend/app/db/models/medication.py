"""Module: medication."""

import uuid
from datetime import date

from sqlalchemy import JSON, Boolean, Date, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


# A medication kept at home: stock levels, daily dose times and expiry,
# plus the one-shot flags that stop repeat notifications.
class Medication(Base):
    __tablename__ = "medications"

    medication_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    dose: Mapped[str] = mapped_column(String(50), nullable=True)

    # Stock
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    low_stock_notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # "HH:MM" strings in the reference time zone, one per daily dose.
    schedule: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Expiry
    expiry_date: Mapped[date] = mapped_column(Date, nullable=True)
    expiry_notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
