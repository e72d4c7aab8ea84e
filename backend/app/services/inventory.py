"""Module: inventory."""

import logging
import uuid

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.errors import InvalidQuantityError, MedicationNotFoundError, OutOfStockError
from app.db.models.medication import Medication
from app.db.models.movement import MOVEMENT_KINDS, Movement

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "dose", "current_stock", "min_stock", "schedule", "expiry_date")


def days_remaining(med: Medication) -> int:
    """Whole days of supply left at the scheduled rate; 0 with no schedule."""
    doses_per_day = len(med.schedule or [])
    if doses_per_day == 0:
        return 0
    return med.current_stock // doses_per_day


def record_movement(db: Session, medication_name: str, delta: int, kind: str) -> Movement:
    """Stage one movement log entry. The caller commits."""
    if kind not in MOVEMENT_KINDS:
        raise ValueError(f"Unknown movement kind: {kind}")
    movement = Movement(medication_name=medication_name, delta=delta, kind=kind)
    db.add(movement)
    return movement


def list_medications(db: Session) -> list[Medication]:
    return list(db.execute(select(Medication).order_by(Medication.name)).scalars().all())


def get_medication(db: Session, medication_id: uuid.UUID) -> Medication:
    med = db.get(Medication, medication_id)
    if med is None:
        raise MedicationNotFoundError()
    return med


def create_medication(db: Session, data: dict) -> Medication:
    med = Medication(**{k: v for k, v in data.items() if k in EDITABLE_FIELDS})
    db.add(med)
    db.flush()

    if med.current_stock > 0:
        record_movement(db, med.name, med.current_stock, "InitialLoad")

    db.commit()
    db.refresh(med)
    logger.info("Created medication %s with %d units", med.name, med.current_stock)
    return med


def update_medication(db: Session, medication_id: uuid.UUID, changes: dict) -> Medication:
    """
    Apply a partial edit.

    A new expiry date re-arms the expiry notice. A stock change is logged as a
    ManualAdjustment with the signed difference, and re-arms the low-stock
    notice when the new stock is above the threshold.
    """
    med = get_medication(db, medication_id)
    old_stock = med.current_stock
    old_expiry = med.expiry_date

    for field, value in changes.items():
        if field in EDITABLE_FIELDS:
            setattr(med, field, value)

    if "expiry_date" in changes and med.expiry_date != old_expiry:
        med.expiry_notified = False

    if med.current_stock != old_stock:
        record_movement(db, med.name, med.current_stock - old_stock, "ManualAdjustment")
        if med.current_stock > med.min_stock:
            med.low_stock_notified = False

    db.commit()
    db.refresh(med)
    return med


def delete_medication(db: Session, medication_id: uuid.UUID) -> None:
    med = get_medication(db, medication_id)
    db.delete(med)
    db.commit()
    logger.info("Deleted medication %s", med.name)


def take_dose(db: Session, medication_id: uuid.UUID) -> Medication:
    med = get_medication(db, medication_id)
    if med.current_stock <= 0:
        raise OutOfStockError(f"No stock left of {med.name}")

    med.current_stock -= 1
    if med.current_stock <= med.min_stock:
        logger.warning("Low stock: %d units of %s left", med.current_stock, med.name)

    db.commit()
    db.refresh(med)
    return med


def restock(db: Session, medication_id: uuid.UUID, quantity: int) -> Medication:
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be a positive integer")

    med = get_medication(db, medication_id)
    med.current_stock += quantity
    med.low_stock_notified = False
    record_movement(db, med.name, quantity, "Restock")

    db.commit()
    db.refresh(med)
    logger.info("Restocked %s: now %d units", med.name, med.current_stock)
    return med


def recent_movements(db: Session, limit: int = 50) -> list[Movement]:
    stmt = (
        select(Movement)
        .order_by(desc(Movement.occurred_at), desc(Movement.movement_id))
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())
