"""Module: medications."""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, StringConstraints, model_validator
from sqlalchemy.orm import Session

from app.api.v1.routes.deps import get_db, parse_uuid, require_token
from app.db.models.medication import Medication
from app.services import inventory

router = APIRouter(dependencies=[Depends(require_token)])

SCHEDULE_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def _normalize_schedule(values: list[str]) -> list[str]:
    # "9:00" is stored as "09:00" so it matches the worker's HH:MM clock.
    normalized = []
    for value in values:
        match = SCHEDULE_PATTERN.match(value.strip())
        if not match:
            raise ValueError("Schedule times must use the HH:MM format (e.g. 09:00)")
        normalized.append(f"{int(match.group(1)):02d}:{match.group(2)}")
    return normalized


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
Dose = Annotated[
    Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)] | None,
    BeforeValidator(_blank_to_none),
]
ExpiryDate = Annotated[date | None, BeforeValidator(_blank_to_none)]
Stock = Annotated[int, Field(ge=0)]
MinStock = Annotated[int, Field(ge=1)]
Schedule = Annotated[list[str], Field(min_length=1), AfterValidator(_normalize_schedule)]


class MedicationCreatePayload(BaseModel):
    name: Name
    dose: Dose = None
    current_stock: Stock = 0
    min_stock: MinStock = 5
    schedule: Schedule
    expiry_date: ExpiryDate = None


class MedicationUpdatePayload(BaseModel):
    name: Name | None = None
    dose: Dose = None
    current_stock: Stock | None = None
    min_stock: MinStock | None = None
    schedule: Schedule | None = None
    expiry_date: ExpiryDate = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("name", "current_stock", "min_stock", "schedule"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class RestockPayload(BaseModel):
    quantity: int = Field(gt=0)


def as_medication_payload(med: Medication) -> dict:
    return {
        "id": str(med.medication_id),
        "name": med.name,
        "dose": med.dose,
        "current_stock": med.current_stock,
        "min_stock": med.min_stock,
        "schedule": list(med.schedule or []),
        "expiry_date": med.expiry_date,
        "low_stock_notified": med.low_stock_notified,
        "expiry_notified": med.expiry_notified,
        "days_remaining": inventory.days_remaining(med),
    }


# -------------------------
# Endpoints
# -------------------------

@router.get("", summary="List medications with days of supply left")
def list_medications(db: Session = Depends(get_db)):
    return [as_medication_payload(med) for med in inventory.list_medications(db)]


@router.post("", status_code=201, summary="Create medication")
def create_medication(payload: MedicationCreatePayload, db: Session = Depends(get_db)):
    med = inventory.create_medication(db, payload.model_dump())
    return as_medication_payload(med)


@router.get("/{medication_id}", summary="Get medication detail")
def get_medication(medication_id: str, db: Session = Depends(get_db)):
    med = inventory.get_medication(db, parse_uuid(medication_id, "medication_id"))
    return as_medication_payload(med)


@router.put("/{medication_id}", summary="Update medication")
def update_medication(
    medication_id: str,
    payload: MedicationUpdatePayload,
    db: Session = Depends(get_db),
):
    mid = parse_uuid(medication_id, "medication_id")
    med = inventory.update_medication(db, mid, payload.model_dump(exclude_unset=True))
    return as_medication_payload(med)


@router.delete("/{medication_id}", summary="Delete medication")
def delete_medication(medication_id: str, db: Session = Depends(get_db)):
    inventory.delete_medication(db, parse_uuid(medication_id, "medication_id"))
    return {"detail": "Medication deleted"}


@router.put("/{medication_id}/restock", summary="Add units to a medication")
def restock_medication(
    medication_id: str,
    payload: RestockPayload,
    db: Session = Depends(get_db),
):
    mid = parse_uuid(medication_id, "medication_id")
    med = inventory.restock(db, mid, payload.quantity)
    return as_medication_payload(med)
