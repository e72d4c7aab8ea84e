"""Module: doses."""

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import Session

from app.api.v1.routes.deps import get_db, parse_uuid, require_token
from app.api.v1.routes.medications import as_medication_payload
from app.services import inventory

router = APIRouter(dependencies=[Depends(require_token)])


class DoseTakenPayload(BaseModel):
    medication_id: str = Field(validation_alias=AliasChoices("medication_id", "medicationId"))


# Endpoint: confirm a dose was taken outside the automatic schedule.
@router.post("", summary="Record a dose taken")
def record_dose(payload: DoseTakenPayload, db: Session = Depends(get_db)):
    med = inventory.take_dose(db, parse_uuid(payload.medication_id, "medication_id"))
    return as_medication_payload(med)
