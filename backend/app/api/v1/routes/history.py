"""Module: history."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.routes.deps import get_db, get_settings, require_token
from app.core.config import Settings
from app.services import inventory

router = APIRouter(dependencies=[Depends(require_token)])


@router.get("", summary="Latest stock movements, newest first")
def list_history(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return [
        {
            "id": m.movement_id,
            "occurred_at": m.occurred_at,
            "medication_name": m.medication_name,
            "delta": m.delta,
            "kind": m.kind,
        }
        for m in inventory.recent_movements(db, settings.history_limit)
    ]
