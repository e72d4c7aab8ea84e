"""Module: health."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.routes.deps import get_store
from app.db.store import InventoryStore

logger = logging.getLogger(__name__)

router = APIRouter()


# Endpoint: liveness probe that also reports whether the database answers.
@router.get("/health")
def health(store: InventoryStore = Depends(get_store)):
    try:
        store.ping()
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return {"status": "degraded", "database": "unreachable"}
    return {"status": "ok", "database": "ok"}
