"""Module: deps."""

import logging
import uuid
from typing import Generator

import jwt
from fastapi import Depends, Header, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import secrets_match, verify_token
from app.db.store import InventoryStore

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


# Dependency provider: one DB session per request lifecycle.
def get_db(store: InventoryStore = Depends(get_store)) -> Generator[Session, None, None]:
    with store.session() as db:
        yield db


# Guard for every data endpoint: 401 when no token is sent, 403 when the token
# is malformed, tampered with, or expired.
def require_token(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> dict:
    if not authorization:
        raise HTTPException(status_code=401, detail="Not authorized (token not provided)")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=403, detail="Invalid token")

    try:
        return verify_token(settings.token_secret, parts[1].strip())
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")


# Guard for the scheduler endpoints, which carry the shared secret in the query string.
def require_cron_secret(
    secret: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not secrets_match(secret, settings.cron_secret):
        logger.warning("Rejected scheduler call (bad or missing secret)")
        raise HTTPException(status_code=401, detail="Not authorized")


def parse_uuid(value: str, field_name: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name} (must be UUID)")
