"""Module: auth."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from app.api.v1.routes.deps import get_settings
from app.core.config import Settings
from app.core.security import issue_token, secrets_match

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    password: str
    remember_me: bool = Field(default=False, validation_alias=AliasChoices("remember_me", "rememberMe"))


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, settings: Settings = Depends(get_settings)):
    if not secrets_match(payload.password, settings.app_password):
        logger.warning("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password")

    if payload.remember_me:
        ttl = timedelta(days=settings.remember_me_ttl_days)
    else:
        ttl = timedelta(hours=settings.token_ttl_hours)

    return LoginResponse(
        token=issue_token(settings.token_secret, ttl),
        expires_in=int(ttl.total_seconds()),
    )
