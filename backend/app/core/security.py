"""Module: security."""

import hmac
from datetime import UTC, datetime, timedelta

import jwt

# Signing algorithm for access tokens; the same key signs and verifies.
TOKEN_ALGORITHM = "HS256"
TOKEN_USER = "admin"


def issue_token(secret: str, ttl: timedelta, now: datetime | None = None) -> str:
    """
    Create a signed, time-limited access token.

    Claims:
      {"user": "admin", "iat": <unix seconds>, "exp": <unix seconds>}
    """
    now = now or datetime.now(UTC)
    payload = {"user": TOKEN_USER, "iat": now, "exp": now + ttl}
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def verify_token(secret: str, token: str) -> dict:
    """Return the token claims, or raise jwt.InvalidTokenError (expiry included)."""
    return jwt.decode(
        token,
        secret,
        algorithms=[TOKEN_ALGORITHM],
        options={"require": ["exp"]},
    )


def secrets_match(provided: str | None, expected: str) -> bool:
    """Constant-time comparison; an unset expected secret never matches."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
