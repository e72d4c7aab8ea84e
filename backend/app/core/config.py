"""Module: config."""

from pydantic import Field
from pydantic_settings import BaseSettings


# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    # Primary SQLAlchemy connection string for the inventory database.
    database_url: str
    # Key used to sign access tokens (HS256). Required: there is no safe default.
    token_secret: str = Field(min_length=32)
    # Shared password accepted by the login endpoint.
    app_password: str = ""
    # Secret passed as ?secret= by the external scheduler.
    cron_secret: str = ""

    # Telegram channel used for stock/expiry notices. Empty values fall back
    # to the console sender.
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    # Origins allowed to call the API from a browser.
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Schedules are written in this zone, whatever the server's own zone is.
    timezone: str = "America/Argentina/Buenos_Aires"
    expiry_lookahead_days: int = 30
    history_limit: int = 50

    token_ttl_hours: int = 8
    remember_me_ttl_days: int = 30

    log_level: str = "INFO"

    # Configure pydantic-settings to also load values from local .env file.
    class Config:
        env_file = ".env"
