"""Module: notifier."""

import logging
from typing import Protocol

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE_URL = "https://api.telegram.org"


class NotificationSender(Protocol):
    """Delivers one text message to the fixed recipient channel."""

    def send(self, message: str) -> bool:
        ...


class TelegramSender:
    """Sends messages to one Telegram chat through the Bot API. No retries."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        base_url: str = TELEGRAM_API_BASE_URL,
        timeout: float = 10,
        transport: httpx.BaseTransport | None = None,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def send(self, message: str) -> bool:
        if not self.bot_token or not self.chat_id:
            logger.error("Telegram bot token or chat id is not configured")
            return False

        url = f"{self.base_url}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": message, "parse_mode": "HTML"}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.post(url, json=payload)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Telegram delivery failed: %s", exc)
            return False

        if not data.get("ok"):
            logger.error("Telegram API error: %s", data.get("description"))
            return False

        logger.info("Telegram message delivered")
        return True


class ConsoleSender:
    """Logs messages instead of sending them (for development)."""

    def send(self, message: str) -> bool:
        logger.info("CONSOLE NOTIFICATION (not actually sent)\n%s", message)
        return True


def build_sender(settings: Settings) -> NotificationSender:
    if settings.telegram_bot_token and settings.telegram_chat_id:
        return TelegramSender(settings.telegram_bot_token, settings.telegram_chat_id)
    logger.warning("Telegram credentials missing, notifications go to the log only")
    return ConsoleSender()
