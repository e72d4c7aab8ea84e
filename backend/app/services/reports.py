"""Module: reports."""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.db.store import InventoryStore
from app.services.inventory import days_remaining, list_medications
from app.services.messages import daily_report_message
from app.services.notifier import NotificationSender
from app.services.worker import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


# Compiles the whole inventory into one summary message.
class DailyReporter:
    def __init__(
        self,
        store: InventoryStore,
        sender: NotificationSender,
        timezone: str = DEFAULT_TIMEZONE,
        expiry_lookahead_days: int = 30,
    ):
        self.store = store
        self.sender = sender
        self.zone = ZoneInfo(timezone)
        self.expiry_lookahead = timedelta(days=expiry_lookahead_days)

    def build_rows(self, today: date) -> list[dict]:
        boundary = today + self.expiry_lookahead
        with self.store.session() as db:
            meds = list_medications(db)
            return [
                {
                    "name": med.name,
                    "dose": med.dose,
                    "current_stock": med.current_stock,
                    "days_remaining": days_remaining(med),
                    "low_stock": med.current_stock <= med.min_stock,
                    "expiring": med.expiry_date is not None and med.expiry_date <= boundary,
                    "expiry_date": med.expiry_date,
                }
                for med in meds
            ]

    def send(self, now: datetime | None = None) -> bool:
        """Build and deliver the report. Never raises; returns delivery outcome."""
        today = (now.astimezone(self.zone) if now else datetime.now(self.zone)).date()
        try:
            rows = self.build_rows(today)
            delivered = bool(self.sender.send(daily_report_message(rows, today)))
        except Exception:
            logger.exception("Daily report failed")
            return False

        if delivered:
            logger.info("Daily report sent (%d medications)", len(rows))
        else:
            logger.warning("Daily report could not be delivered")
        return delivered
