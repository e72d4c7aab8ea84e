"""Module: worker.

One tick of automatic stock consumption and threshold notifications.

The external scheduler hits the trigger endpoint once a minute; each call runs
``StockWorker.run_tick`` in the background:

1. Format the current time in the reference zone as ``HH:MM``.
2. Take one unit from every medication whose schedule contains that string
   and whose stock is positive, logging an ``Automatic`` movement of -1.
3. Send a low-stock notice for every medication at or below its threshold
   that has not been notified yet; set the flag only when delivery succeeds.
4. Same for medications expiring within the look-ahead window.

Decrements are committed before the scans, so a medication that drops to its
threshold during this tick is notified during this tick. Ticks are not
mutually exclusive: two ticks in the same minute decrement twice.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select

from app.db.models.medication import Medication
from app.db.store import InventoryStore
from app.services.inventory import record_movement
from app.services.messages import expiry_message, low_stock_message
from app.services.notifier import NotificationSender

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"


@dataclass
class TickResult:
    local_time: str
    decremented: list[str] = field(default_factory=list)
    low_stock_notified: list[str] = field(default_factory=list)
    expiry_notified: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    aborted: bool = False


class StockWorker:
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

    def local_now(self, now: datetime | None = None) -> datetime:
        if now is None:
            return datetime.now(self.zone)
        return now.astimezone(self.zone)

    def run_tick(self, now: datetime | None = None) -> TickResult:
        """Run one tick. Never raises; failures are logged."""
        local = self.local_now(now)
        result = TickResult(local_time=local.strftime("%H:%M"))
        logger.info("Stock tick started (local time %s)", result.local_time)

        try:
            self._consume_scheduled(result)
            self._notify_low_stock(result)
            self._notify_expiring(local.date(), result)
        except Exception:
            result.aborted = True
            logger.exception("Stock tick aborted")

        logger.info(
            "Stock tick finished: %d decremented, %d low-stock notices, %d expiry notices, %d failed",
            len(result.decremented),
            len(result.low_stock_notified),
            len(result.expiry_notified),
            len(result.failed),
        )
        return result

    def _consume_scheduled(self, result: TickResult) -> None:
        with self.store.session() as db:
            in_stock = db.execute(
                select(Medication).where(Medication.current_stock > 0)
            ).scalars().all()
            due = [med for med in in_stock if result.local_time in (med.schedule or [])]

            for med in due:
                med.current_stock -= 1
                record_movement(db, med.name, -1, "Automatic")
                db.commit()
                result.decremented.append(med.name)

        if not result.decremented:
            logger.info("No medications scheduled at %s", result.local_time)

    def _notify_low_stock(self, result: TickResult) -> None:
        with self.store.session() as db:
            pending = db.execute(
                select(Medication).where(
                    Medication.current_stock <= Medication.min_stock,
                    Medication.low_stock_notified.is_(False),
                )
            ).scalars().all()

            for med in pending:
                if self._deliver(low_stock_message(med), med.name, "low-stock"):
                    med.low_stock_notified = True
                    db.commit()
                    result.low_stock_notified.append(med.name)
                else:
                    result.failed.append(med.name)

    def _notify_expiring(self, today: date, result: TickResult) -> None:
        boundary = today + self.expiry_lookahead
        with self.store.session() as db:
            pending = db.execute(
                select(Medication).where(
                    Medication.expiry_date.is_not(None),
                    Medication.expiry_date <= boundary,
                    Medication.expiry_notified.is_(False),
                )
            ).scalars().all()

            for med in pending:
                if self._deliver(expiry_message(med), med.name, "expiry"):
                    med.expiry_notified = True
                    db.commit()
                    result.expiry_notified.append(med.name)
                else:
                    result.failed.append(med.name)

    def _deliver(self, message: str, medication_name: str, kind: str) -> bool:
        # One record's failure must not stop the others; the flag stays unset
        # so the next tick tries again.
        try:
            delivered = bool(self.sender.send(message))
        except Exception:
            logger.exception("Sending %s notice for %s raised", kind, medication_name)
            return False

        if delivered:
            logger.info("Sent %s notice for %s", kind, medication_name)
        else:
            logger.warning("Could not send %s notice for %s, will retry next tick", kind, medication_name)
        return delivered
