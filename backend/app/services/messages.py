"""Module: messages."""

from datetime import date
from html import escape

from app.db.models.medication import Medication


def _label(med: Medication) -> str:
    name = f"<b>{escape(med.name)}</b>"
    if med.dose:
        return f"{name} ({escape(med.dose)})"
    return name


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def low_stock_message(med: Medication) -> str:
    return (
        "⚠️ <b>Low stock</b>\n"
        f"{_label(med)}\n"
        f"Units left: {med.current_stock}\n"
        f"Reorder threshold: {med.min_stock}"
    )


def expiry_message(med: Medication) -> str:
    return (
        "⏳ <b>Expiry notice</b>\n"
        f"{_label(med)}\n"
        f"Expires on: {format_date(med.expiry_date)}\n"
        f"Units left: {med.current_stock}"
    )


def daily_report_message(rows: list[dict], report_date: date) -> str:
    """
    Build the daily summary text.

    Each row carries name, dose, current_stock, days_remaining, low_stock,
    expiring and expiry_date, as produced by DailyReporter.
    """
    lines = [f"📋 <b>Daily inventory report</b> {format_date(report_date)}"]
    if not rows:
        lines.append("No medications registered.")
        return "\n".join(lines)

    for row in rows:
        name = escape(row["name"])
        if row.get("dose"):
            name = f"{name} ({escape(row['dose'])})"
        line = f"• {name}: {row['current_stock']} units, {row['days_remaining']} days"
        flags = []
        if row["low_stock"]:
            flags.append("LOW STOCK")
        if row["expiring"]:
            flags.append(f"expires {format_date(row['expiry_date'])}")
        if flags:
            line += " [" + ", ".join(flags) + "]"
        lines.append(line)
    return "\n".join(lines)
