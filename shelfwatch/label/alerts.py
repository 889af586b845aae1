"""Expiry reminders for stored products."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class AlertLevel(str, Enum):
    REMINDER = "reminder"
    WARNING = "warning"
    URGENT = "urgent"
    EXPIRED_TODAY = "expired_today"
    EXPIRED = "expired"


# Products past expiry are reported for this many days, then dropped
EXPIRED_GRACE_DAYS = 7


@dataclass
class ExpiryAlert:
    product_id: int | None
    name: str
    expiry_date: str
    days_left: int
    level: AlertLevel
    message: str


def days_until(expiry_date: str, today: date | None = None) -> int:
    """Days from today to an ISO expiry date; negative once it has passed."""
    return (date.fromisoformat(expiry_date) - (today or date.today())).days


def classify(days_left: int) -> AlertLevel | None:
    """Map days left to an alert level, or None if no reminder is due."""
    if days_left == 7:
        return AlertLevel.REMINDER
    if days_left == 3:
        return AlertLevel.WARNING
    if days_left == 1:
        return AlertLevel.URGENT
    if days_left == 0:
        return AlertLevel.EXPIRED_TODAY
    if -EXPIRED_GRACE_DAYS <= days_left < 0:
        return AlertLevel.EXPIRED
    return None


def _message(name: str, level: AlertLevel, days_left: int) -> str:
    match level:
        case AlertLevel.REMINDER:
            return f"{name} expires in 1 week"
        case AlertLevel.WARNING:
            return f"{name} expires in 3 days!"
        case AlertLevel.URGENT:
            return f"{name} expires tomorrow!"
        case AlertLevel.EXPIRED_TODAY:
            return f"{name} expired today!"
        case _:
            return f"{name} expired {-days_left} days ago"


def collect_alerts(products: list[dict], today: date | None = None) -> list[ExpiryAlert]:
    """Build alerts for product rows that have a reminder due.

    Rows without an expiry date, or with one that is not ISO formatted,
    are skipped.
    """
    today = today or date.today()
    alerts: list[ExpiryAlert] = []
    for product in products:
        expiry = product.get("expiry_date")
        if not expiry:
            continue
        try:
            days_left = days_until(expiry, today)
        except ValueError:
            continue
        level = classify(days_left)
        if level is None:
            continue
        name = product.get("name") or "Unknown Product"
        alerts.append(
            ExpiryAlert(
                product_id=product.get("id"),
                name=name,
                expiry_date=expiry,
                days_left=days_left,
                level=level,
                message=_message(name, level, days_left),
            )
        )
    return alerts
