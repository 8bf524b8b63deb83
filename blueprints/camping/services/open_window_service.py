"""
Open Window Service - Resolves when the booking window is open.

The active open-day rule is either a fixed season (NONE) or a monthly
recurrence (MONTHLY). The window is recomputed from `now` on every call;
nothing about it is cached.
"""

import calendar
from datetime import datetime, date
from typing import Optional, Dict, Any

from models.open_day import get_active_rule
from utils.datetime_helpers import get_now, parse_local_datetime

PRE_OPEN = 'PRE_OPEN'
OPEN = 'OPEN'
CLOSED = 'CLOSED'

# Monthly windows open at 09:00 on the 1st
MONTHLY_OPEN_HOUR = 9


def _add_months(year: int, month: int, months: int) -> tuple:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def resolve_monthly_window(months_to_add: int, target_day, now: datetime) -> tuple:
    """
    Compute (open_at, close_at) for a MONTHLY rule.

    open_at is the 1st of the current month at 09:00. close_at is the
    target day of the month `months_to_add` ahead at 23:59:59, where
    'END' (or a day past the month's length) means the last day.

    Args:
        months_to_add: Months between the opening month and the closing month
        target_day: Day of month (int) or 'END'
        now: Reference instant; its timezone is used for both bounds

    Returns:
        Tuple of aware datetimes (open_at, close_at)
    """
    open_at = now.replace(day=1, hour=MONTHLY_OPEN_HOUR, minute=0, second=0, microsecond=0)

    close_year, close_month = _add_months(now.year, now.month, months_to_add or 0)
    last_day = calendar.monthrange(close_year, close_month)[1]
    day = last_day if target_day in (None, 'END') else min(int(target_day), last_day)

    close_at = now.replace(year=close_year, month=close_month, day=day,
                           hour=23, minute=59, second=59, microsecond=0)
    return open_at, close_at


def resolve_open_window(rule: Optional[Dict[str, Any]], now: datetime) -> Dict[str, Any]:
    """
    Resolve the booking window status at `now`.

    Args:
        rule: Active open-day rule dict, or None
        now: Aware reference instant

    Returns:
        dict with status (PRE_OPEN/OPEN/CLOSED), open_at, close_at,
        season_name and repeat_rule. Bounds are None when no rule is active.
    """
    if not rule:
        return {
            "status": CLOSED,
            "open_at": None,
            "close_at": None,
            "season_name": None,
            "repeat_rule": None
        }

    if rule.get("repeat_rule") == "MONTHLY":
        open_at, close_at = resolve_monthly_window(rule.get("months_to_add"), rule.get("target_day"), now)
    else:
        open_at = _as_aware(rule["open_at"], now)
        close_at = _as_aware(rule["close_at"], now)

    if now < open_at:
        status = PRE_OPEN
    elif now <= close_at:
        status = OPEN
    else:
        status = CLOSED

    return {
        "status": status,
        "open_at": open_at,
        "close_at": close_at,
        "season_name": rule.get("season_name"),
        "repeat_rule": rule.get("repeat_rule")
    }


def _as_aware(value, now: datetime) -> datetime:
    if isinstance(value, str):
        value = parse_local_datetime(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=now.tzinfo)
    return value


def last_bookable_night(window: Dict[str, Any]) -> Optional[date]:
    """The last night that may be booked in a resolved window."""
    close_at = window.get("close_at")
    return close_at.date() if close_at else None


def get_current_window(now: datetime = None, cursor=None) -> Dict[str, Any]:
    """Load the active rule and resolve it at `now` (default: current time)."""
    return resolve_open_window(get_active_rule(cursor=cursor), now or get_now())


def serialize_window(window: Dict[str, Any]) -> Dict[str, Any]:
    """Window dict with ISO-formatted bounds for JSON responses."""
    return {
        "status": window["status"],
        "open_at": window["open_at"].isoformat() if window["open_at"] else None,
        "close_at": window["close_at"].isoformat() if window["close_at"] else None,
        "season_name": window["season_name"],
        "repeat_rule": window["repeat_rule"]
    }
