"""
Refund Service - Cancellation refund schedule.

Days before check-in (calendar days in the campground timezone):

    7 or more  -> 100%
    5 - 6      -> 90%
    3 - 4      -> 50%
    1 - 2      -> 20%
    0 or less  -> 0%
"""

from datetime import datetime
from typing import Dict, Any

from utils.datetime_helpers import parse_date

# (minimum days before check-in, refund percent), checked top down
REFUND_TIERS = (
    (7, 100),
    (5, 90),
    (3, 50),
    (1, 20),
)


def get_refund_rate(days_before: int) -> int:
    """Refund percent for a number of days before check-in."""
    for min_days, rate in REFUND_TIERS:
        if days_before >= min_days:
            return rate
    return 0


def calculate_refund(total_price: int, check_in, now: datetime) -> Dict[str, Any]:
    """
    Calculate the refund for cancelling a reservation at `now`.

    Args:
        total_price: Amount paid
        check_in: Check-in date (date or YYYY-MM-DD)
        now: Aware reference instant

    Returns:
        dict with days_before, refund_rate and refund_amount (floored)
    """
    days_before = (parse_date(check_in) - now.date()).days
    rate = get_refund_rate(days_before)
    return {
        "days_before": days_before,
        "refund_rate": rate,
        "refund_amount": total_price * rate // 100
    }
