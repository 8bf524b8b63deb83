"""
Stay Rule Service - Weekend minimum-stay rule.

A Friday check-in for exactly one night is refused, with two exceptions:
- D-N: the check-in is at most D_N_DAYS calendar days away
- End-cap: the following Saturday on the same site is already taken,
  so the Friday can never be sold as part of a longer stay

When the Saturday lies beyond the bookable window, neither exception
applies. Every caller (availability listing and booking commit) goes
through evaluate_site_stay_rule so the two paths cannot disagree.
"""

from datetime import date as Date, datetime, timedelta
from typing import Optional, Dict, Any, Iterable

from utils.datetime_helpers import parse_date

FRIDAY = 4


def days_until(check_in: Date, now: datetime) -> int:
    """Calendar days from today (in now's timezone) to check-in."""
    return (check_in - now.date()).days


def has_end_cap_availability(occupied_nights: Iterable[str], friday: Date) -> bool:
    """
    Check the End-cap condition for a site.

    Args:
        occupied_nights: Night dates (YYYY-MM-DD) held on the site
        friday: The Friday being requested

    Returns:
        bool: True if the Saturday after is taken and the Friday is free
    """
    occupied = set(occupied_nights)
    saturday = friday + timedelta(days=1)
    return saturday.isoformat() in occupied and friday.isoformat() not in occupied


def is_next_day_blocked(check_in: Date, last_bookable_night: Optional[Date]) -> bool:
    """True when the night after check-in is outside the bookable window."""
    if last_bookable_night is None:
        return True
    return check_in + timedelta(days=1) > last_bookable_night


def check_reservation_rules(
    check_in,
    check_out,
    now: datetime,
    d_n_days: int = 7,
    has_end_cap: bool = False,
    next_day_blocked: bool = False
) -> Dict[str, Any]:
    """
    Evaluate the weekend minimum-stay rule for one stay.

    Args:
        check_in: Check-in date (date, YYYY-MM-DD or None)
        check_out: Check-out date (date, YYYY-MM-DD or None)
        now: Aware reference instant
        d_n_days: Imminent-booking threshold in days
        has_end_cap: End-cap condition for the site
        next_day_blocked: The Saturday after is outside the window

    Returns:
        dict with is_friday_one_night, is_within_dn, is_end_cap, is_blocked
    """
    result = {
        "is_friday_one_night": False,
        "is_within_dn": False,
        "is_end_cap": False,
        "is_blocked": False
    }

    # Incomplete selections are not blocked
    if not check_in or not check_out:
        return result

    check_in = parse_date(check_in)
    check_out = parse_date(check_out)

    result["is_friday_one_night"] = check_in.weekday() == FRIDAY and (check_out - check_in).days == 1
    result["is_within_dn"] = days_until(check_in, now) <= d_n_days
    result["is_end_cap"] = has_end_cap

    if result["is_friday_one_night"]:
        exempt = (result["is_within_dn"] or has_end_cap) and not next_day_blocked
        result["is_blocked"] = not exempt

    return result


def evaluate_site_stay_rule(
    check_in,
    check_out,
    now: datetime,
    occupied_nights: Iterable[str],
    last_bookable_night: Optional[Date],
    d_n_days: int = 7
) -> Dict[str, Any]:
    """
    Evaluate the stay rule for one site from its occupied nights.

    Args:
        check_in: Check-in date
        check_out: Check-out date
        now: Aware reference instant
        occupied_nights: Nights held on the site around the stay
        last_bookable_night: Last night of the open window (None if closed)
        d_n_days: Imminent-booking threshold

    Returns:
        check_reservation_rules result plus has_end_cap_availability
        and is_next_day_blocked
    """
    if not check_in or not check_out:
        return check_reservation_rules(check_in, check_out, now, d_n_days)

    check_in = parse_date(check_in)
    end_cap = has_end_cap_availability(occupied_nights, check_in)
    next_day_blocked = is_next_day_blocked(check_in, last_bookable_night)

    result = check_reservation_rules(check_in, check_out, now, d_n_days,
                                     has_end_cap=end_cap, next_day_blocked=next_day_blocked)
    result["has_end_cap_availability"] = end_cap
    result["is_next_day_blocked"] = next_day_blocked
    return result
