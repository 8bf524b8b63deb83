"""
Availability Service - Per-site availability for a requested stay.

Combines the night ledger, blocked dates, the open window and the
weekend minimum-stay rule into one row per active site. The stay rule
is evaluated with the same function the booking commit uses.
"""

from datetime import timedelta
from typing import Dict, Any, List

from flask import current_app

from models.site import get_all_sites
from models.blocked_date import get_blocked_dates
from models.reservation_availability import get_occupied_nights
from utils.datetime_helpers import get_now, iter_nights, parse_date
from .open_window_service import get_current_window, last_bookable_night, serialize_window, OPEN
from .stay_rule_service import evaluate_site_stay_rule
from .pricing_service import quote_stay, check_stay_length


def list_site_availability(
    check_in,
    check_out,
    now=None,
    family_count: int = 1,
    visitor_count: int = 0
) -> Dict[str, Any]:
    """
    List every active site with its availability for a stay.

    Args:
        check_in: Check-in date (date or YYYY-MM-DD)
        check_out: Check-out date (exclusive)
        now: Reference instant (default: current time)
        family_count: Families, for the quoted price
        visitor_count: Visitors, for the quoted price

    Returns:
        dict with window (serialized) and sites (list of dicts with
        available, is_booked, is_blocked, over_capacity,
        outside_window, stay_rule, quote)

    Raises:
        ValueError: If the dates are invalid or the stay is too long
    """
    now = now or get_now()
    check_in = parse_date(check_in)
    check_out = parse_date(check_out)
    check_stay_length(check_in, check_out)

    window = get_current_window(now)
    last_night = last_bookable_night(window)
    outside_window = (
        window['status'] != OPEN
        or last_night is None
        or check_out - timedelta(days=1) > last_night
    )

    stay_nights = {night.isoformat() for night in iter_nights(check_in, check_out)}
    horizon = max(check_out, check_in + timedelta(days=2))
    occupied = get_occupied_nights(check_in.isoformat(), horizon.isoformat())
    blocked_sites = {
        block['site_id'] for block in get_blocked_dates(check_in.isoformat(), check_out.isoformat())
    }
    d_n_days = current_app.config['D_N_DAYS']

    sites: List[Dict[str, Any]] = []
    for site in get_all_sites():
        site_occupied = occupied.get(site['id'], set())
        is_booked = bool(stay_nights & site_occupied)
        is_blocked = site['id'] in blocked_sites
        over_capacity = family_count > site['max_occupancy']
        stay_rule = evaluate_site_stay_rule(check_in, check_out, now, site_occupied, last_night, d_n_days)

        sites.append({
            **site,
            'available': not (is_booked or is_blocked or over_capacity or outside_window
                              or stay_rule['is_blocked']),
            'is_booked': is_booked,
            'is_blocked': is_blocked,
            'over_capacity': over_capacity,
            'outside_window': outside_window,
            'stay_rule': stay_rule,
            'quote': quote_stay(site['id'], check_in, check_out, family_count, visitor_count)
        })

    return {
        'window': serialize_window(window),
        'check_in_date': check_in.isoformat(),
        'check_out_date': check_out.isoformat(),
        'sites': sites
    }
