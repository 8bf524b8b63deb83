"""
Pricing Service - Business logic for stay price calculations.

Handles:
- Weekend / holiday classification per night
- Peak season matching (recurring yearly, may wrap the year end)
- Option surcharges (extra families, visitors)
- Consecutive-stay and package discounts
- Complete quote orchestration against the stored configuration
"""

from datetime import date as Date
from typing import Optional, Dict, List, Any, Iterable

from flask import current_app

from models.pricing import get_pricing_config, get_holidays
from models.package import get_applicable_packages
from models.site import get_site_by_id
from utils.datetime_helpers import iter_nights, parse_date
from utils.messages import get_message

# Friday, Saturday, Sunday
WEEKEND_WEEKDAYS = (4, 5, 6)


def is_weekend_night(night: Date, holidays: Iterable[str] = ()) -> bool:
    """A night is charged the weekend rate on Fri/Sat/Sun or a public holiday."""
    return night.weekday() in WEEKEND_WEEKDAYS or night.isoformat() in holidays


def is_peak_night(night: Date, seasons: List[Dict[str, Any]]) -> bool:
    """
    Check whether a night falls inside any recurring peak season.

    Season bounds are inclusive month/day pairs. A season whose end is
    before its start (e.g. 12/20 - 2/10) wraps over the new year.
    """
    key = (night.month, night.day)
    for season in seasons:
        start = (season["start_month"], season["start_day"])
        end = (season["end_month"], season["end_day"])
        if start <= end:
            if start <= key <= end:
                return True
        elif key >= start or key <= end:
            return True
    return False


def get_night_rate(
    night: Date,
    site: Dict[str, Any],
    config: Dict[str, Any],
    holidays: Iterable[str] = ()
) -> Dict[str, Any]:
    """
    Get the rate for a single night.

    Peak nights use the campground peak rates. Off-peak nights use the
    site's own rates, falling back to the campground defaults.

    Returns:
        dict with date, is_weekend, is_peak, rate
    """
    weekend = is_weekend_night(night, holidays)
    peak = is_peak_night(night, config.get("seasons", []))

    if peak:
        rate = config["peak_weekend"] if weekend else config["peak_weekday"]
    elif weekend:
        rate = site.get("price_weekend")
        if rate is None:
            rate = config["weekend"]
    else:
        rate = site.get("price_weekday")
        if rate is None:
            rate = config["weekday"]

    return {
        "date": night.isoformat(),
        "is_weekend": weekend,
        "is_peak": peak,
        "rate": rate
    }


def select_package(packages: List[Dict[str, Any]], check_in: Date, nights: int) -> Optional[Dict[str, Any]]:
    """
    Pick the package with the largest discount that applies to the stay.

    A package applies when it is active, the stay has at least min_nights
    and the check-in date is within its validity range.
    """
    check_in_str = check_in.isoformat()
    eligible = [
        p for p in packages
        if p.get("active", 1)
        and p["min_nights"] <= nights
        and (not p.get("valid_from") or p["valid_from"] <= check_in_str)
        and (not p.get("valid_until") or p["valid_until"] >= check_in_str)
    ]
    if not eligible:
        return None
    return max(eligible, key=lambda p: p["discount_amount"])


def calculate_price(
    site: Dict[str, Any],
    check_in,
    check_out,
    family_count: int,
    visitor_count: int,
    config: Dict[str, Any],
    holidays: Iterable[str] = (),
    packages: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    """
    Calculate the price breakdown for a stay.

        base       = sum of nightly rates
        family     = (families - 1) x extra_family x nights
        visitor    = visitors x visitor (once per stay)
        consecutive= long_stay_discount x nights, for 2+ nights with a weekend night
        package    = best applicable package discount
        total      = max(0, base + family + visitor - consecutive - package)

    Args:
        site: Site dict (price_weekday/price_weekend may be None)
        check_in: Check-in date (date or YYYY-MM-DD)
        check_out: Check-out date (exclusive)
        family_count: Families, at least 1
        visitor_count: Day visitors, at least 0
        config: Pricing config dict including 'seasons'
        holidays: Holiday dates as YYYY-MM-DD strings
        packages: Candidate stay packages

    Returns:
        dict with nights, base_price, options, discount, total_price, night_breakdown

    Raises:
        ValueError: If the stay or counts are invalid
    """
    check_in = parse_date(check_in)
    check_out = parse_date(check_out)
    if check_out <= check_in:
        raise ValueError("체크아웃 날짜는 체크인 이후여야 합니다")
    if family_count < 1:
        raise ValueError("가족 수는 1 이상이어야 합니다")
    if visitor_count < 0:
        raise ValueError("방문객 수는 0 이상이어야 합니다")

    holidays = set(holidays)
    breakdown = [get_night_rate(night, site, config, holidays) for night in iter_nights(check_in, check_out)]
    nights = len(breakdown)

    base_price = sum(n["rate"] for n in breakdown)
    extra_family = (family_count - 1) * config["extra_family"] * nights
    visitor = visitor_count * config["visitor"]

    has_weekend_night = any(n["is_weekend"] for n in breakdown)
    consecutive = config["long_stay_discount"] * nights if nights >= 2 and has_weekend_night else 0

    package = select_package(packages or [], check_in, nights)
    package_discount = package["discount_amount"] if package else 0

    total = max(0, base_price + extra_family + visitor - consecutive - package_discount)

    return {
        "nights": nights,
        "base_price": base_price,
        "options": {
            "extra_family": extra_family,
            "visitor": visitor
        },
        "discount": {
            "consecutive": consecutive,
            "package": package_discount,
            "package_name": package["name"] if package else None
        },
        "total_price": total,
        "night_breakdown": breakdown
    }


def check_stay_length(check_in: Date, check_out: Date) -> int:
    """
    Number of nights, limited to MAX_STAY_NIGHTS.

    Raises:
        ValueError: If check-out is not after check-in or the stay is too long
    """
    nights = (check_out - check_in).days
    if nights < 1:
        raise ValueError(get_message('invalid_date_range'))
    max_nights = current_app.config['MAX_STAY_NIGHTS']
    if nights > max_nights:
        raise ValueError(get_message('stay_too_long', max=max_nights))
    return nights


def quote_stay(
    site_id: str,
    check_in,
    check_out,
    family_count: int = 1,
    visitor_count: int = 0,
    cursor=None
) -> Dict[str, Any]:
    """
    Quote a stay against the stored site, pricing config, holidays and packages.

    Args:
        site_id: Site ID
        check_in: Check-in date
        check_out: Check-out date (exclusive)
        family_count: Families
        visitor_count: Day visitors
        cursor: Active transaction cursor (optional, used at commit time)

    Returns:
        Price breakdown dict (see calculate_price) plus site_id

    Raises:
        ValueError: If the site is unknown or the stay is invalid
    """
    site = get_site_by_id(site_id, cursor=cursor)
    if not site:
        raise ValueError("사이트를 찾을 수 없습니다")

    check_in = parse_date(check_in)
    check_out = parse_date(check_out)
    nights = check_stay_length(check_in, check_out)

    config = get_pricing_config(cursor=cursor)
    holidays = [h["holiday_date"] for h in get_holidays(check_in.isoformat(), check_out.isoformat(), cursor=cursor)]
    packages = get_applicable_packages(check_in.isoformat(), nights, cursor=cursor)

    quote = calculate_price(site, check_in, check_out, family_count, visitor_count,
                            config, holidays=holidays, packages=packages)
    quote["site_id"] = site_id
    return quote
