"""
Booking Service - Reservation commit and lifecycle orchestration.

create_booking re-validates everything the client saw (window, night
ledger, blocked dates, stay rule, price) inside one BEGIN IMMEDIATE
transaction, then inserts the reservation and its nights. The unique
(site_id, night_date) index is the last line against double booking.

Results are dicts:
    {'success': True, 'reservation': {...}, ...}
    {'success': False, 'error': CODE, 'message': str}
"""

import logging
import sqlite3
from datetime import timedelta
from typing import Dict, Any, Optional

from flask import current_app

from database import get_db
from models.site import get_site_by_id
from models.open_day import get_active_rule
from models.blocked_date import is_site_blocked
from models.reservation_availability import get_occupied_nights, get_conflicting_reservations
from models.reservation_crud import insert_reservation, get_reservation_by_id
from models.reservation_state import (
    PENDING,
    CONFIRMED,
    InvalidStateTransitionError,
    request_cancellation as move_to_refund_pending,
    confirm_reservation,
    cancel_reservation,
    complete_refund,
    mark_no_show,
    complete_reservation,
    expire_unpaid_reservations,
)
from models.waitlist import get_subscribers_for_slots
from utils.datetime_helpers import get_now, parse_date, to_db_timestamp, from_db_timestamp
from utils.messages import get_message
from utils.validators import validate_phone, validate_non_negative_int, sanitize_input
from .open_window_service import resolve_open_window, last_bookable_night, PRE_OPEN, CLOSED
from .stay_rule_service import evaluate_site_stay_rule
from .pricing_service import quote_stay
from .refund_service import calculate_refund

logger = logging.getLogger(__name__)

# Outcome codes
VALIDATION_FAILED = 'VALIDATION_FAILED'
ALREADY_BOOKED = 'ALREADY_BOOKED'
CONCURRENT_REQUEST = 'CONCURRENT_REQUEST'
SEASON_CLOSED = 'SEASON_CLOSED'
RULE_VIOLATION = 'RULE_VIOLATION'
INVALID_TRANSITION = 'INVALID_TRANSITION'
FORBIDDEN = 'FORBIDDEN'
NOT_FOUND = 'NOT_FOUND'

CANCELLABLE_STATUSES = (PENDING, CONFIRMED)


class BookingRejected(Exception):
    """A booking attempt refused with an outcome code."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    def to_result(self) -> Dict[str, Any]:
        return failure(self.code, self.message)


def failure(code: str, message: str) -> Dict[str, Any]:
    return {'success': False, 'error': code, 'message': message}


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    return 'locked' in str(error) or 'busy' in str(error)


def _format_local(dt) -> str:
    return dt.strftime('%Y-%m-%d %H:%M')


# =============================================================================
# REQUEST VALIDATION
# =============================================================================

def validate_booking_request(data: Dict[str, Any], today) -> Dict[str, Any]:
    """
    Validate and normalize a booking request body.

    Args:
        data: Request body
        today: Current local date

    Returns:
        dict: Normalized booking fields

    Raises:
        BookingRejected: VALIDATION_FAILED with the first problem found
    """
    def reject(key, **kwargs):
        raise BookingRejected(VALIDATION_FAILED, get_message(key, **kwargs))

    if not data.get('site_id'):
        reject('site_not_found')
    if not data.get('check_in_date') or not data.get('check_out_date'):
        reject('date_required')

    try:
        check_in = parse_date(data['check_in_date'])
        check_out = parse_date(data['check_out_date'])
    except (TypeError, ValueError):
        reject('invalid_date')

    if check_out <= check_in:
        reject('invalid_date_range')
    max_nights = current_app.config['MAX_STAY_NIGHTS']
    if (check_out - check_in).days > max_nights:
        reject('stay_too_long', max=max_nights)
    if check_in < today:
        reject('check_in_past')

    family_count = data.get('family_count', 1)
    visitor_count = data.get('visitor_count', 0)
    vehicle_count = data.get('vehicle_count', 0)
    if not validate_non_negative_int(family_count, minimum=1):
        reject('family_count_invalid')
    if not validate_non_negative_int(visitor_count):
        reject('visitor_count_invalid')
    if not validate_non_negative_int(vehicle_count):
        reject('vehicle_count_invalid')

    guest_name = sanitize_input(data.get('guest_name') or '', max_length=50)
    if not guest_name:
        reject('guest_name_required')
    guest_phone = (data.get('guest_phone') or '').strip()
    if not validate_phone(guest_phone):
        reject('guest_phone_invalid')

    total_price = data.get('total_price')
    if total_price is not None and not validate_non_negative_int(total_price):
        reject('invalid_amount', field='total_price')

    return {
        'site_id': str(data['site_id']),
        'check_in': check_in,
        'check_out': check_out,
        'nights': (check_out - check_in).days,
        'family_count': family_count,
        'visitor_count': visitor_count,
        'vehicle_count': vehicle_count,
        'guest_name': guest_name,
        'guest_phone': guest_phone,
        'request_text': sanitize_input(data.get('request_text') or '', max_length=500) or None,
        'total_price': total_price,
    }


# =============================================================================
# ATOMIC COMMIT
# =============================================================================

def _commit_booking(cursor, user_id: str, booking: Dict[str, Any], now) -> tuple:
    """
    Re-validate and insert inside an open BEGIN IMMEDIATE transaction.

    Returns:
        Tuple of (reservation_id, quote)

    Raises:
        BookingRejected: On any business rule failure
        sqlite3.IntegrityError: If a night was taken despite the checks
    """
    site_id = booking['site_id']
    check_in = booking['check_in']
    check_out = booking['check_out']

    site = get_site_by_id(site_id, cursor=cursor)
    if not site:
        raise BookingRejected(VALIDATION_FAILED, get_message('site_not_found'))
    if not site['active']:
        raise BookingRejected(VALIDATION_FAILED, get_message('site_inactive'))
    if booking['family_count'] > site['max_occupancy']:
        raise BookingRejected(VALIDATION_FAILED, get_message('occupancy_exceeded', max=site['max_occupancy']))

    window = resolve_open_window(get_active_rule(cursor=cursor), now)
    if window['status'] == PRE_OPEN:
        raise BookingRejected(PRE_OPEN, get_message('pre_open', open_at=_format_local(window['open_at'])))
    if window['status'] == CLOSED:
        raise BookingRejected(SEASON_CLOSED, get_message('season_closed'))

    last_night = last_bookable_night(window)
    if check_out - timedelta(days=1) > last_night:
        raise BookingRejected(SEASON_CLOSED, get_message('beyond_season', close_date=last_night.isoformat()))

    if is_site_blocked(site_id, check_in.isoformat(), check_out.isoformat(), cursor=cursor):
        raise BookingRejected(VALIDATION_FAILED, get_message('date_blocked'))

    if get_conflicting_reservations(site_id, check_in.isoformat(), check_out.isoformat(), cursor=cursor):
        raise BookingRejected(ALREADY_BOOKED, get_message('already_booked'))

    # Nights through the Saturday after check-in, for the End-cap check
    horizon = max(check_out, check_in + timedelta(days=2))
    occupied = get_occupied_nights(check_in.isoformat(), horizon.isoformat(), site_id, cursor=cursor)
    rule = evaluate_site_stay_rule(check_in, check_out, now, occupied.get(site_id, set()), last_night,
                                   current_app.config['D_N_DAYS'])
    if rule['is_blocked']:
        raise BookingRejected(RULE_VIOLATION, get_message('weekend_min_stay'))

    quote = quote_stay(site_id, check_in, check_out, booking['family_count'],
                       booking['visitor_count'], cursor=cursor)
    if booking['total_price'] is not None and booking['total_price'] != quote['total_price']:
        raise BookingRejected(VALIDATION_FAILED, get_message('price_changed', price=quote['total_price']))

    reservation_id = insert_reservation(cursor, {
        'user_id': user_id,
        'site_id': site_id,
        'check_in_date': check_in.isoformat(),
        'check_out_date': check_out.isoformat(),
        'nights': booking['nights'],
        'family_count': booking['family_count'],
        'visitor_count': booking['visitor_count'],
        'vehicle_count': booking['vehicle_count'],
        'total_price': quote['total_price'],
        'guest_name': booking['guest_name'],
        'guest_phone': booking['guest_phone'],
        'request_text': booking['request_text'],
    }, to_db_timestamp(now))

    return reservation_id, quote


def get_deposit_info(created_at: str) -> Dict[str, Any]:
    """Bank account and payment deadline shown after booking."""
    config = current_app.config
    deadline = from_db_timestamp(created_at) + timedelta(hours=config['PAYMENT_DEADLINE_HOURS'])
    return {
        'bank_name': config['DEPOSIT_BANK_NAME'],
        'account_number': config['DEPOSIT_ACCOUNT_NUMBER'],
        'account_holder': config['DEPOSIT_ACCOUNT_HOLDER'],
        'payment_deadline': deadline.isoformat(),
    }


def create_booking(user_id: str, data: Dict[str, Any], now=None) -> Dict[str, Any]:
    """
    Create a PENDING reservation atomically.

    Args:
        user_id: Authenticated user id
        data: site_id, check_in_date, check_out_date, family_count,
              visitor_count, vehicle_count, guest_name, guest_phone,
              request_text, total_price (optional, as quoted to the client)
        now: Reference instant (default: current time)

    Returns:
        Result dict with reservation, quote and deposit on success
    """
    now = now or get_now()

    try:
        booking = validate_booking_request(data or {}, now.date())
    except BookingRejected as e:
        return e.to_result()

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')
    except sqlite3.OperationalError as e:
        if _is_lock_error(e):
            logger.warning(f"[Booking] Lock timeout for {user_id} on {booking['site_id']}")
            return failure(CONCURRENT_REQUEST, get_message('concurrent_request'))
        raise

    try:
        reservation_id, quote = _commit_booking(cursor, user_id, booking, now)
        db.commit()
    except BookingRejected as e:
        db.rollback()
        logger.info(f"[Booking] Rejected {user_id} {booking['site_id']} "
                    f"{booking['check_in']}~{booking['check_out']}: {e.code}")
        return e.to_result()
    except sqlite3.IntegrityError:
        db.rollback()
        logger.warning(f"[Booking] Night conflict on insert for {booking['site_id']} {booking['check_in']}")
        return failure(ALREADY_BOOKED, get_message('already_booked'))
    except sqlite3.OperationalError as e:
        db.rollback()
        if _is_lock_error(e):
            return failure(CONCURRENT_REQUEST, get_message('concurrent_request'))
        raise
    except Exception:
        db.rollback()
        raise

    reservation = get_reservation_by_id(reservation_id)
    deposit = get_deposit_info(reservation['created_at'])
    deadline_local = _format_local(from_db_timestamp(reservation['created_at'])
                                   + timedelta(hours=current_app.config['PAYMENT_DEADLINE_HOURS']))

    logger.info(f"[Booking] Reservation {reservation_id} created by {user_id}: "
                f"{booking['site_id']} {booking['check_in']}~{booking['check_out']} {quote['total_price']}")

    return {
        'success': True,
        'reservation': reservation,
        'quote': quote,
        'deposit': deposit,
        'message': get_message('reservation_created', deadline=deadline_local)
    }


# =============================================================================
# GUEST CANCELLATION
# =============================================================================

def preview_refund(reservation: Dict[str, Any], now=None) -> Dict[str, Any]:
    """
    Refund a guest would receive if they cancelled now.

    Returns:
        calculate_refund result plus cancellable and total_price
    """
    now = now or get_now()
    refund = calculate_refund(reservation['total_price'], reservation['check_in_date'], now)
    refund['cancellable'] = reservation['status'] in CANCELLABLE_STATUSES
    refund['total_price'] = reservation['total_price']
    return refund


def request_guest_cancellation(reservation_id: int, user_id: str, data: Dict[str, Any], now=None) -> Dict[str, Any]:
    """
    Guest-initiated cancellation: computes the refund and moves the
    reservation to REFUND_PENDING, releasing its nights.

    Args:
        reservation_id: Reservation ID
        user_id: Requesting user (must own the reservation)
        data: refund_bank, refund_account, refund_holder, cancel_reason
        now: Reference instant

    Returns:
        Result dict with reservation, refund and freed_nights
    """
    now = now or get_now()
    data = data or {}

    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        return failure(NOT_FOUND, get_message('reservation_not_found'))
    if reservation['user_id'] != user_id:
        return failure(FORBIDDEN, get_message('not_owner'))

    bank = sanitize_input(data.get('refund_bank') or '', max_length=50)
    account = sanitize_input(data.get('refund_account') or '', max_length=50)
    holder = sanitize_input(data.get('refund_holder') or '', max_length=50)
    if not (bank and account and holder):
        return failure(VALIDATION_FAILED, get_message('refund_bank_required'))

    if reservation['status'] not in CANCELLABLE_STATUSES:
        return failure(INVALID_TRANSITION, get_message(
            'invalid_transition',
            current=get_message(f"status_{reservation['status']}"),
            target=get_message('status_REFUND_PENDING')
        ))

    refund = calculate_refund(reservation['total_price'], reservation['check_in_date'], now)

    try:
        result = move_to_refund_pending(reservation_id, {
            'refund_bank': bank,
            'refund_account': account,
            'refund_holder': holder,
            'refund_rate': refund['refund_rate'],
            'refund_amount': refund['refund_amount'],
            'cancel_reason': sanitize_input(data.get('cancel_reason') or '', max_length=500) or None,
        }, user_id, now)
    except InvalidStateTransitionError as e:
        return failure(INVALID_TRANSITION, str(e))

    _log_waitlist_fanout(result['freed_nights'])

    return {
        'success': True,
        'reservation': result['reservation'],
        'refund': refund,
        'freed_nights': result['freed_nights'],
        'message': get_message('cancel_requested', amount=refund['refund_amount'], rate=refund['refund_rate'])
    }


# =============================================================================
# ADMIN TRANSITIONS
# =============================================================================

ADMIN_ACTIONS = {
    'confirm': 'reservation_confirmed',
    'cancel': 'reservation_cancelled',
    'refund-complete': 'refund_completed',
    'no-show': 'reservation_no_show',
    'complete': 'reservation_completed',
}


def apply_admin_action(reservation_id: int, action: str, admin_id: str, now=None, notes: str = '') -> Dict[str, Any]:
    """
    Apply an admin status action to a reservation.

    Args:
        reservation_id: Reservation ID
        action: One of ADMIN_ACTIONS
        admin_id: Acting admin user id
        now: Reference instant
        notes: Optional history notes (cancel only)

    Returns:
        Result dict with reservation, freed_nights and waitlist_subscribers
    """
    now = now or get_now()
    config = current_app.config

    try:
        if action == 'confirm':
            result = confirm_reservation(reservation_id, admin_id, now,
                                         xp=config['CONFIRM_REWARD_XP'], tokens=config['CONFIRM_REWARD_TOKENS'])
        elif action == 'cancel':
            result = cancel_reservation(reservation_id, admin_id, notes)
        elif action == 'refund-complete':
            result = complete_refund(reservation_id, admin_id)
        elif action == 'no-show':
            result = mark_no_show(reservation_id, admin_id)
        elif action == 'complete':
            result = complete_reservation(reservation_id, admin_id)
        else:
            return failure(VALIDATION_FAILED, get_message('unknown_action', action=action))
    except InvalidStateTransitionError as e:
        return failure(INVALID_TRANSITION, get_message(
            'invalid_transition',
            current=get_message(f'status_{e.current_status}'),
            target=get_message(f'status_{e.target_status}')
        ))
    except ValueError:
        return failure(NOT_FOUND, get_message('reservation_not_found'))

    subscribers = _log_waitlist_fanout(result['freed_nights'])

    return {
        'success': True,
        'reservation': result['reservation'],
        'freed_nights': result['freed_nights'],
        'waitlist_subscribers': subscribers,
        'message': get_message(ADMIN_ACTIONS[action])
    }


def expire_pending_reservations(now=None) -> Dict[str, Any]:
    """
    Cancel unpaid PENDING reservations past the payment deadline.

    Returns:
        dict with expired entries and the waitlist subscribers to notify
    """
    now = now or get_now()
    expired = expire_unpaid_reservations(now, current_app.config['PAYMENT_DEADLINE_HOURS'])

    freed = [slot for entry in expired for slot in entry['freed_nights']]
    subscribers = _log_waitlist_fanout(freed)

    return {
        'success': True,
        'expired': expired,
        'waitlist_subscribers': subscribers,
        'message': get_message('expired_pending', count=len(expired))
    }


def _log_waitlist_fanout(freed_nights: list) -> list:
    """Look up waitlist subscribers for freed slots and log the fan-out."""
    if not freed_nights:
        return []
    subscribers = get_subscribers_for_slots(freed_nights)
    if subscribers:
        logger.info(f"[Waitlist] {len(subscribers)} subscribers to notify for {len(freed_nights)} freed nights")
    return subscribers


def get_owned_reservation(reservation_id: int, user_id: str, is_admin: bool = False) -> Optional[Dict[str, Any]]:
    """
    Get a reservation visible to the user.

    Returns:
        Result dict with reservation, or a NOT_FOUND/FORBIDDEN failure
    """
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        return failure(NOT_FOUND, get_message('reservation_not_found'))
    if reservation['user_id'] != user_id and not is_admin:
        return failure(FORBIDDEN, get_message('not_owner'))
    return {'success': True, 'reservation': reservation}
