"""
Reservation query functions.
Listing and filtering for guests and the admin console.
"""

from datetime import timedelta

from database import get_db
from utils.datetime_helpers import to_db_timestamp, from_db_timestamp
from .reservation_state import PENDING, RESERVATION_STATUSES


def get_user_reservations(user_id: str, status: str = None) -> list:
    """
    Get a user's reservations, newest check-in first.

    Args:
        user_id: Owner user id
        status: Optional status filter

    Returns:
        list: Reservation dicts with site_name
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*, s.name AS site_name
        FROM reservations r
        JOIN sites s ON r.site_id = s.id
        WHERE r.user_id = ?
    '''
    params = [user_id]
    if status:
        query += ' AND r.status = ?'
        params.append(status)
    query += ' ORDER BY r.check_in_date DESC, r.id DESC'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_reservations_filtered(
    status: str = None,
    date_from: str = None,
    date_to: str = None,
    site_id: str = None,
    search: str = None,
    limit: int = 200
) -> list:
    """
    Get reservations with filters for the admin list.

    Args:
        status: Status filter (one of RESERVATION_STATUSES)
        date_from: Check-in on or after (YYYY-MM-DD)
        date_to: Check-in on or before (YYYY-MM-DD)
        site_id: Site filter
        search: Guest name or phone fragment
        limit: Max rows

    Returns:
        list: Reservation dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*, s.name AS site_name
        FROM reservations r
        JOIN sites s ON r.site_id = s.id
        WHERE 1=1
    '''
    params = []

    if status:
        if status not in RESERVATION_STATUSES:
            raise ValueError(f'알 수 없는 상태입니다: {status}')
        query += ' AND r.status = ?'
        params.append(status)

    if date_from:
        query += ' AND r.check_in_date >= ?'
        params.append(date_from)

    if date_to:
        query += ' AND r.check_in_date <= ?'
        params.append(date_to)

    if site_id:
        query += ' AND r.site_id = ?'
        params.append(site_id)

    if search:
        query += ' AND (r.guest_name LIKE ? OR r.guest_phone LIKE ?)'
        params.extend([f'%{search}%', f'%{search}%'])

    query += ' ORDER BY r.check_in_date ASC, r.id ASC LIMIT ?'
    params.append(limit)

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_pending_with_deadline(now, deadline_hours: int, warning_hours: int) -> list:
    """
    Get PENDING reservations annotated with their payment deadline.

    Each row gets payment_deadline (UTC text), is_overdue (deadline passed)
    and is_deadline_near (within warning_hours before the deadline).

    Args:
        now: Current instant (aware datetime)
        deadline_hours: Hours allowed for the deposit
        warning_hours: Warning window before the deadline

    Returns:
        list: Overdue first, then nearest deadline
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT r.*, s.name AS site_name
        FROM reservations r
        JOIN sites s ON r.site_id = s.id
        WHERE r.status = ?
        ORDER BY r.created_at ASC
    ''', (PENDING,))

    results = []
    for row in cursor.fetchall():
        reservation = dict(row)
        deadline = from_db_timestamp(reservation['created_at']) + timedelta(hours=deadline_hours)
        reservation['payment_deadline'] = to_db_timestamp(deadline)
        reservation['is_overdue'] = now >= deadline
        reservation['is_deadline_near'] = (
            not reservation['is_overdue'] and now >= deadline - timedelta(hours=warning_hours)
        )
        results.append(reservation)
    return results
