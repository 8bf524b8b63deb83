"""
Reservation state management functions.
Handles the status lifecycle, transition validation, history and the
unpaid-expiry sweep.

    PENDING -> CONFIRMED -> COMPLETED
    PENDING -> CANCELLED
    PENDING | CONFIRMED -> REFUND_PENDING -> REFUNDED
    CONFIRMED -> NO_SHOW
"""

import logging
from datetime import timedelta

from database import get_db
from utils.datetime_helpers import to_db_timestamp

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

PENDING = 'PENDING'
CONFIRMED = 'CONFIRMED'
COMPLETED = 'COMPLETED'
CANCELLED = 'CANCELLED'
REFUND_PENDING = 'REFUND_PENDING'
REFUNDED = 'REFUNDED'
NO_SHOW = 'NO_SHOW'

RESERVATION_STATUSES = (PENDING, CONFIRMED, COMPLETED, CANCELLED, REFUND_PENDING, REFUNDED, NO_SHOW)

# Statuses that hold the site's nights in reservation_nights
OCCUPYING_STATUSES = (PENDING, CONFIRMED, COMPLETED)

# Statuses that give the nights back (and wake the waitlist)
RELEASING_STATUSES = (CANCELLED, REFUND_PENDING, REFUNDED, NO_SHOW)

TERMINAL_STATUSES = (CANCELLED, REFUNDED, COMPLETED, NO_SHOW)

VALID_TRANSITIONS = {
    PENDING: (CONFIRMED, CANCELLED, REFUND_PENDING),
    CONFIRMED: (COMPLETED, REFUND_PENDING, NO_SHOW),
    REFUND_PENDING: (REFUNDED,),
    CANCELLED: (),
    REFUNDED: (),
    COMPLETED: (),
    NO_SHOW: (),
}


class InvalidStateTransitionError(ValueError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(f'{current_status} 상태에서는 {target_status}(으)로 변경할 수 없습니다')


def validate_state_transition(current_status: str, target_status: str) -> None:
    """
    Validate a status change against VALID_TRANSITIONS.

    Raises:
        InvalidStateTransitionError: If the transition is not allowed
    """
    if target_status not in VALID_TRANSITIONS.get(current_status, ()):
        raise InvalidStateTransitionError(current_status, target_status)


# =============================================================================
# INTERNAL HELPERS
# =============================================================================

def _fetch_reservation(cursor, reservation_id: int) -> dict:
    cursor.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def release_reservation_nights(cursor, reservation_id: int) -> list:
    """
    Delete the night rows held by a reservation.

    Args:
        cursor: Active transaction cursor
        reservation_id: Reservation ID

    Returns:
        list: Freed slots as {'site_id', 'night_date'} dicts
    """
    cursor.execute('''
        SELECT site_id, night_date FROM reservation_nights
        WHERE reservation_id = ?
        ORDER BY night_date
    ''', (reservation_id,))
    freed = [dict(r) for r in cursor.fetchall()]
    cursor.execute('DELETE FROM reservation_nights WHERE reservation_id = ?', (reservation_id,))
    return freed


def record_status_history(cursor, reservation_id: int, from_status, to_status: str,
                          changed_by: str, notes: str = '') -> None:
    """Insert a row into reservation_status_history."""
    cursor.execute('''
        INSERT INTO reservation_status_history
        (reservation_id, from_status, to_status, changed_by, notes, created_at)
        VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ''', (reservation_id, from_status, to_status, changed_by, notes))


def _apply_transition(cursor, reservation: dict, target_status: str, changed_by: str,
                      notes: str = '', extra_fields: dict = None) -> list:
    """
    Move a fetched reservation to target_status inside the caller's transaction.

    Returns:
        list: Freed slots (empty unless the target releases availability)
    """
    validate_state_transition(reservation['status'], target_status)

    fields = dict(extra_fields or {})
    assignments = ', '.join(f'{name} = ?' for name in fields)
    sql = 'UPDATE reservations SET status = ?, updated_at = CURRENT_TIMESTAMP'
    if assignments:
        sql += ', ' + assignments
    sql += ' WHERE id = ? AND status = ?'

    cursor.execute(sql, [target_status, *fields.values(), reservation['id'], reservation['status']])
    if cursor.rowcount == 0:
        # Another request moved it first
        raise InvalidStateTransitionError(reservation['status'], target_status)

    freed = []
    if target_status in RELEASING_STATUSES:
        freed = release_reservation_nights(cursor, reservation['id'])

    record_status_history(cursor, reservation['id'], reservation['status'], target_status,
                          changed_by, notes)
    return freed


def change_reservation_status(
    reservation_id: int,
    target_status: str,
    changed_by: str,
    notes: str = '',
    extra_fields: dict = None,
    after_transition=None
) -> dict:
    """
    Change a reservation's status as one transaction.

    Args:
        reservation_id: Reservation ID
        target_status: New status
        changed_by: User id making the change ('system' for jobs)
        notes: History notes
        extra_fields: Additional reservation columns to set
        after_transition: Optional callable(cursor, reservation) run before commit

    Returns:
        dict: {'reservation': updated dict, 'freed_nights': [...]}

    Raises:
        ValueError: If the reservation does not exist
        InvalidStateTransitionError: If the transition is not allowed
    """
    db = get_db()
    cursor = db.cursor()

    try:
        reservation = _fetch_reservation(cursor, reservation_id)
        if not reservation:
            raise ValueError('예약을 찾을 수 없습니다')

        freed = _apply_transition(cursor, reservation, target_status, changed_by, notes, extra_fields)

        if after_transition:
            after_transition(cursor, reservation)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"[State] Reservation {reservation_id}: {reservation['status']} -> {target_status} by {changed_by}")

    return {
        'reservation': _fetch_reservation(db.cursor(), reservation_id),
        'freed_nights': freed
    }


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

def confirm_reservation(reservation_id: int, confirmed_by: str, now, xp: int = 0, tokens: int = 0) -> dict:
    """
    Confirm a PENDING reservation after the deposit was verified.
    Grants the loyalty reward in the same transaction.
    """
    from .reward import grant_confirmation_reward

    def _grant(cursor, reservation):
        grant_confirmation_reward(cursor, reservation['user_id'], reservation['id'], xp, tokens)

    return change_reservation_status(
        reservation_id, CONFIRMED, confirmed_by, '입금 확인',
        extra_fields={'confirmed_at': to_db_timestamp(now)},
        after_transition=_grant
    )


def cancel_reservation(reservation_id: int, cancelled_by: str, notes: str = '') -> dict:
    """Cancel an unpaid PENDING reservation (admin action)."""
    return change_reservation_status(reservation_id, CANCELLED, cancelled_by, notes or '관리자 취소')


def request_cancellation(reservation_id: int, refund: dict, requested_by: str, now) -> dict:
    """
    Move a PENDING/CONFIRMED reservation to REFUND_PENDING.

    Args:
        reservation_id: Reservation ID
        refund: refund_bank, refund_account, refund_holder, refund_rate,
                refund_amount, cancel_reason
        requested_by: User id
        now: Request instant

    Returns:
        dict: {'reservation', 'freed_nights'}
    """
    fields = {
        'refund_bank': refund['refund_bank'],
        'refund_account': refund['refund_account'],
        'refund_holder': refund['refund_holder'],
        'refund_rate': refund['refund_rate'],
        'refund_amount': refund['refund_amount'],
        'cancel_reason': refund.get('cancel_reason'),
        'cancel_requested_at': to_db_timestamp(now),
    }
    return change_reservation_status(
        reservation_id, REFUND_PENDING, requested_by,
        f"환불율 {refund['refund_rate']}%", extra_fields=fields
    )


def complete_refund(reservation_id: int, completed_by: str) -> dict:
    """Mark a REFUND_PENDING reservation REFUNDED once the transfer is sent."""
    return change_reservation_status(reservation_id, REFUNDED, completed_by, '환불 송금 완료')


def mark_no_show(reservation_id: int, marked_by: str) -> dict:
    """Mark a CONFIRMED reservation as NO_SHOW."""
    return change_reservation_status(reservation_id, NO_SHOW, marked_by, '노쇼')


def complete_reservation(reservation_id: int, completed_by: str) -> dict:
    """Mark a CONFIRMED reservation COMPLETED after checkout."""
    return change_reservation_status(reservation_id, COMPLETED, completed_by, '이용 완료')


# =============================================================================
# EXPIRY SWEEP
# =============================================================================

def expire_unpaid_reservations(now, deadline_hours: int) -> list:
    """
    Cancel PENDING reservations created more than deadline_hours before now.
    Re-running is a no-op for reservations already moved on.

    Args:
        now: Sweep instant (aware datetime)
        deadline_hours: Payment deadline in hours

    Returns:
        list: {'reservation_id', 'user_id', 'freed_nights'} per expired reservation
    """
    cutoff = to_db_timestamp(now - timedelta(hours=deadline_hours))
    db = get_db()
    cursor = db.cursor()
    expired = []

    try:
        cursor.execute('''
            SELECT * FROM reservations
            WHERE status = ? AND created_at < ?
            ORDER BY created_at
        ''', (PENDING, cutoff))
        candidates = [dict(r) for r in cursor.fetchall()]

        for reservation in candidates:
            cursor.execute('''
                UPDATE reservations
                SET status = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ? AND status = ?
            ''', (CANCELLED, reservation['id'], PENDING))
            if cursor.rowcount == 0:
                continue
            freed = release_reservation_nights(cursor, reservation['id'])
            record_status_history(cursor, reservation['id'], PENDING, CANCELLED, 'system',
                                  f'입금 기한({deadline_hours}시간) 경과 자동 취소')
            expired.append({
                'reservation_id': reservation['id'],
                'user_id': reservation['user_id'],
                'freed_nights': freed
            })

        db.commit()
    except Exception:
        db.rollback()
        raise

    if expired:
        logger.info(f"[Expiry] Cancelled {len(expired)} unpaid reservations (cutoff {cutoff} UTC)")
    return expired


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(reservation_id: int) -> list:
    """
    Get status change history for reservation.

    Args:
        reservation_id: Reservation ID

    Returns:
        list: History entries, oldest first
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY id ASC
    ''', (reservation_id,))
    return [dict(r) for r in cursor.fetchall()]
