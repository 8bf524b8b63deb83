"""
Reservation CRUD operations.
Handles create and read for reservations and their occupied nights.
"""

from database import get_db
from utils.datetime_helpers import iter_nights, parse_date
from .reservation_state import PENDING, record_status_history


RESERVATION_FIELDS = (
    'user_id', 'site_id', 'check_in_date', 'check_out_date', 'nights',
    'family_count', 'visitor_count', 'vehicle_count', 'total_price',
    'guest_name', 'guest_phone', 'request_text',
)


# =============================================================================
# CREATE
# =============================================================================

def insert_reservation_nights(cursor, reservation_id: int, site_id: str,
                              check_in_date: str, check_out_date: str) -> int:
    """
    Insert one reservation_nights row per occupied night.

    The (site_id, night_date) pair is unique, so an overlapping insert raises
    sqlite3.IntegrityError and the caller's transaction must roll back.

    Returns:
        int: Number of nights inserted
    """
    nights = list(iter_nights(parse_date(check_in_date), parse_date(check_out_date)))
    cursor.executemany('''
        INSERT INTO reservation_nights (reservation_id, site_id, night_date)
        VALUES (?, ?, ?)
    ''', [(reservation_id, site_id, night.isoformat()) for night in nights])
    return len(nights)


def insert_reservation(cursor, data: dict, created_at: str) -> int:
    """
    Insert a PENDING reservation with its nights and initial history row.
    Must run inside the caller's transaction.

    Args:
        cursor: Active transaction cursor
        data: Values for RESERVATION_FIELDS
        created_at: UTC timestamp text (DB_TIMESTAMP_FORMAT)

    Returns:
        int: New reservation ID
    """
    columns = ', '.join(RESERVATION_FIELDS)
    placeholders = ', '.join('?' for _ in RESERVATION_FIELDS)

    cursor.execute(f'''
        INSERT INTO reservations ({columns}, status, created_at, updated_at)
        VALUES ({placeholders}, ?, ?, ?)
    ''', [data.get(field) for field in RESERVATION_FIELDS] + [PENDING, created_at, created_at])
    reservation_id = cursor.lastrowid

    insert_reservation_nights(cursor, reservation_id, data['site_id'],
                              data['check_in_date'], data['check_out_date'])
    record_status_history(cursor, reservation_id, None, PENDING, data['user_id'], '예약 신청')
    return reservation_id


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: int, cursor=None) -> dict:
    """
    Get reservation by ID with the site name.

    Args:
        reservation_id: Reservation ID
        cursor: Active transaction cursor (optional)

    Returns:
        Reservation dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT r.*, s.name AS site_name, s.site_type
        FROM reservations r
        JOIN sites s ON r.site_id = s.id
        WHERE r.id = ?
    ''', (reservation_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_reservation_nights(reservation_id: int) -> list:
    """Get the night dates currently held by a reservation."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT night_date FROM reservation_nights
        WHERE reservation_id = ?
        ORDER BY night_date
    ''', (reservation_id,))
    return [row['night_date'] for row in cursor.fetchall()]
