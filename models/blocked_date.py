"""
Blocked date model.
CRUD operations for administrative site blocks (maintenance, private events).
A blocked (site, date) is unavailable regardless of pricing or stay rules.
"""

import logging
import sqlite3
from database import get_db

logger = logging.getLogger(__name__)


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_blocked_date(
    site_id: str,
    blocked_date: str,
    memo: str = None,
    created_by: str = None
) -> int:
    """
    Block a site for one date.

    Args:
        site_id: Site ID to block
        blocked_date: Date to block (YYYY-MM-DD)
        memo: Optional memo
        created_by: Admin user id

    Returns:
        int: Block ID

    Raises:
        ValueError: If the night is occupied or already blocked
    """
    with get_db() as conn:
        conflict = conn.execute('''
            SELECT reservation_id FROM reservation_nights
            WHERE site_id = ? AND night_date = ?
        ''', (site_id, blocked_date)).fetchone()

        if conflict:
            raise ValueError(
                f"예약이 있는 날짜는 차단할 수 없습니다 (예약 #{conflict['reservation_id']})"
            )

        try:
            cursor = conn.execute('''
                INSERT INTO blocked_dates (site_id, blocked_date, memo, created_by)
                VALUES (?, ?, ?, ?)
            ''', (site_id, blocked_date, memo, created_by))
        except sqlite3.IntegrityError:
            raise ValueError('이미 차단된 날짜입니다')

        logger.info(f"[Block] {site_id} blocked on {blocked_date} by {created_by}")
        return cursor.lastrowid


def get_blocked_date_by_id(block_id: int) -> dict:
    """
    Get a block by ID.

    Args:
        block_id: Block ID

    Returns:
        Block dict or None
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM blocked_dates WHERE id = ?', (block_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def delete_blocked_date(block_id: int) -> dict:
    """
    Remove a block.

    Args:
        block_id: Block ID

    Returns:
        dict: The removed block (the freed slot), or None if not found
    """
    block = get_blocked_date_by_id(block_id)
    if not block:
        return None

    with get_db() as conn:
        conn.execute('DELETE FROM blocked_dates WHERE id = ?', (block_id,))

    logger.info(f"[Block] {block['site_id']} unblocked on {block['blocked_date']}")
    return block


# =============================================================================
# QUERIES
# =============================================================================

def get_blocked_dates(
    start_date: str = None,
    end_date: str = None,
    site_id: str = None,
    cursor=None
) -> list:
    """
    Get blocks, optionally filtered by date range and site.

    Args:
        start_date: Inclusive lower bound (YYYY-MM-DD)
        end_date: Exclusive upper bound (YYYY-MM-DD)
        site_id: Filter by site
        cursor: Active transaction cursor (optional)

    Returns:
        list: Block dicts ordered by date
    """
    cur = cursor or get_db().cursor()

    query = 'SELECT * FROM blocked_dates WHERE 1=1'
    params = []
    if start_date:
        query += ' AND blocked_date >= ?'
        params.append(start_date)
    if end_date:
        query += ' AND blocked_date < ?'
        params.append(end_date)
    if site_id:
        query += ' AND site_id = ?'
        params.append(site_id)
    query += ' ORDER BY blocked_date, site_id'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def is_site_blocked(site_id: str, start_date: str, end_date: str, cursor=None) -> bool:
    """
    Check whether any night in [start_date, end_date) is blocked for a site.

    Args:
        site_id: Site ID
        start_date: Check-in date (YYYY-MM-DD)
        end_date: Check-out date, exclusive (YYYY-MM-DD)
        cursor: Active transaction cursor (optional)

    Returns:
        bool: True if at least one night is blocked
    """
    return bool(get_blocked_dates(start_date, end_date, site_id, cursor=cursor))
