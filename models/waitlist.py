"""
Waitlist model.
Registrations for a date that is currently full, optionally for one site.
A NULL site_id means any site on that date.
"""

import logging
import sqlite3
from typing import Optional, List

from database import get_db

logger = logging.getLogger(__name__)


# =============================================================================
# REGISTRATION
# =============================================================================

def _find_entry(cursor, user_id: str, target_date: str, site_id: Optional[str]) -> Optional[dict]:
    cursor.execute('''
        SELECT w.*, s.name AS site_name
        FROM waitlist w
        LEFT JOIN sites s ON w.site_id = s.id
        WHERE w.user_id = ?
          AND w.target_date = ?
          AND IFNULL(w.site_id, '') = IFNULL(?, '')
    ''', (user_id, target_date, site_id))
    row = cursor.fetchone()
    return dict(row) if row else None


def register_waitlist(user_id: str, target_date: str, site_id: str = None) -> dict:
    """
    Register a user on the waitlist for a date (and optionally a site).

    Registering the same (user, date, site) twice keeps the first entry.

    Args:
        user_id: User id
        target_date: Wanted night (YYYY-MM-DD)
        site_id: Wanted site, None for any site

    Returns:
        dict: {'created': bool, 'entry': waitlist dict}
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('''
            INSERT INTO waitlist (user_id, target_date, site_id)
            VALUES (?, ?, ?)
        ''', (user_id, target_date, site_id))
        db.commit()
        created = True
    except sqlite3.IntegrityError:
        db.rollback()
        created = False

    if created:
        logger.info(f"[Waitlist] {user_id} registered for {target_date} site={site_id or 'ANY'}")

    return {'created': created, 'entry': _find_entry(cursor, user_id, target_date, site_id)}


def unregister_waitlist(user_id: str, target_date: str, site_id: str = None) -> bool:
    """
    Remove a user's waitlist entry.

    Returns:
        bool: True if an entry was removed
    """
    db = get_db()
    cursor = db.execute('''
        DELETE FROM waitlist
        WHERE user_id = ?
          AND target_date = ?
          AND IFNULL(site_id, '') = IFNULL(?, '')
    ''', (user_id, target_date, site_id))
    db.commit()
    return cursor.rowcount > 0


# =============================================================================
# QUERIES
# =============================================================================

def get_user_waitlist(user_id: str, from_date: str = None) -> List[dict]:
    """
    Get a user's waitlist entries.

    Args:
        user_id: User id
        from_date: Only entries on or after this date (optional)

    Returns:
        List of entries ordered by target date
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT w.*, s.name AS site_name
        FROM waitlist w
        LEFT JOIN sites s ON w.site_id = s.id
        WHERE w.user_id = ?
    '''
    params = [user_id]
    if from_date:
        query += ' AND w.target_date >= ?'
        params.append(from_date)
    query += ' ORDER BY w.target_date, w.id'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_waitlist_users(target_date: str, site_id: str = None, include_notified: bool = False) -> List[dict]:
    """
    Get the subscribers to notify when a slot frees up.

    For a concrete site this returns entries for that site plus any-site
    entries. Without a site it returns every entry on the date.

    Args:
        target_date: Freed night (YYYY-MM-DD)
        site_id: Freed site (optional)
        include_notified: Include entries already notified

    Returns:
        List of entries, oldest registration first
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM waitlist WHERE target_date = ?'
    params = [target_date]
    if site_id:
        query += ' AND (site_id = ? OR site_id IS NULL)'
        params.append(site_id)
    if not include_notified:
        query += ' AND notified_at IS NULL'
    query += ' ORDER BY created_at, id'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_subscribers_for_slots(freed_nights: list) -> List[dict]:
    """
    Collect un-notified subscribers for a list of freed slots.

    Args:
        freed_nights: {'site_id', 'night_date'} dicts

    Returns:
        Unique entries across all slots
    """
    seen = set()
    subscribers = []
    for slot in freed_nights:
        for entry in get_waitlist_users(slot['night_date'], slot['site_id']):
            if entry['id'] not in seen:
                seen.add(entry['id'])
                subscribers.append(entry)
    return subscribers


def mark_waitlist_notified(entry_ids: List[int], notified_at: str) -> int:
    """
    Stamp notified_at on entries after the outbound notification was sent.

    Args:
        entry_ids: Waitlist entry IDs
        notified_at: UTC timestamp text

    Returns:
        int: Number of entries updated
    """
    if not entry_ids:
        return 0

    placeholders = ','.join('?' * len(entry_ids))
    db = get_db()
    cursor = db.execute(f'''
        UPDATE waitlist SET notified_at = ?
        WHERE id IN ({placeholders}) AND notified_at IS NULL
    ''', [notified_at, *entry_ids])
    db.commit()
    return cursor.rowcount
