"""
Reservation availability functions.
Reads the reservation_nights ledger: one row per (site, night) held by a
PENDING, CONFIRMED or COMPLETED reservation.
"""

from database import get_db


def get_occupied_nights(start_date: str, end_date: str, site_id: str = None, cursor=None) -> dict:
    """
    Get occupied nights per site within [start_date, end_date).

    Args:
        start_date: First night (YYYY-MM-DD)
        end_date: Exclusive upper bound (YYYY-MM-DD)
        site_id: Restrict to one site (optional)
        cursor: Active transaction cursor (optional)

    Returns:
        dict: {site_id: set of night_date strings}
    """
    cur = cursor or get_db().cursor()

    query = '''
        SELECT site_id, night_date FROM reservation_nights
        WHERE night_date >= ? AND night_date < ?
    '''
    params = [start_date, end_date]
    if site_id:
        query += ' AND site_id = ?'
        params.append(site_id)

    cur.execute(query, params)

    occupied = {}
    for row in cur.fetchall():
        occupied.setdefault(row['site_id'], set()).add(row['night_date'])
    return occupied


def get_conflicting_reservations(site_id: str, check_in_date: str, check_out_date: str, cursor=None) -> list:
    """
    Get reservations holding any night of [check_in_date, check_out_date) on a site.

    Args:
        site_id: Site ID
        check_in_date: Requested check-in (YYYY-MM-DD)
        check_out_date: Requested check-out (YYYY-MM-DD)
        cursor: Active transaction cursor (optional)

    Returns:
        list: Conflicts as {'reservation_id', 'night_date', 'status'}
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT rn.reservation_id, rn.night_date, r.status
        FROM reservation_nights rn
        JOIN reservations r ON rn.reservation_id = r.id
        WHERE rn.site_id = ?
          AND rn.night_date >= ?
          AND rn.night_date < ?
        ORDER BY rn.night_date
    ''', (site_id, check_in_date, check_out_date))
    return [dict(row) for row in cur.fetchall()]


def is_site_available(site_id: str, check_in_date: str, check_out_date: str, cursor=None) -> bool:
    """Check that no night of the stay is held on the site."""
    return not get_conflicting_reservations(site_id, check_in_date, check_out_date, cursor=cursor)
