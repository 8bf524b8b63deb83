"""
Stay package data access functions.
Handles CRUD operations for stay_packages (multi-night package promotions).
"""

from database import get_db
from typing import Optional, List, Dict


# =============================================================================
# QUERY OPERATIONS
# =============================================================================

def get_all_packages(active_only: bool = True) -> List[Dict]:
    """
    Get all stay packages.

    Args:
        active_only: If True, only return active packages

    Returns:
        List of package dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM stay_packages WHERE 1=1'
    if active_only:
        query += ' AND active = 1'
    query += ' ORDER BY min_nights ASC, name ASC'

    cursor.execute(query)
    return [dict(row) for row in cursor.fetchall()]


def get_package_by_id(package_id: int) -> Optional[Dict]:
    """
    Get a single package by ID.

    Args:
        package_id: Package ID

    Returns:
        Package dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM stay_packages WHERE id = ?', (package_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_applicable_packages(check_in_date: str, nights: int, cursor=None) -> List[Dict]:
    """
    Get active packages valid for a check-in date and stay length.

    Args:
        check_in_date: Check-in date (YYYY-MM-DD)
        nights: Number of nights
        cursor: Active transaction cursor (optional)

    Returns:
        List of applicable package dicts, largest discount first
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT * FROM stay_packages
        WHERE active = 1
          AND min_nights <= ?
          AND (valid_from IS NULL OR valid_from <= ?)
          AND (valid_until IS NULL OR valid_until >= ?)
        ORDER BY discount_amount DESC
    ''', (nights, check_in_date, check_in_date))
    return [dict(row) for row in cur.fetchall()]


# =============================================================================
# VALIDATION
# =============================================================================

def validate_package_data(data: Dict) -> tuple:
    """
    Validate package data.

    Args:
        data: Package data dict

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not data.get('name'):
        return False, '패키지 이름은 필수입니다'

    min_nights = data.get('min_nights', 2)
    if not isinstance(min_nights, int) or min_nights < 1:
        return False, '최소 숙박일은 1 이상이어야 합니다'

    discount = data.get('discount_amount', 0)
    if not isinstance(discount, int) or discount < 0:
        return False, '할인 금액은 0 이상이어야 합니다'

    valid_from = data.get('valid_from')
    valid_until = data.get('valid_until')
    if valid_from and valid_until and valid_from > valid_until:
        return False, '유효 시작일은 종료일보다 이전이어야 합니다'

    return True, ''


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_package(data: Dict) -> int:
    """
    Create a new stay package.

    Args:
        data: name, min_nights, discount_amount, valid_from, valid_until

    Returns:
        int: New package ID

    Raises:
        ValueError: If validation fails
    """
    is_valid, error = validate_package_data(data)
    if not is_valid:
        raise ValueError(error)

    db = get_db()
    cursor = db.execute('''
        INSERT INTO stay_packages (name, min_nights, discount_amount, valid_from, valid_until, active)
        VALUES (?, ?, ?, ?, ?, 1)
    ''', (data['name'], data.get('min_nights', 2), data.get('discount_amount', 0),
          data.get('valid_from'), data.get('valid_until')))
    db.commit()
    return cursor.lastrowid


def deactivate_package(package_id: int) -> bool:
    """Deactivate a package. Returns True if a row was updated."""
    db = get_db()
    cursor = db.execute('UPDATE stay_packages SET active = 0 WHERE id = ?', (package_id,))
    db.commit()
    return cursor.rowcount > 0
