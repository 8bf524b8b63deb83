"""
Open-day rule data access functions.
Exactly one rule is active at a time; creating a rule deactivates the previous one.
"""

from database import get_db
from utils.datetime_helpers import parse_local_datetime

REPEAT_RULES = ('NONE', 'MONTHLY')


def _rule_row_to_dict(row) -> dict:
    """Convert an open_day_rules row into a dict with typed automation fields."""
    rule = dict(row)
    rule['is_active'] = bool(rule['is_active'])
    target_day = rule.get('target_day')
    if target_day and target_day != 'END':
        rule['target_day'] = int(target_day)
    return rule


def get_active_rule(cursor=None) -> dict:
    """
    Get the currently active open-day rule.

    Args:
        cursor: Active transaction cursor (optional)

    Returns:
        Rule dict or None if no rule is active
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT * FROM open_day_rules
        WHERE is_active = 1
        ORDER BY id DESC
        LIMIT 1
    ''')
    row = cur.fetchone()
    return _rule_row_to_dict(row) if row else None


def get_rule_history(limit: int = 20) -> list:
    """Get the most recent open-day rules, newest first."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM open_day_rules ORDER BY id DESC LIMIT ?', (limit,))
    return [_rule_row_to_dict(row) for row in cursor.fetchall()]


def validate_rule_data(data: dict) -> tuple:
    """
    Validate an open-day rule definition.

    Args:
        data: repeat_rule plus open_at/close_at (NONE) or
              months_to_add/target_day (MONTHLY)

    Returns:
        Tuple of (is_valid, error_key)
    """
    repeat_rule = data.get('repeat_rule', 'NONE')
    if repeat_rule not in REPEAT_RULES:
        return False, 'open_day_invalid_automation'

    if repeat_rule == 'NONE':
        if not data.get('open_at') or not data.get('close_at'):
            return False, 'open_day_range_required'
        try:
            open_at = parse_local_datetime(data['open_at'])
            close_at = parse_local_datetime(data['close_at'])
        except (TypeError, ValueError):
            return False, 'invalid_date'
        if open_at >= close_at:
            return False, 'open_day_invalid_range'
        return True, ''

    months_to_add = data.get('months_to_add')
    if not isinstance(months_to_add, int) or isinstance(months_to_add, bool) or not 0 <= months_to_add <= 12:
        return False, 'open_day_invalid_automation'

    target_day = data.get('target_day', 'END')
    if target_day != 'END':
        if not isinstance(target_day, int) or isinstance(target_day, bool) or not 1 <= target_day <= 31:
            return False, 'open_day_invalid_automation'

    return True, ''


def create_open_day_rule(data: dict, created_by: str = None) -> int:
    """
    Create a new active rule and deactivate the previous one atomically.

    Args:
        data: Rule definition (see validate_rule_data) plus optional season_name
        created_by: Admin user id

    Returns:
        int: New rule ID

    Raises:
        ValueError: If validation fails (message is a messages.py key)
    """
    is_valid, error_key = validate_rule_data(data)
    if not is_valid:
        raise ValueError(error_key)

    repeat_rule = data.get('repeat_rule', 'NONE')
    if repeat_rule == 'NONE':
        open_at = parse_local_datetime(data['open_at']).isoformat()
        close_at = parse_local_datetime(data['close_at']).isoformat()
        months_to_add = None
        target_day = None
        default_name = '새 시즌'
    else:
        open_at = None
        close_at = None
        months_to_add = data['months_to_add']
        target_day = str(data.get('target_day', 'END'))
        default_name = '매월 자동 오픈'

    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('UPDATE open_day_rules SET is_active = 0 WHERE is_active = 1')
        cursor.execute('''
            INSERT INTO open_day_rules (season_name, repeat_rule, open_at, close_at,
                                        months_to_add, target_day, is_active, created_by)
            VALUES (?, ?, ?, ?, ?, ?, 1, ?)
        ''', (data.get('season_name') or default_name, repeat_rule, open_at, close_at,
              months_to_add, target_day, created_by))
        rule_id = cursor.lastrowid
        db.commit()
    except Exception:
        db.rollback()
        raise

    return rule_id
