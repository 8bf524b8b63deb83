"""
Pricing data access functions.
Handles the global pricing config, recurring peak seasons and public holidays.
Always read at quote time so admin edits apply to the next quote.
"""

from database import get_db

PRICE_FIELDS = (
    'weekday',
    'weekend',
    'peak_weekday',
    'peak_weekend',
    'extra_family',
    'visitor',
    'long_stay_discount',
)

DAYS_IN_MONTH = {1: 31, 2: 29, 3: 31, 4: 30, 5: 31, 6: 30, 7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}


# =============================================================================
# PRICING CONFIG
# =============================================================================

def get_pricing_config(cursor=None) -> dict:
    """
    Get the current pricing config with its seasons.

    Args:
        cursor: Active transaction cursor (optional)

    Returns:
        dict: Config fields plus 'seasons' list. Empty config if not seeded.
    """
    cur = cursor or get_db().cursor()

    cur.execute('SELECT * FROM pricing_config WHERE id = 1')
    row = cur.fetchone()
    config = {field: row[field] for field in PRICE_FIELDS} if row else {field: 0 for field in PRICE_FIELDS}

    cur.execute('''
        SELECT id, name, start_month, start_day, end_month, end_day
        FROM pricing_seasons
        ORDER BY start_month, start_day
    ''')
    config['seasons'] = [dict(r) for r in cur.fetchall()]
    return config


def validate_season(season: dict) -> tuple:
    """
    Validate a season window definition.

    Args:
        season: dict with name, start_month, start_day, end_month, end_day

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not season.get('name'):
        return False, '시즌 이름은 필수입니다'

    for month_key, day_key in (('start_month', 'start_day'), ('end_month', 'end_day')):
        month = season.get(month_key)
        day = season.get(day_key)
        if not isinstance(month, int) or not 1 <= month <= 12:
            return False, '성수기 기간 설정이 올바르지 않습니다'
        if not isinstance(day, int) or not 1 <= day <= DAYS_IN_MONTH[month]:
            return False, '성수기 기간 설정이 올바르지 않습니다'

    return True, ''


def update_pricing_config(data: dict, updated_by: str = None) -> dict:
    """
    Replace the pricing config (and seasons when given).

    Args:
        data: Any of PRICE_FIELDS (non-negative ints) and optional 'seasons' list
        updated_by: Admin user id

    Returns:
        dict: The saved config

    Raises:
        ValueError: If validation fails
    """
    current = get_pricing_config()
    values = {}
    for field in PRICE_FIELDS:
        value = data.get(field, current[field])
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f'{field} 값이 올바르지 않습니다')
        values[field] = value

    seasons = data.get('seasons')
    if seasons is not None:
        for season in seasons:
            is_valid, error = validate_season(season)
            if not is_valid:
                raise ValueError(error)

    db = get_db()
    try:
        db.execute('''
            INSERT INTO pricing_config (id, weekday, weekend, peak_weekday, peak_weekend,
                                        extra_family, visitor, long_stay_discount, updated_by, updated_at)
            VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(id) DO UPDATE SET
                weekday = excluded.weekday,
                weekend = excluded.weekend,
                peak_weekday = excluded.peak_weekday,
                peak_weekend = excluded.peak_weekend,
                extra_family = excluded.extra_family,
                visitor = excluded.visitor,
                long_stay_discount = excluded.long_stay_discount,
                updated_by = excluded.updated_by,
                updated_at = CURRENT_TIMESTAMP
        ''', tuple(values[f] for f in PRICE_FIELDS) + (updated_by,))

        if seasons is not None:
            db.execute('DELETE FROM pricing_seasons')
            for season in seasons:
                db.execute('''
                    INSERT INTO pricing_seasons (name, start_month, start_day, end_month, end_day)
                    VALUES (?, ?, ?, ?, ?)
                ''', (season['name'], season['start_month'], season['start_day'],
                      season['end_month'], season['end_day']))

        db.commit()
    except Exception:
        db.rollback()
        raise

    return get_pricing_config()


# =============================================================================
# HOLIDAYS
# =============================================================================

def get_holidays(start_date: str = None, end_date: str = None, cursor=None) -> list:
    """
    Get public holidays, optionally within [start_date, end_date].

    Args:
        start_date: Inclusive lower bound (YYYY-MM-DD)
        end_date: Inclusive upper bound (YYYY-MM-DD)
        cursor: Active transaction cursor (optional)

    Returns:
        list: Holiday dicts ordered by date
    """
    cur = cursor or get_db().cursor()

    query = 'SELECT holiday_date, name FROM holidays WHERE 1=1'
    params = []
    if start_date:
        query += ' AND holiday_date >= ?'
        params.append(start_date)
    if end_date:
        query += ' AND holiday_date <= ?'
        params.append(end_date)
    query += ' ORDER BY holiday_date'

    cur.execute(query, params)
    return [dict(r) for r in cur.fetchall()]


def save_holiday(holiday_date: str, name: str) -> None:
    """Create or rename a public holiday."""
    if not name:
        raise ValueError('공휴일 이름은 필수입니다')
    db = get_db()
    db.execute('''
        INSERT INTO holidays (holiday_date, name) VALUES (?, ?)
        ON CONFLICT(holiday_date) DO UPDATE SET name = excluded.name
    ''', (holiday_date, name))
    db.commit()


def delete_holiday(holiday_date: str) -> bool:
    """Delete a public holiday. Returns True if a row was removed."""
    db = get_db()
    cursor = db.execute('DELETE FROM holidays WHERE holiday_date = ?', (holiday_date,))
    db.commit()
    return cursor.rowcount > 0
