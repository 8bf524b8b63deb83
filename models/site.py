"""
Site catalog data access functions.
Handles campsite CRUD operations. Sites are edited only by administrators;
the booking flow never mutates them.
"""

from database import get_db

SITE_TYPES = ('TENT', 'GLAMPING', 'CARAVAN', 'AUTO')


def _site_row_to_dict(row) -> dict:
    """Convert a sites row into a dict with the feature CSV split."""
    site = dict(row)
    site['features'] = [f.strip() for f in (site.get('features') or '').split(',') if f.strip()]
    site['active'] = bool(site['active'])
    return site


def get_all_sites(active_only: bool = True, site_type: str = None) -> list:
    """
    Get all campsites.

    Args:
        active_only: If True, only return active sites
        site_type: Filter by site type (optional)

    Returns:
        List of site dicts
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM sites WHERE 1=1'
    params = []

    if active_only:
        query += ' AND active = 1'

    if site_type:
        query += ' AND site_type = ?'
        params.append(site_type)

    query += ' ORDER BY display_order, id'

    cursor.execute(query, params)
    return [_site_row_to_dict(row) for row in cursor.fetchall()]


def get_site_by_id(site_id: str, cursor=None) -> dict:
    """
    Get site by ID.

    Args:
        site_id: Site ID
        cursor: Active transaction cursor (optional)

    Returns:
        Site dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT * FROM sites WHERE id = ?', (site_id,))
    row = cur.fetchone()
    return _site_row_to_dict(row) if row else None


def create_site(
    site_id: str,
    name: str,
    site_type: str = 'AUTO',
    price_weekday: int = None,
    price_weekend: int = None,
    max_occupancy: int = 1,
    features: list = None,
    description: str = '',
    display_order: int = 0
) -> str:
    """
    Create a new campsite.

    Args:
        site_id: Site identifier (e.g., 'A1')
        name: Display name
        site_type: One of SITE_TYPES
        price_weekday: Site weekday rate (None falls back to pricing config)
        price_weekend: Site weekend rate (None falls back to pricing config)
        max_occupancy: Maximum number of families
        features: List of feature labels
        description: Description text
        display_order: Sort order

    Returns:
        str: Site ID

    Raises:
        ValueError: If validation fails
    """
    if not site_id or not name:
        raise ValueError('사이트 ID와 이름은 필수입니다')
    if site_type not in SITE_TYPES:
        raise ValueError(f'사이트 유형이 올바르지 않습니다: {site_type}')
    if max_occupancy < 1:
        raise ValueError('최대 인원은 1 이상이어야 합니다')

    db = get_db()
    if get_site_by_id(site_id):
        raise ValueError(f'이미 존재하는 사이트입니다: {site_id}')

    db.execute('''
        INSERT INTO sites (id, name, site_type, description, price_weekday, price_weekend,
                           max_occupancy, features, display_order)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (site_id, name, site_type, description, price_weekday, price_weekend,
          max_occupancy, ','.join(features or []), display_order))
    db.commit()
    return site_id


def update_site(site_id: str, **fields) -> bool:
    """
    Update site fields.

    Args:
        site_id: Site ID
        **fields: Fields to update (name, site_type, description, price_weekday,
                  price_weekend, max_occupancy, features, active, display_order)

    Returns:
        bool: True if updated
    """
    allowed_fields = ['name', 'site_type', 'description', 'price_weekday', 'price_weekend',
                      'max_occupancy', 'features', 'active', 'display_order']

    updates = []
    values = []

    for field in allowed_fields:
        if field in fields:
            value = fields[field]
            if field == 'features' and isinstance(value, (list, tuple)):
                value = ','.join(value)
            if field == 'active':
                value = 1 if value else 0
            updates.append(f'{field} = ?')
            values.append(value)

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(site_id)

    db = get_db()
    cursor = db.execute(f'UPDATE sites SET {", ".join(updates)} WHERE id = ?', values)
    db.commit()
    return cursor.rowcount > 0
