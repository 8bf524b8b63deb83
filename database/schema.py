"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'reward_ledger',
        'waitlist',
        'reservation_status_history',
        'reservation_nights',
        'reservations',
        'blocked_dates',
        'open_day_rules',
        'stay_packages',
        'holidays',
        'pricing_seasons',
        'pricing_config',
        'sites'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Site catalog
    db.execute('''
        CREATE TABLE sites (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            site_type TEXT NOT NULL DEFAULT 'AUTO',
            description TEXT,
            price_weekday INTEGER,
            price_weekend INTEGER,
            max_occupancy INTEGER NOT NULL DEFAULT 1,
            features TEXT DEFAULT '',
            active INTEGER DEFAULT 1,
            display_order INTEGER DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Pricing (singleton config + recurring seasons + holidays + packages)
    db.execute('''
        CREATE TABLE pricing_config (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            weekday INTEGER NOT NULL,
            weekend INTEGER NOT NULL,
            peak_weekday INTEGER NOT NULL,
            peak_weekend INTEGER NOT NULL,
            extra_family INTEGER NOT NULL DEFAULT 0,
            visitor INTEGER NOT NULL DEFAULT 0,
            long_stay_discount INTEGER NOT NULL DEFAULT 0,
            updated_by TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE pricing_seasons (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            start_month INTEGER NOT NULL CHECK (start_month BETWEEN 1 AND 12),
            start_day INTEGER NOT NULL CHECK (start_day BETWEEN 1 AND 31),
            end_month INTEGER NOT NULL CHECK (end_month BETWEEN 1 AND 12),
            end_day INTEGER NOT NULL CHECK (end_day BETWEEN 1 AND 31)
        )
    ''')

    db.execute('''
        CREATE TABLE holidays (
            holiday_date TEXT PRIMARY KEY,
            name TEXT NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE stay_packages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            min_nights INTEGER NOT NULL DEFAULT 2,
            discount_amount INTEGER NOT NULL DEFAULT 0,
            valid_from TEXT,
            valid_until TEXT,
            active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Booking windows
    db.execute('''
        CREATE TABLE open_day_rules (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            season_name TEXT,
            repeat_rule TEXT NOT NULL DEFAULT 'NONE' CHECK (repeat_rule IN ('NONE', 'MONTHLY')),
            open_at TEXT,
            close_at TEXT,
            months_to_add INTEGER,
            target_day TEXT,
            is_active INTEGER DEFAULT 1,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE blocked_dates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            site_id TEXT NOT NULL REFERENCES sites(id),
            blocked_date TEXT NOT NULL,
            memo TEXT,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(site_id, blocked_date)
        )
    ''')

    # 4. Reservation ledger
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            site_id TEXT NOT NULL REFERENCES sites(id),
            check_in_date TEXT NOT NULL,
            check_out_date TEXT NOT NULL,
            nights INTEGER NOT NULL CHECK (nights >= 1),
            family_count INTEGER NOT NULL DEFAULT 1,
            visitor_count INTEGER NOT NULL DEFAULT 0,
            vehicle_count INTEGER NOT NULL DEFAULT 0,
            total_price INTEGER NOT NULL DEFAULT 0,
            guest_name TEXT NOT NULL,
            guest_phone TEXT NOT NULL,
            request_text TEXT,
            status TEXT NOT NULL DEFAULT 'PENDING',
            refund_bank TEXT,
            refund_account TEXT,
            refund_holder TEXT,
            refund_rate INTEGER,
            refund_amount INTEGER,
            cancel_reason TEXT,
            cancel_requested_at TIMESTAMP,
            confirmed_at TIMESTAMP,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # One row per occupied night; the unique key is the overlap guard
    db.execute('''
        CREATE TABLE reservation_nights (
            reservation_id INTEGER NOT NULL REFERENCES reservations(id),
            site_id TEXT NOT NULL REFERENCES sites(id),
            night_date TEXT NOT NULL,
            UNIQUE(site_id, night_date)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id),
            from_status TEXT,
            to_status TEXT NOT NULL,
            changed_by TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 5. Waitlist and rewards
    db.execute('''
        CREATE TABLE waitlist (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            target_date TEXT NOT NULL,
            site_id TEXT REFERENCES sites(id),
            notified_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE reward_ledger (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            reservation_id INTEGER UNIQUE REFERENCES reservations(id),
            xp INTEGER NOT NULL DEFAULT 0,
            tokens INTEGER NOT NULL DEFAULT 0,
            reason TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create database indexes for performance."""

    # Reservations
    db.execute('CREATE INDEX idx_reservations_site_dates ON reservations(site_id, check_in_date, check_out_date)')
    db.execute('CREATE INDEX idx_reservations_user ON reservations(user_id)')
    db.execute('CREATE INDEX idx_reservations_status ON reservations(status, created_at)')
    db.execute('CREATE INDEX idx_reservation_nights_res ON reservation_nights(reservation_id)')
    db.execute('CREATE INDEX idx_status_history_res ON reservation_status_history(reservation_id)')

    # Blocked dates
    db.execute('CREATE INDEX idx_blocked_dates_date ON blocked_dates(blocked_date)')

    # Waitlist: NULL site means "any site", so uniqueness uses IFNULL
    db.execute('''
        CREATE UNIQUE INDEX idx_waitlist_unique
        ON waitlist(user_id, target_date, IFNULL(site_id, ''))
    ''')
    db.execute('CREATE INDEX idx_waitlist_date ON waitlist(target_date, site_id)')

    # Open day rules
    db.execute('CREATE INDEX idx_open_day_rules_active ON open_day_rules(is_active)')
