"""
Database seed data.
Initial data population for fresh database installations.
"""


def seed_database(db):
    """Insert initial seed data."""

    # 1. Site catalog
    sites_data = [
        ('A1', 'A1 오토캠핑', 'AUTO', '차량 진입 가능 파쇄석 사이트', 40000, 70000, 2, '전기,개수대', 1),
        ('A2', 'A2 오토캠핑', 'AUTO', '차량 진입 가능 파쇄석 사이트', 40000, 70000, 2, '전기,개수대', 2),
        ('A3', 'A3 오토캠핑', 'AUTO', '계곡 인접 사이트', 45000, 75000, 2, '전기,개수대,계곡', 3),
        ('T1', 'T1 데크', 'TENT', '나무 데크 텐트 사이트', 35000, 60000, 1, '전기', 4),
        ('G1', 'G1 글램핑', 'GLAMPING', '침구 포함 글램핑 텐트', 90000, 130000, 1, '전기,냉난방,침구', 5),
        ('C1', 'C1 카라반', 'CARAVAN', '개별 화장실 카라반', 100000, 150000, 1, '전기,냉난방,화장실', 6),
    ]

    for site_id, name, site_type, description, weekday, weekend, max_occ, features, order in sites_data:
        db.execute('''
            INSERT INTO sites (id, name, site_type, description, price_weekday, price_weekend,
                               max_occupancy, features, display_order)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (site_id, name, site_type, description, weekday, weekend, max_occ, features, order))

    # 2. Pricing config singleton
    db.execute('''
        INSERT INTO pricing_config (id, weekday, weekend, peak_weekday, peak_weekend,
                                    extra_family, visitor, long_stay_discount)
        VALUES (1, 40000, 70000, 50000, 80000, 35000, 10000, 10000)
    ''')

    # 3. Peak seasons (recurring yearly)
    db.execute('''
        INSERT INTO pricing_seasons (name, start_month, start_day, end_month, end_day)
        VALUES ('여름 성수기', 7, 1, 8, 31)
    ''')

    # 4. Booking window: opens the 1st of each month, two months ahead
    db.execute('''
        INSERT INTO open_day_rules (season_name, repeat_rule, months_to_add, target_day, is_active, created_by)
        VALUES ('매월 자동 오픈', 'MONTHLY', 2, 'END', 1, 'system')
    ''')
