"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import datetime
from zoneinfo import ZoneInfo

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'campground_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

KST = ZoneInfo('Asia/Seoul')

# Monday 2026-05-04 10:00 KST. The seeded monthly rule gives the window
# 2026-05-01 09:00 .. 2026-07-31 23:59:59.
NOW = datetime(2026, 5, 4, 10, 0, tzinfo=KST)


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database (and WAL files) after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()

    return app


@pytest.fixture
def app_ctx(app):
    """Application context for service and model tests.

    Route tests must not use this: requests would share its ``g`` and the
    logged-in user would carry over from one request to the next.
    """
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def user_headers():
    """Identity header of a regular guest."""
    return {'X-User-Id': 'user-1'}


@pytest.fixture
def admin_headers():
    """Identity header of an administrator (see TestConfig.ADMIN_USER_IDS)."""
    return {'X-User-Id': 'admin-1'}


@pytest.fixture
def now():
    """Fixed reference instant for service tests."""
    return NOW


@pytest.fixture
def booking_payload():
    """Factory for booking request bodies (default: A1, Mon 05-11, 1 night)."""
    def _payload(**overrides):
        data = {
            'site_id': 'A1',
            'check_in_date': '2026-05-11',
            'check_out_date': '2026-05-12',
            'family_count': 1,
            'visitor_count': 0,
            'vehicle_count': 1,
            'guest_name': '홍길동',
            'guest_phone': '010-1234-5678',
        }
        data.update(overrides)
        return data
    return _payload


@pytest.fixture
def book(app_ctx, now, booking_payload):
    """Create a booking through the service at the fixed reference time."""
    from blueprints.camping.services.booking_service import create_booking

    def _book(user_id='user-1', at=None, **overrides):
        return create_booking(user_id, booking_payload(**overrides), now=at or now)
    return _book
