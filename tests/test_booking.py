"""
Tests for the atomic booking commit.
"""

import threading
import pytest
from datetime import timedelta

from blueprints.camping.services.booking_service import (
    create_booking,
    ALREADY_BOOKED,
    CONCURRENT_REQUEST,
    PRE_OPEN,
    SEASON_CLOSED,
    RULE_VIOLATION,
    VALIDATION_FAILED,
)


def count_rows(table, where='1=1', params=()):
    from database import get_db
    return get_db().execute(f'SELECT COUNT(*) FROM {table} WHERE {where}', params).fetchone()[0]


class TestCreateBooking:

    def test_creates_pending_reservation(self, book):
        result = book()

        assert result['success'] is True
        reservation = result['reservation']
        assert reservation['status'] == 'PENDING'
        assert reservation['user_id'] == 'user-1'
        assert reservation['nights'] == 1
        assert reservation['total_price'] == 40000
        assert result['deposit']['account_number']
        assert count_rows('reservation_nights', 'reservation_id = ?', (reservation['id'],)) == 1

    def test_records_initial_history(self, book):
        from models.reservation import get_status_history

        reservation = book()['reservation']
        history = get_status_history(reservation['id'])
        assert [(h['from_status'], h['to_status']) for h in history] == [(None, 'PENDING')]

    def test_payment_deadline_six_hours(self, book, now):
        result = book()
        assert result['deposit']['payment_deadline'] == (now + timedelta(hours=6)).isoformat()

    def test_overlap_rejected(self, book):
        assert book(check_out_date='2026-05-13')['success'] is True

        result = book(user_id='user-2', check_in_date='2026-05-12', check_out_date='2026-05-14')
        assert result['success'] is False
        assert result['error'] == ALREADY_BOOKED

    def test_back_to_back_allowed(self, book):
        assert book()['success'] is True
        assert book(user_id='user-2', check_in_date='2026-05-12', check_out_date='2026-05-13')['success'] is True

    def test_other_site_same_dates_allowed(self, book):
        assert book()['success'] is True
        assert book(user_id='user-2', site_id='A2')['success'] is True

    def test_price_mismatch_rejected(self, book):
        result = book(total_price=1)
        assert result['error'] == VALIDATION_FAILED
        assert '40,000' in result['message']

    def test_matching_client_price_accepted(self, book):
        assert book(total_price=40000)['success'] is True


class TestWindow:

    def test_pre_open(self, book):
        from models.open_day import create_open_day_rule

        create_open_day_rule({'repeat_rule': 'NONE', 'open_at': '2026-05-10T09:00:00',
                              'close_at': '2026-06-30T23:59:59'})
        result = book()
        assert result['error'] == PRE_OPEN

    def test_season_closed(self, book):
        from models.open_day import create_open_day_rule

        create_open_day_rule({'repeat_rule': 'NONE', 'open_at': '2026-04-01T09:00:00',
                              'close_at': '2026-05-01T23:59:59'})
        assert book()['error'] == SEASON_CLOSED

    def test_no_active_rule_is_closed(self, book):
        from database import get_db

        db = get_db()
        db.execute('UPDATE open_day_rules SET is_active = 0')
        db.commit()
        assert book()['error'] == SEASON_CLOSED

    def test_last_night_must_be_inside_window(self, book):
        inside = book(check_in_date='2026-07-30', check_out_date='2026-07-31')
        beyond = book(check_in_date='2026-07-31', check_out_date='2026-08-02')

        assert inside['success'] is True
        assert beyond['error'] == SEASON_CLOSED
        assert '2026-07-31' in beyond['message']


class TestStayRule:

    def test_friday_one_night_rejected(self, book):
        result = book(check_in_date='2026-05-15', check_out_date='2026-05-16')
        assert result['error'] == RULE_VIOLATION

    def test_friday_two_nights_allowed(self, book):
        assert book(check_in_date='2026-05-15', check_out_date='2026-05-17')['success'] is True

    def test_within_d_n_allowed(self, book):
        assert book(check_in_date='2026-05-08', check_out_date='2026-05-09')['success'] is True

    def test_end_cap_allowed_on_same_site_only(self, book):
        assert book(user_id='user-2', check_in_date='2026-05-16', check_out_date='2026-05-17')['success'] is True

        same_site = book(check_in_date='2026-05-15', check_out_date='2026-05-16')
        other_site = book(site_id='A2', check_in_date='2026-05-15', check_out_date='2026-05-16')

        assert same_site['success'] is True
        assert other_site['error'] == RULE_VIOLATION

    def test_friday_on_last_night_of_window_rejected(self, book):
        result = book(check_in_date='2026-07-31', check_out_date='2026-08-01')
        assert result['error'] == RULE_VIOLATION


class TestValidation:

    @pytest.mark.parametrize('overrides', [
        {'check_in_date': '2026-05-03', 'check_out_date': '2026-05-04'},
        {'check_in_date': '2026-05-12', 'check_out_date': '2026-05-12'},
        {'check_in_date': '2026/05/12'},
        {'family_count': 0},
        {'family_count': 3},
        {'visitor_count': -1},
        {'vehicle_count': True},
        {'guest_name': '  '},
        {'guest_phone': '12345'},
        {'site_id': 'NOPE'},
    ])
    def test_invalid_requests(self, book, overrides):
        result = book(**overrides)
        assert result['success'] is False
        assert result['error'] == VALIDATION_FAILED

    def test_inactive_site(self, book):
        from models.site import update_site

        update_site('A1', active=0)
        assert book()['error'] == VALIDATION_FAILED

    def test_blocked_date(self, book):
        from models.blocked_date import create_blocked_date

        create_blocked_date('A1', '2026-05-11', '정비')
        result = book()
        assert result['error'] == VALIDATION_FAILED
        assert count_rows('reservations') == 0

    def test_stay_too_long(self, book):
        result = book(check_out_date='2026-06-30')
        assert result['error'] == VALIDATION_FAILED
        assert count_rows('reservations') == 0


class TestAtomicity:

    def test_unique_night_index_backs_the_check(self, book, monkeypatch):
        """A stale overlap check still cannot double book."""
        assert book()['success'] is True

        monkeypatch.setattr('blueprints.camping.services.booking_service.get_conflicting_reservations',
                            lambda *args, **kwargs: [])
        result = book(user_id='user-2')

        assert result['error'] == ALREADY_BOOKED
        assert count_rows('reservations') == 1
        assert count_rows('reservation_status_history') == 1

    def test_concurrent_requests_book_once(self, app_ctx, now, booking_payload):
        workers = 6
        barrier = threading.Barrier(workers)
        results = []
        lock = threading.Lock()

        def attempt(index):
            with app_ctx.app_context():
                barrier.wait()
                result = create_booking(f'user-{index}', booking_payload(), now=now)
            with lock:
                results.append(result)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        successes = [r for r in results if r['success']]
        failures = [r for r in results if not r['success']]

        assert len(results) == workers
        assert len(successes) == 1
        assert all(r['error'] in (ALREADY_BOOKED, CONCURRENT_REQUEST) for r in failures)
        assert count_rows('reservation_nights', 'site_id = ?', ('A1',)) == 1
