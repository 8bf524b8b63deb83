"""
Tests for waitlist registration and fan-out lookup.
"""

from models.waitlist import (
    register_waitlist,
    unregister_waitlist,
    get_user_waitlist,
    get_waitlist_users,
    get_subscribers_for_slots,
    mark_waitlist_notified,
)

TARGET = '2026-05-16'


class TestRegistration:

    def test_register_creates_entry(self, app_ctx):
        result = register_waitlist('user-1', TARGET, 'A1')

        assert result['created'] is True
        assert result['entry']['site_id'] == 'A1'
        assert result['entry']['site_name']

    def test_duplicate_is_idempotent(self, app_ctx):
        first = register_waitlist('user-1', TARGET, 'A1')
        second = register_waitlist('user-1', TARGET, 'A1')

        assert second['created'] is False
        assert second['entry']['id'] == first['entry']['id']
        assert len(get_user_waitlist('user-1')) == 1

    def test_any_site_duplicate_is_idempotent(self, app_ctx):
        register_waitlist('user-1', TARGET)
        assert register_waitlist('user-1', TARGET)['created'] is False
        assert len(get_user_waitlist('user-1')) == 1

    def test_site_and_any_site_are_distinct(self, app_ctx):
        register_waitlist('user-1', TARGET, 'A1')
        register_waitlist('user-1', TARGET)
        assert len(get_user_waitlist('user-1')) == 2

    def test_unregister(self, app_ctx):
        register_waitlist('user-1', TARGET, 'A1')

        assert unregister_waitlist('user-1', TARGET, 'A1') is True
        assert unregister_waitlist('user-1', TARGET, 'A1') is False
        assert get_user_waitlist('user-1') == []

    def test_unregister_any_site_leaves_site_entry(self, app_ctx):
        register_waitlist('user-1', TARGET, 'A1')
        register_waitlist('user-1', TARGET)

        unregister_waitlist('user-1', TARGET)
        remaining = get_user_waitlist('user-1')
        assert [e['site_id'] for e in remaining] == ['A1']


class TestFanOut:

    def test_site_and_any_site_subscribers(self, app_ctx):
        register_waitlist('user-1', TARGET, 'A1')
        register_waitlist('user-2', TARGET)
        register_waitlist('user-3', TARGET, 'A2')
        register_waitlist('user-4', '2026-05-17', 'A1')

        users = {e['user_id'] for e in get_waitlist_users(TARGET, 'A1')}
        assert users == {'user-1', 'user-2'}

    def test_notified_entries_excluded(self, app_ctx):
        entry = register_waitlist('user-1', TARGET, 'A1')['entry']

        assert mark_waitlist_notified([entry['id']], '2026-05-04 01:00:00') == 1
        assert get_waitlist_users(TARGET, 'A1') == []
        assert len(get_waitlist_users(TARGET, 'A1', include_notified=True)) == 1

    def test_subscribers_deduplicated_across_nights(self, app_ctx):
        register_waitlist('user-1', '2026-05-11')
        register_waitlist('user-1', '2026-05-12')
        register_waitlist('user-2', '2026-05-12', 'A1')

        subscribers = get_subscribers_for_slots([
            {'site_id': 'A1', 'night_date': '2026-05-11'},
            {'site_id': 'A1', 'night_date': '2026-05-12'},
        ])
        assert len(subscribers) == 3
        assert len({s['id'] for s in subscribers}) == 3

    def test_cancellation_reports_subscribers(self, book, now):
        from blueprints.camping.services.booking_service import apply_admin_action

        reservation = book()['reservation']
        register_waitlist('user-9', '2026-05-11', 'A1')

        result = apply_admin_action(reservation['id'], 'cancel', 'admin-1', now=now)
        assert [s['user_id'] for s in result['waitlist_subscribers']] == ['user-9']
