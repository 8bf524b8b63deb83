"""
Tests for blocked dates and the per-site availability listing.
"""

import pytest

from models.blocked_date import (
    create_blocked_date,
    delete_blocked_date,
    get_blocked_dates,
    is_site_blocked,
)
from blueprints.camping.services.availability_service import list_site_availability


def site_row(result, site_id):
    return next(s for s in result['sites'] if s['id'] == site_id)


class TestBlockedDates:

    def test_block_and_unblock(self, app_ctx):
        block_id = create_blocked_date('A1', '2026-05-11', '배수 공사', 'admin-1')

        assert is_site_blocked('A1', '2026-05-11', '2026-05-12')
        assert not is_site_blocked('A1', '2026-05-12', '2026-05-13')
        assert not is_site_blocked('A2', '2026-05-11', '2026-05-12')

        removed = delete_blocked_date(block_id)
        assert removed['blocked_date'] == '2026-05-11'
        assert get_blocked_dates(site_id='A1') == []

    def test_duplicate_block_rejected(self, app_ctx):
        create_blocked_date('A1', '2026-05-11')
        with pytest.raises(ValueError):
            create_blocked_date('A1', '2026-05-11')

    def test_cannot_block_booked_night(self, book):
        book()
        with pytest.raises(ValueError):
            create_blocked_date('A1', '2026-05-11')

    def test_delete_missing_block(self, app_ctx):
        assert delete_blocked_date(999) is None


class TestSiteAvailability:

    def test_all_active_sites_listed(self, app_ctx, now):
        result = list_site_availability('2026-05-11', '2026-05-12', now=now)

        assert result['window']['status'] == 'OPEN'
        assert len(result['sites']) == 6
        assert all(s['available'] for s in result['sites'])
        assert site_row(result, 'A1')['quote']['total_price'] == 40000

    def test_booked_and_blocked_sites(self, book, now):
        book()
        create_blocked_date('A2', '2026-05-11')

        result = list_site_availability('2026-05-11', '2026-05-12', now=now)

        assert site_row(result, 'A1')['is_booked'] is True
        assert site_row(result, 'A1')['available'] is False
        assert site_row(result, 'A2')['is_blocked'] is True
        assert site_row(result, 'A2')['available'] is False
        assert site_row(result, 'A3')['available'] is True

    def test_friday_end_cap_matches_commit(self, book, now):
        """The listing and the commit agree on which Friday is sellable."""
        book(user_id='user-2', check_in_date='2026-05-16', check_out_date='2026-05-17')

        result = list_site_availability('2026-05-15', '2026-05-16', now=now)
        a1 = site_row(result, 'A1')
        a2 = site_row(result, 'A2')

        assert a1['stay_rule']['has_end_cap_availability'] is True
        assert a1['available'] is True
        assert a2['stay_rule']['is_blocked'] is True
        assert a2['available'] is False

        assert book(check_in_date='2026-05-15', check_out_date='2026-05-16')['success'] is True
        assert book(site_id='A2', check_in_date='2026-05-15', check_out_date='2026-05-16')['success'] is False

    def test_outside_window(self, app_ctx, now):
        result = list_site_availability('2026-08-10', '2026-08-11', now=now)
        assert all(s['outside_window'] for s in result['sites'])
        assert not any(s['available'] for s in result['sites'])

    def test_invalid_range(self, app_ctx, now):
        with pytest.raises(ValueError):
            list_site_availability('2026-05-12', '2026-05-11', now=now)

    def test_over_capacity_matches_commit(self, book, now):
        """Sites too small for the party are listed but not available."""
        result = list_site_availability('2026-05-11', '2026-05-12', now=now, family_count=2)

        assert site_row(result, 'A1')['available'] is True
        assert site_row(result, 'T1')['over_capacity'] is True
        assert site_row(result, 'T1')['available'] is False

        assert book(site_id='T1', family_count=2)['success'] is False
        assert book(site_id='A1', family_count=2)['success'] is True

    def test_stay_too_long(self, app_ctx, now):
        with pytest.raises(ValueError):
            list_site_availability('2026-05-11', '9999-12-31', now=now)
