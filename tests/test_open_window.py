"""
Tests for booking window resolution.
"""

import pytest
from datetime import datetime, date
from zoneinfo import ZoneInfo

from blueprints.camping.services.open_window_service import (
    resolve_open_window,
    resolve_monthly_window,
    last_bookable_night,
    get_current_window,
    PRE_OPEN,
    OPEN,
    CLOSED,
)

KST = ZoneInfo('Asia/Seoul')


def monthly_rule(months_to_add=2, target_day='END'):
    return {'repeat_rule': 'MONTHLY', 'months_to_add': months_to_add, 'target_day': target_day,
            'season_name': '매월 자동 오픈'}


def fixed_rule(open_at, close_at):
    return {'repeat_rule': 'NONE', 'open_at': open_at, 'close_at': close_at, 'season_name': '봄 시즌'}


class TestMonthlyRule:
    """MONTHLY rules are recomputed from now."""

    def test_window_bounds(self):
        now = datetime(2026, 5, 4, 10, 0, tzinfo=KST)
        window = resolve_open_window(monthly_rule(), now)

        assert window['status'] == OPEN
        assert window['open_at'] == datetime(2026, 5, 1, 9, 0, tzinfo=KST)
        assert window['close_at'] == datetime(2026, 7, 31, 23, 59, 59, tzinfo=KST)

    def test_before_nine_on_the_first_is_pre_open(self):
        now = datetime(2026, 5, 1, 8, 59, tzinfo=KST)
        assert resolve_open_window(monthly_rule(), now)['status'] == PRE_OPEN

    def test_open_exactly_at_open_time(self):
        now = datetime(2026, 5, 1, 9, 0, tzinfo=KST)
        assert resolve_open_window(monthly_rule(), now)['status'] == OPEN

    def test_target_day_clamped_to_month_length(self):
        now = datetime(2026, 1, 10, 12, 0, tzinfo=KST)
        _, close_at = resolve_monthly_window(1, 31, now)
        assert close_at.date() == date(2026, 2, 28)

    def test_numeric_target_day(self):
        now = datetime(2026, 5, 4, 10, 0, tzinfo=KST)
        _, close_at = resolve_monthly_window(1, 15, now)
        assert close_at.date() == date(2026, 6, 15)

    def test_wraps_year_end(self):
        now = datetime(2026, 11, 15, 12, 0, tzinfo=KST)
        _, close_at = resolve_monthly_window(2, 'END', now)
        assert close_at.date() == date(2027, 1, 31)

    def test_window_moves_with_now(self):
        may = resolve_open_window(monthly_rule(), datetime(2026, 5, 20, tzinfo=KST))
        june = resolve_open_window(monthly_rule(), datetime(2026, 6, 20, tzinfo=KST))
        assert last_bookable_night(may) == date(2026, 7, 31)
        assert last_bookable_night(june) == date(2026, 8, 31)


class TestFixedRule:
    """NONE rules use the stored open/close instants."""

    RULE = fixed_rule('2026-05-10T09:00:00+09:00', '2026-06-30T23:59:59+09:00')

    @pytest.mark.parametrize('now,expected', [
        (datetime(2026, 5, 10, 8, 59, 59, tzinfo=KST), PRE_OPEN),
        (datetime(2026, 5, 10, 9, 0, tzinfo=KST), OPEN),
        (datetime(2026, 6, 30, 23, 59, 59, tzinfo=KST), OPEN),
        (datetime(2026, 7, 1, 0, 0, tzinfo=KST), CLOSED),
    ])
    def test_status_boundaries(self, now, expected):
        assert resolve_open_window(self.RULE, now)['status'] == expected

    def test_last_bookable_night_is_close_date(self):
        window = resolve_open_window(self.RULE, datetime(2026, 6, 1, tzinfo=KST))
        assert last_bookable_night(window) == date(2026, 6, 30)


def test_no_rule_is_closed():
    window = resolve_open_window(None, datetime(2026, 5, 4, tzinfo=KST))
    assert window['status'] == CLOSED
    assert window['open_at'] is None
    assert last_bookable_night(window) is None


def test_current_window_reads_active_rule(app_ctx, now):
    """The seeded monthly rule is resolved from the database."""
    window = get_current_window(now)
    assert window['repeat_rule'] == 'MONTHLY'
    assert window['status'] == OPEN


def test_new_rule_replaces_active_rule(app_ctx, now):
    from models.open_day import create_open_day_rule, get_active_rule, get_rule_history

    create_open_day_rule({
        'repeat_rule': 'NONE',
        'open_at': '2026-05-10T09:00:00',
        'close_at': '2026-06-30T23:59:59',
        'season_name': '봄 시즌'
    }, created_by='admin-1')

    active = get_active_rule()
    assert active['repeat_rule'] == 'NONE'
    assert get_current_window(now)['status'] == PRE_OPEN
    assert sum(1 for r in get_rule_history() if r['is_active']) == 1


@pytest.mark.parametrize('data,error_key', [
    ({'repeat_rule': 'WEEKLY'}, 'open_day_invalid_automation'),
    ({'repeat_rule': 'NONE', 'open_at': '2026-05-10T09:00:00'}, 'open_day_range_required'),
    ({'repeat_rule': 'NONE', 'open_at': '2026-06-10T09:00:00', 'close_at': '2026-05-10T09:00:00'},
     'open_day_invalid_range'),
    ({'repeat_rule': 'MONTHLY', 'months_to_add': 13}, 'open_day_invalid_automation'),
    ({'repeat_rule': 'MONTHLY', 'months_to_add': 1, 'target_day': 0}, 'open_day_invalid_automation'),
])
def test_invalid_rules_rejected(app_ctx, data, error_key):
    from models.open_day import create_open_day_rule

    with pytest.raises(ValueError, match=error_key):
        create_open_day_rule(data)
