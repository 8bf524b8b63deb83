"""
Tests for the cancellation refund schedule.
"""

import pytest
from datetime import datetime
from zoneinfo import ZoneInfo

from blueprints.camping.services.refund_service import calculate_refund, get_refund_rate

KST = ZoneInfo('Asia/Seoul')


@pytest.mark.parametrize('days,rate', [
    (30, 100),
    (7, 100),
    (6, 90),
    (5, 90),
    (4, 50),
    (3, 50),
    (2, 20),
    (1, 20),
    (0, 0),
    (-3, 0),
])
def test_refund_tiers(days, rate):
    assert get_refund_rate(days) == rate


def test_four_days_before_refunds_half():
    now = datetime(2026, 5, 4, 10, 0, tzinfo=KST)
    refund = calculate_refund(200000, '2026-05-08', now)

    assert refund['days_before'] == 4
    assert refund['refund_rate'] == 50
    assert refund['refund_amount'] == 100000


def test_amount_is_floored():
    now = datetime(2026, 5, 4, 10, 0, tzinfo=KST)
    refund = calculate_refund(33333, '2026-05-10', now)
    assert refund['refund_rate'] == 90
    assert refund['refund_amount'] == 29999


def test_uses_calendar_days_not_hours():
    """23:59 the day before still counts a full day."""
    late = datetime(2026, 5, 4, 23, 59, tzinfo=KST)
    assert calculate_refund(100000, '2026-05-11', late)['refund_rate'] == 100
    assert calculate_refund(100000, '2026-05-05', late)['refund_rate'] == 20


def test_check_in_day_refunds_nothing():
    now = datetime(2026, 5, 8, 8, 0, tzinfo=KST)
    assert calculate_refund(100000, '2026-05-08', now)['refund_amount'] == 0
