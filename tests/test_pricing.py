"""
Tests for stay price calculation.
"""

import pytest
from datetime import date

from blueprints.camping.services.pricing_service import (
    calculate_price,
    is_peak_night,
    is_weekend_night,
    select_package,
    quote_stay,
)

CONFIG = {
    'weekday': 40000,
    'weekend': 70000,
    'peak_weekday': 50000,
    'peak_weekend': 80000,
    'extra_family': 35000,
    'visitor': 10000,
    'long_stay_discount': 10000,
    'seasons': [{'name': '여름 성수기', 'start_month': 7, 'start_day': 1, 'end_month': 8, 'end_day': 31}],
}

SITE = {'id': 'X1', 'price_weekday': 50000, 'price_weekend': 80000}
DEFAULT_RATE_SITE = {'id': 'X2', 'price_weekday': None, 'price_weekend': None}


class TestNightClassification:

    @pytest.mark.parametrize('night,expected', [
        (date(2026, 5, 14), False),  # Thursday
        (date(2026, 5, 15), True),   # Friday
        (date(2026, 5, 16), True),   # Saturday
        (date(2026, 5, 17), True),   # Sunday
        (date(2026, 5, 18), False),  # Monday
    ])
    def test_weekend_days(self, night, expected):
        assert is_weekend_night(night) is expected

    def test_holiday_is_weekend(self):
        assert is_weekend_night(date(2026, 5, 5), holidays={'2026-05-05'})

    def test_peak_season_inclusive(self):
        seasons = CONFIG['seasons']
        assert is_peak_night(date(2026, 7, 1), seasons)
        assert is_peak_night(date(2026, 8, 31), seasons)
        assert not is_peak_night(date(2026, 6, 30), seasons)
        assert not is_peak_night(date(2026, 9, 1), seasons)

    def test_peak_season_wrapping_year(self):
        seasons = [{'name': '겨울', 'start_month': 12, 'start_day': 20, 'end_month': 2, 'end_day': 10}]
        assert is_peak_night(date(2026, 12, 25), seasons)
        assert is_peak_night(date(2027, 1, 5), seasons)
        assert not is_peak_night(date(2027, 3, 1), seasons)


class TestCalculatePrice:

    def test_two_weekend_nights(self):
        """Fri-Sun on a 50,000 / 80,000 site."""
        result = calculate_price(SITE, '2026-05-15', '2026-05-17', 1, 0, CONFIG)

        assert result['nights'] == 2
        assert result['base_price'] == 160000
        assert result['options'] == {'extra_family': 0, 'visitor': 0}
        assert result['discount']['consecutive'] == 20000
        assert result['total_price'] == 140000

    def test_site_rate_falls_back_to_config(self):
        result = calculate_price(DEFAULT_RATE_SITE, '2026-05-11', '2026-05-12', 1, 0, CONFIG)
        assert result['base_price'] == 40000
        assert result['total_price'] == 40000

    def test_peak_rate_overrides_site_rate(self):
        result = calculate_price(SITE, '2026-07-06', '2026-07-07', 1, 0, CONFIG)
        assert result['night_breakdown'][0]['is_peak'] is True
        assert result['base_price'] == CONFIG['peak_weekday']

    def test_holiday_charged_weekend_rate(self):
        result = calculate_price(SITE, '2026-05-05', '2026-05-06', 1, 0, CONFIG, holidays=['2026-05-05'])
        assert result['base_price'] == 80000

    def test_extra_family_per_night(self):
        result = calculate_price(DEFAULT_RATE_SITE, '2026-05-11', '2026-05-13', 3, 0, CONFIG)
        assert result['base_price'] == 80000
        assert result['options']['extra_family'] == 2 * 35000 * 2
        assert result['discount']['consecutive'] == 0
        assert result['total_price'] == 220000

    def test_visitor_fee_charged_once(self):
        result = calculate_price(DEFAULT_RATE_SITE, '2026-05-11', '2026-05-13', 1, 2, CONFIG)
        assert result['options']['visitor'] == 20000

    def test_consecutive_discount_needs_weekend_night(self):
        weekdays = calculate_price(SITE, '2026-05-11', '2026-05-13', 1, 0, CONFIG)
        with_sunday = calculate_price(SITE, '2026-05-17', '2026-05-19', 1, 0, CONFIG)
        assert weekdays['discount']['consecutive'] == 0
        assert with_sunday['discount']['consecutive'] == 20000

    def test_single_night_has_no_consecutive_discount(self):
        result = calculate_price(SITE, '2026-05-16', '2026-05-17', 1, 0, CONFIG)
        assert result['discount']['consecutive'] == 0

    def test_best_package_applied(self):
        packages = [
            {'name': '2박 할인', 'min_nights': 2, 'discount_amount': 15000, 'active': 1},
            {'name': '3박 할인', 'min_nights': 3, 'discount_amount': 30000, 'active': 1},
        ]
        two = calculate_price(SITE, '2026-05-11', '2026-05-13', 1, 0, CONFIG, packages=packages)
        three = calculate_price(SITE, '2026-05-11', '2026-05-14', 1, 0, CONFIG, packages=packages)

        assert two['discount']['package'] == 15000
        assert three['discount']['package'] == 30000
        assert three['discount']['package_name'] == '3박 할인'

    def test_package_validity_window(self):
        package = {'name': '봄', 'min_nights': 1, 'discount_amount': 5000, 'active': 1,
                   'valid_from': '2026-03-01', 'valid_until': '2026-04-30'}
        assert select_package([package], date(2026, 5, 11), 2) is None
        assert select_package([package], date(2026, 4, 30), 2) == package

    def test_total_never_negative(self):
        packages = [{'name': 'free', 'min_nights': 1, 'discount_amount': 10 ** 7, 'active': 1}]
        result = calculate_price(SITE, '2026-05-11', '2026-05-12', 1, 0, CONFIG, packages=packages)
        assert result['total_price'] == 0

    @pytest.mark.parametrize('check_in,check_out,families,visitors', [
        ('2026-05-12', '2026-05-12', 1, 0),
        ('2026-05-12', '2026-05-11', 1, 0),
        ('2026-05-11', '2026-05-12', 0, 0),
        ('2026-05-11', '2026-05-12', 1, -1),
    ])
    def test_invalid_input(self, check_in, check_out, families, visitors):
        with pytest.raises(ValueError):
            calculate_price(SITE, check_in, check_out, families, visitors, CONFIG)


class TestQuoteStay:
    """Quotes read the stored configuration at call time."""

    def test_seeded_site_quote(self, app_ctx):
        quote = quote_stay('A1', '2026-05-11', '2026-05-12')
        assert quote['total_price'] == 40000
        assert quote['site_id'] == 'A1'

    def test_config_edit_applies_to_next_quote(self, app_ctx):
        from models.site import create_site
        from models.pricing import update_pricing_config

        create_site('Z1', '테스트 사이트', price_weekday=None, price_weekend=None, max_occupancy=2)
        assert quote_stay('Z1', '2026-05-11', '2026-05-12')['total_price'] == 40000

        update_pricing_config({'weekday': 45000}, updated_by='admin-1')
        assert quote_stay('Z1', '2026-05-11', '2026-05-12')['total_price'] == 45000

    def test_stored_holiday_and_package(self, app_ctx):
        from models.pricing import save_holiday
        from models.package import create_package

        save_holiday('2026-05-05', '어린이날')
        create_package({'name': '연박 할인', 'min_nights': 2, 'discount_amount': 5000})

        quote = quote_stay('A1', '2026-05-04', '2026-05-06')
        # Mon weekday 40,000 + Tue holiday 70,000, consecutive 20,000, package 5,000
        assert quote['base_price'] == 110000
        assert quote['discount']['consecutive'] == 20000
        assert quote['discount']['package'] == 5000
        assert quote['total_price'] == 85000

    def test_unknown_site(self, app_ctx):
        with pytest.raises(ValueError):
            quote_stay('NOPE', '2026-05-11', '2026-05-12')

    def test_repeated_quote_is_identical(self, app_ctx):
        """Same inputs and unchanged config give the same quote."""
        from models.pricing import save_holiday
        from models.package import create_package

        save_holiday('2026-06-30', '임시 공휴일')
        create_package({'name': '3박 패키지', 'min_nights': 3, 'discount_amount': 5000})

        first = quote_stay('A1', '2026-06-29', '2026-07-02', 2, 1)
        second = quote_stay('A1', '2026-06-29', '2026-07-02', 2, 1)

        assert first == second
        assert [n['is_peak'] for n in first['night_breakdown']] == [False, False, True]
        assert [n['is_weekend'] for n in first['night_breakdown']] == [False, True, False]
        assert first['discount']['package_name'] == '3박 패키지'

    def test_stay_length_limited(self, app_ctx):
        with pytest.raises(ValueError):
            quote_stay('A1', '2026-05-11', '9999-12-31')

        app_ctx.config['MAX_STAY_NIGHTS'] = 2
        assert quote_stay('A1', '2026-05-11', '2026-05-13')['nights'] == 2
        with pytest.raises(ValueError):
            quote_stay('A1', '2026-05-11', '2026-05-14')
