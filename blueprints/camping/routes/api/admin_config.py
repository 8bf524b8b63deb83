"""
Admin configuration API routes.
Pricing, holidays, stay packages, open-day rules, blocked dates and sites.
Changes apply to the next quote or booking; nothing is cached.
"""

import logging
from flask import request
from flask_login import login_required, current_user

from models.pricing import get_pricing_config, update_pricing_config, get_holidays, save_holiday, delete_holiday
from models.package import get_all_packages, create_package, deactivate_package
from models.open_day import get_active_rule, get_rule_history, create_open_day_rule
from models.blocked_date import create_blocked_date, delete_blocked_date, get_blocked_dates
from models.site import get_all_sites, get_site_by_id, create_site, update_site
from models.waitlist import get_waitlist_users
from utils.api_response import api_success, api_error
from utils.decorators import admin_required
from utils.messages import get_message
from utils.validators import validate_date_format, sanitize_input
from blueprints.camping.services.open_window_service import get_current_window, serialize_window

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register admin configuration routes on the blueprint."""

    # =========================================================================
    # PRICING
    # =========================================================================

    @bp.route('/admin/pricing', methods=['GET'])
    @login_required
    @admin_required
    def admin_get_pricing():
        """Current pricing config and peak seasons."""
        return api_success(data=get_pricing_config())

    @bp.route('/admin/pricing', methods=['PUT'])
    @login_required
    @admin_required
    def admin_update_pricing():
        """
        Save pricing config.

        Request body:
            weekday, weekend, peak_weekday, peak_weekend, extra_family,
            visitor, long_stay_discount: Non-negative integers
            seasons: Optional list of {name, start_month, start_day, end_month, end_day}
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        try:
            config = update_pricing_config(data, updated_by=current_user.id)
        except ValueError as e:
            return api_error(str(e))

        logger.info(f"[Pricing] Config updated by {current_user.id}")
        return api_success(data=config, message=get_message('pricing_updated'))

    # =========================================================================
    # HOLIDAYS
    # =========================================================================

    @bp.route('/admin/holidays', methods=['GET'])
    @login_required
    @admin_required
    def admin_list_holidays():
        """Holidays, optionally within from/to."""
        return api_success(data=get_holidays(request.args.get('from'), request.args.get('to')))

    @bp.route('/admin/holidays', methods=['POST'])
    @login_required
    @admin_required
    def admin_save_holiday():
        """
        Add or rename a holiday.

        Request body:
            holiday_date: YYYY-MM-DD
            name: Holiday name
        """
        data = request.get_json(silent=True) or {}
        holiday_date = data.get('holiday_date')
        if not holiday_date or not validate_date_format(holiday_date):
            return api_error(get_message('invalid_date'))

        save_holiday(holiday_date, sanitize_input(data.get('name') or '', max_length=50) or '공휴일')
        return api_success(message=get_message('holiday_saved'), status=201)

    @bp.route('/admin/holidays/<holiday_date>', methods=['DELETE'])
    @login_required
    @admin_required
    def admin_delete_holiday(holiday_date):
        """Delete a holiday."""
        if not delete_holiday(holiday_date):
            return api_error(get_message('not_found'), status=404)
        return api_success(message=get_message('holiday_deleted'))

    # =========================================================================
    # STAY PACKAGES
    # =========================================================================

    @bp.route('/admin/packages', methods=['GET'])
    @login_required
    @admin_required
    def admin_list_packages():
        """Stay packages (all=true includes inactive)."""
        active_only = request.args.get('all', '').lower() != 'true'
        return api_success(data=get_all_packages(active_only=active_only))

    @bp.route('/admin/packages', methods=['POST'])
    @login_required
    @admin_required
    def admin_create_package():
        """
        Create a stay package.

        Request body:
            name, min_nights, discount_amount, valid_from, valid_until
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        try:
            package_id = create_package(data)
        except ValueError as e:
            return api_error(str(e))

        return api_success(data={'id': package_id}, message=get_message('package_saved'), status=201)

    @bp.route('/admin/packages/<int:package_id>', methods=['DELETE'])
    @login_required
    @admin_required
    def admin_delete_package(package_id):
        """Deactivate a stay package."""
        if not deactivate_package(package_id):
            return api_error(get_message('not_found'), status=404)
        return api_success(message=get_message('package_deleted'))

    # =========================================================================
    # OPEN-DAY RULES
    # =========================================================================

    @bp.route('/admin/open-day', methods=['GET'])
    @login_required
    @admin_required
    def admin_get_open_day():
        """Active rule, its resolved window and recent history."""
        return api_success(data={
            'active': get_active_rule(),
            'window': serialize_window(get_current_window()),
            'history': get_rule_history()
        })

    @bp.route('/admin/open-day', methods=['POST'])
    @login_required
    @admin_required
    def admin_create_open_day():
        """
        Replace the active open-day rule.

        Request body (fixed season):
            repeat_rule: 'NONE', open_at, close_at (ISO datetimes), season_name
        Request body (monthly):
            repeat_rule: 'MONTHLY', months_to_add (0-12), target_day (1-31 or 'END')
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        try:
            rule_id = create_open_day_rule(data, created_by=current_user.id)
        except ValueError as e:
            return api_error(get_message(str(e)))

        key = 'open_day_monthly_created' if data.get('repeat_rule') == 'MONTHLY' else 'open_day_created'
        logger.info(f"[OpenDay] Rule {rule_id} ({data.get('repeat_rule', 'NONE')}) created by {current_user.id}")
        return api_success(data={'id': rule_id, 'window': serialize_window(get_current_window())},
                           message=get_message(key), status=201)

    # =========================================================================
    # BLOCKED DATES
    # =========================================================================

    @bp.route('/admin/blocked-dates', methods=['GET'])
    @login_required
    @admin_required
    def admin_list_blocked_dates():
        """Blocks, optionally filtered by from/to (to exclusive) and site_id."""
        return api_success(data=get_blocked_dates(request.args.get('from'), request.args.get('to'),
                                                  request.args.get('site_id')))

    @bp.route('/admin/blocked-dates', methods=['POST'])
    @login_required
    @admin_required
    def admin_create_blocked_date():
        """
        Block a site on a date.

        Request body:
            site_id, blocked_date (YYYY-MM-DD), memo
        """
        data = request.get_json(silent=True) or {}
        site_id = data.get('site_id')
        blocked_date = data.get('blocked_date')

        if not site_id or not get_site_by_id(site_id):
            return api_error(get_message('site_not_found'), status=404)
        if not blocked_date or not validate_date_format(blocked_date):
            return api_error(get_message('invalid_date'))

        try:
            block_id = create_blocked_date(site_id, blocked_date, data.get('memo'), current_user.id)
        except ValueError as e:
            return api_error(str(e), status=409)

        return api_success(data={'id': block_id}, message=get_message('blocked_date_created'), status=201)

    @bp.route('/admin/blocked-dates/<int:block_id>', methods=['DELETE'])
    @login_required
    @admin_required
    def admin_delete_blocked_date(block_id):
        """Remove a block; returns the waitlist subscribers for the freed slot."""
        block = delete_blocked_date(block_id)
        if not block:
            return api_error(get_message('not_found'), status=404)

        subscribers = get_waitlist_users(block['blocked_date'], block['site_id'])
        return api_success(data=block, message=get_message('blocked_date_deleted'),
                           waitlist_subscribers=subscribers)

    # =========================================================================
    # SITES
    # =========================================================================

    @bp.route('/admin/sites', methods=['GET'])
    @login_required
    @admin_required
    def admin_list_sites():
        """All sites including inactive ones."""
        return api_success(data=get_all_sites(active_only=False))

    @bp.route('/admin/sites', methods=['POST'])
    @login_required
    @admin_required
    def admin_create_site():
        """
        Create a site.

        Request body:
            id, name, site_type, price_weekday, price_weekend,
            max_occupancy, features (list), description, display_order
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        try:
            site_id = create_site(
                data.get('id'),
                data.get('name'),
                site_type=data.get('site_type', 'AUTO'),
                price_weekday=data.get('price_weekday'),
                price_weekend=data.get('price_weekend'),
                max_occupancy=data.get('max_occupancy', 1),
                features=data.get('features'),
                description=data.get('description', ''),
                display_order=data.get('display_order', 0)
            )
        except (TypeError, ValueError) as e:
            return api_error(str(e))

        return api_success(data=get_site_by_id(site_id), status=201)

    @bp.route('/admin/sites/<site_id>', methods=['PUT'])
    @login_required
    @admin_required
    def admin_update_site(site_id):
        """Update site fields (partial)."""
        if not get_site_by_id(site_id):
            return api_error(get_message('site_not_found'), status=404)

        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        update_site(site_id, **data)
        return api_success(data=get_site_by_id(site_id))
