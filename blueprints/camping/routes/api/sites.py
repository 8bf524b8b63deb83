"""
Site, season and quote API routes.
Public read endpoints used by the booking calendar.
"""

import logging
from flask import request, current_app

from models.site import get_all_sites, get_site_by_id
from utils.api_response import api_success, api_error
from utils.messages import get_message
from utils.validators import validate_date_format, validate_non_negative_int
from blueprints.camping.services.open_window_service import get_current_window, serialize_window
from blueprints.camping.services.availability_service import list_site_availability
from blueprints.camping.services.pricing_service import quote_stay

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register site and quote routes on the blueprint."""

    @bp.route('/health', methods=['GET'])
    def health():
        """Liveness check."""
        return api_success(data={
            'app': current_app.config['APP_NAME'],
            'version': current_app.config['APP_VERSION']
        })

    @bp.route('/season', methods=['GET'])
    def season():
        """Current booking window resolved from the active open-day rule."""
        return api_success(data=serialize_window(get_current_window()))

    @bp.route('/sites', methods=['GET'])
    def list_sites():
        """
        List active sites.

        Query params:
            type: Optional site type filter (AUTO, TENT, GLAMPING, CARAVAN)
        """
        return api_success(data=get_all_sites(site_type=request.args.get('type')))

    @bp.route('/sites/availability', methods=['GET'])
    def sites_availability():
        """
        Availability of every active site for a stay.

        Query params:
            check_in: Check-in date (YYYY-MM-DD)
            check_out: Check-out date (YYYY-MM-DD)
            family_count: Families for the quoted price (default 1)
            visitor_count: Visitors for the quoted price (default 0)
        """
        check_in = request.args.get('check_in')
        check_out = request.args.get('check_out')
        if not check_in or not check_out:
            return api_error(get_message('date_required'))
        if not validate_date_format(check_in) or not validate_date_format(check_out):
            return api_error(get_message('invalid_date'))

        family_count = request.args.get('family_count', 1, type=int)
        visitor_count = request.args.get('visitor_count', 0, type=int)

        try:
            result = list_site_availability(check_in, check_out,
                                            family_count=max(family_count, 1),
                                            visitor_count=max(visitor_count, 0))
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=result)

    @bp.route('/quote', methods=['POST'])
    def quote():
        """
        Price quote for a stay.

        Request body:
            site_id, check_in_date, check_out_date, family_count, visitor_count
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        site_id = data.get('site_id')
        if not site_id or not get_site_by_id(site_id):
            return api_error(get_message('site_not_found'), status=404)
        if not data.get('check_in_date') or not data.get('check_out_date'):
            return api_error(get_message('date_required'))

        family_count = data.get('family_count', 1)
        visitor_count = data.get('visitor_count', 0)
        if not validate_non_negative_int(family_count, minimum=1):
            return api_error(get_message('family_count_invalid'))
        if not validate_non_negative_int(visitor_count):
            return api_error(get_message('visitor_count_invalid'))

        try:
            result = quote_stay(site_id, data['check_in_date'], data['check_out_date'],
                                family_count, visitor_count)
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=result)
