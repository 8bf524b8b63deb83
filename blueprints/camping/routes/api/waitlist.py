"""
Waitlist API routes.
Guests subscribe to a full date (optionally a single site) and are
notified by the messaging collaborator when a slot frees up.
"""

import logging
from flask import request
from flask_login import login_required, current_user

from models.site import get_site_by_id
from models.waitlist import register_waitlist, unregister_waitlist, get_user_waitlist
from utils.api_response import api_success, api_error
from utils.datetime_helpers import get_today
from utils.messages import get_message
from utils.validators import validate_date_format

logger = logging.getLogger(__name__)


def _parse_waitlist_body(data):
    """Return (target_date, site_id, error_response)."""
    target_date = data.get('target_date')
    site_id = data.get('site_id') or None

    if not target_date:
        return None, None, api_error(get_message('date_required'))
    if not validate_date_format(target_date):
        return None, None, api_error(get_message('invalid_date'))
    if site_id and not get_site_by_id(site_id):
        return None, None, api_error(get_message('site_not_found'), status=404)
    return target_date, site_id, None


def register_routes(bp):
    """Register waitlist routes on the blueprint."""

    @bp.route('/waitlist', methods=['POST'])
    @login_required
    def register_entry():
        """
        Subscribe to a date.

        Request body:
            target_date: YYYY-MM-DD (required)
            site_id: Site ID, omit for any site

        Returns:
            201 when created, 200 when already registered
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        target_date, site_id, error = _parse_waitlist_body(data)
        if error:
            return error
        if target_date < get_today().isoformat():
            return api_error(get_message('waitlist_date_past'))

        result = register_waitlist(current_user.id, target_date, site_id)
        if result['created']:
            return api_success(data=result['entry'], message=get_message('waitlist_registered'), status=201)
        return api_success(data=result['entry'], message=get_message('waitlist_already_registered'),
                           already_registered=True)

    @bp.route('/waitlist', methods=['DELETE'])
    @login_required
    def remove_entry():
        """
        Unsubscribe from a date.

        Request body (or query params):
            target_date: YYYY-MM-DD (required)
            site_id: Site ID, omit for the any-site entry
        """
        data = request.get_json(silent=True) or request.args.to_dict()
        target_date, site_id, error = _parse_waitlist_body(data)
        if error:
            return error

        removed = unregister_waitlist(current_user.id, target_date, site_id)
        return api_success(message=get_message('waitlist_removed'), removed=removed)

    @bp.route('/waitlist/mine', methods=['GET'])
    @login_required
    def my_entries():
        """Current user's upcoming waitlist entries."""
        return api_success(data=get_user_waitlist(current_user.id, from_date=get_today().isoformat()))
