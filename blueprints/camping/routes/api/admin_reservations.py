"""
Admin reservation API routes.
Listing, manual status transitions, overdue view and the expiry sweep.
"""

import logging
from flask import request, current_app
from flask_login import login_required, current_user

from models.reservation import get_reservations_filtered, get_pending_with_deadline
from models.waitlist import get_waitlist_users, mark_waitlist_notified
from utils.api_response import api_success, api_error, api_outcome
from utils.datetime_helpers import get_now, to_db_timestamp
from utils.decorators import admin_required
from utils.messages import get_message
from utils.validators import validate_date_format
from blueprints.camping.services.booking_service import (
    apply_admin_action,
    expire_pending_reservations,
    ADMIN_ACTIONS,
)

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register admin reservation routes on the blueprint."""

    @bp.route('/admin/reservations', methods=['GET'])
    @login_required
    @admin_required
    def admin_list_reservations():
        """
        List reservations.

        Query params:
            status: Status filter
            date_from, date_to: Check-in range (YYYY-MM-DD)
            site_id: Site filter
            search: Guest name or phone
        """
        try:
            reservations = get_reservations_filtered(
                status=request.args.get('status'),
                date_from=request.args.get('date_from'),
                date_to=request.args.get('date_to'),
                site_id=request.args.get('site_id'),
                search=request.args.get('search')
            )
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=reservations, count=len(reservations))

    @bp.route('/admin/reservations/overdue', methods=['GET'])
    @login_required
    @admin_required
    def admin_overdue_reservations():
        """PENDING reservations past (or close to) the payment deadline."""
        config = current_app.config
        pending = get_pending_with_deadline(get_now(), config['PAYMENT_DEADLINE_HOURS'],
                                            config['PAYMENT_WARNING_HOURS'])
        overdue = [r for r in pending if r['is_overdue']]
        warning = [r for r in pending if r['is_deadline_near']]
        return api_success(data={'overdue': overdue, 'warning': warning})

    @bp.route('/admin/reservations/<int:reservation_id>/<action>', methods=['POST'])
    @login_required
    @admin_required
    def admin_reservation_action(reservation_id, action):
        """
        Apply a status action.

        URL action: confirm, cancel, refund-complete, no-show, complete

        Request body (cancel only):
            notes: History notes
        """
        if action not in ADMIN_ACTIONS:
            return api_error(get_message('unknown_action', action=action), status=404)

        data = request.get_json(silent=True) or {}
        result = apply_admin_action(reservation_id, action, current_user.id, notes=data.get('notes', ''))
        return api_outcome(result, data_key='reservation')

    @bp.route('/admin/reservations/expire', methods=['POST'])
    @login_required
    @admin_required
    def admin_expire_pending():
        """Run the unpaid expiry sweep now."""
        result = expire_pending_reservations()
        return api_outcome(result, data_key='expired')

    # =========================================================================
    # WAITLIST FAN-OUT
    # =========================================================================

    @bp.route('/admin/waitlist', methods=['GET'])
    @login_required
    @admin_required
    def admin_waitlist_users():
        """
        Subscribers to notify for a freed slot.

        Query params:
            date: Freed night (YYYY-MM-DD, required)
            site_id: Freed site (optional)
            include_notified: 'true' to include already notified entries
        """
        target_date = request.args.get('date')
        if not target_date or not validate_date_format(target_date):
            return api_error(get_message('invalid_date'))

        include_notified = request.args.get('include_notified', '').lower() == 'true'
        entries = get_waitlist_users(target_date, request.args.get('site_id'), include_notified)
        return api_success(data=entries, count=len(entries))

    @bp.route('/admin/waitlist/notified', methods=['POST'])
    @login_required
    @admin_required
    def admin_waitlist_notified():
        """
        Record that notifications were sent.

        Request body:
            ids: Waitlist entry IDs
        """
        data = request.get_json(silent=True) or {}
        ids = data.get('ids')
        if not isinstance(ids, list) or not all(isinstance(i, int) for i in ids):
            return api_error(get_message('data_required'))

        updated = mark_waitlist_notified(ids, to_db_timestamp(get_now()))
        return api_success(updated=updated)
