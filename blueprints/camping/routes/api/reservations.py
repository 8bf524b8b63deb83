"""
Guest reservation API routes.
Booking, listing own reservations, refund preview and cancellation.
"""

import logging
from flask import request
from flask_login import login_required, current_user

from models.reservation import get_user_reservations, get_status_history
from models.reward import get_user_reward_totals
from utils.api_response import api_success, api_error, api_outcome
from utils.messages import get_message
from blueprints.camping.services.booking_service import (
    create_booking,
    get_owned_reservation,
    get_deposit_info,
    preview_refund,
    request_guest_cancellation,
    PENDING,
)

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register guest reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def create_reservation():
        """
        Create a reservation (PENDING until the deposit is confirmed).

        Request body:
            site_id: Site ID (required)
            check_in_date, check_out_date: YYYY-MM-DD (required)
            family_count: Families (default 1)
            visitor_count: Day visitors (default 0)
            vehicle_count: Vehicles (default 0)
            guest_name, guest_phone: Contact (required)
            request_text: Free text (optional)
            total_price: Price the client displayed (optional)

        Returns:
            201 with reservation, quote and deposit; error code otherwise
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(get_message('data_required'))

        result = create_booking(current_user.id, data)
        return api_outcome(result, data_key='reservation', status=201)

    @bp.route('/reservations/mine', methods=['GET'])
    @login_required
    def my_reservations():
        """
        List the current user's reservations.

        Query params:
            status: Optional status filter
        """
        return api_success(
            data=get_user_reservations(current_user.id, status=request.args.get('status')),
            rewards=get_user_reward_totals(current_user.id)
        )

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    @login_required
    def reservation_detail(reservation_id):
        """Reservation detail with history (owner or admin)."""
        result = get_owned_reservation(reservation_id, current_user.id, current_user.is_admin)
        if result['success']:
            reservation = result['reservation']
            result['history'] = get_status_history(reservation_id)
            if reservation['status'] == PENDING:
                result['deposit'] = get_deposit_info(reservation['created_at'])
        return api_outcome(result, data_key='reservation')

    @bp.route('/reservations/<int:reservation_id>/refund-preview', methods=['GET'])
    @login_required
    def refund_preview(reservation_id):
        """Refund rate and amount if cancelled now."""
        result = get_owned_reservation(reservation_id, current_user.id, current_user.is_admin)
        if not result['success']:
            return api_outcome(result, data_key='reservation')
        return api_success(data=preview_refund(result['reservation']))

    @bp.route('/reservations/<int:reservation_id>/cancel-request', methods=['POST'])
    @login_required
    def cancel_request(reservation_id):
        """
        Request cancellation with refund account details.

        Request body:
            refund_bank, refund_account, refund_holder: Required
            cancel_reason: Optional
        """
        data = request.get_json(silent=True) or {}
        result = request_guest_cancellation(reservation_id, current_user.id, data)
        return api_outcome(result, data_key='reservation')
