"""
Reservation data access functions.

This module re-exports the functions of the split modules:
- reservation_state.py: Status lifecycle, transitions and expiry sweep
- reservation_crud.py: Create and read operations
- reservation_queries.py: Listing and filtering
- reservation_availability.py: Night ledger lookups
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# State management
from .reservation_state import (
    # Constants
    PENDING,
    CONFIRMED,
    COMPLETED,
    CANCELLED,
    REFUND_PENDING,
    REFUNDED,
    NO_SHOW,
    RESERVATION_STATUSES,
    OCCUPYING_STATUSES,
    RELEASING_STATUSES,
    TERMINAL_STATUSES,
    VALID_TRANSITIONS,
    InvalidStateTransitionError,
    # Transitions
    validate_state_transition,
    change_reservation_status,
    confirm_reservation,
    cancel_reservation,
    request_cancellation,
    complete_refund,
    mark_no_show,
    complete_reservation,
    expire_unpaid_reservations,
    # History
    get_status_history,
)

# CRUD operations
from .reservation_crud import (
    insert_reservation,
    insert_reservation_nights,
    get_reservation_by_id,
    get_reservation_nights,
)

# Queries
from .reservation_queries import (
    get_user_reservations,
    get_reservations_filtered,
    get_pending_with_deadline,
)

# Availability
from .reservation_availability import (
    get_occupied_nights,
    get_conflicting_reservations,
    is_site_available,
)
