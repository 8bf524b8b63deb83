"""
Camping blueprint initialization.
Assembles the campground booking API.

Route logic lives in routes/api/:
- sites.py - Season window, site list, availability and quotes
- reservations.py - Guest booking and cancellation
- waitlist.py - Guest waitlist subscriptions
- admin_reservations.py - Admin transitions, overdue view, expiry, fan-out
- admin_config.py - Pricing, holidays, packages, open-day, blocks, sites

Business rules live in services/.
"""

from flask import Blueprint

# Create main camping blueprint
camping_bp = Blueprint('camping', __name__)

# =============================================================================
# REGISTER SUB-BLUEPRINTS
# =============================================================================

# API routes (all REST endpoints)
from blueprints.camping.routes.api import api_bp
camping_bp.register_blueprint(api_bp, url_prefix='/api')
