"""
Campground API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.camping.routes.api import sites
from blueprints.camping.routes.api import reservations
from blueprints.camping.routes.api import waitlist
from blueprints.camping.routes.api import admin_reservations
from blueprints.camping.routes.api import admin_config

# Register all route functions on the blueprint
sites.register_routes(api_bp)
reservations.register_routes(api_bp)
waitlist.register_routes(api_bp)
admin_reservations.register_routes(api_bp)
admin_config.register_routes(api_bp)
