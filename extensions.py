"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask import current_app
from flask_login import LoginManager, UserMixin

# Initialize Flask-Login
login_manager = LoginManager()


class User(UserMixin):
    """
    Authenticated user as supplied by the identity collaborator.

    The campground does not own accounts: the id is an opaque string and
    admin rights come from the ADMIN_USER_IDS setting.
    """

    def __init__(self, user_id: str, is_admin: bool = False):
        self.id = user_id
        self.is_admin = is_admin


@login_manager.request_loader
def load_user_from_request(request):
    """
    Load user from the identity header for Flask-Login.

    Args:
        request: The incoming Flask request

    Returns:
        User object or None if the header is missing
    """
    header = current_app.config.get('USER_ID_HEADER', 'X-User-Id')
    user_id = (request.headers.get(header) or '').strip()
    if not user_id:
        return None
    return User(user_id, is_admin=user_id in current_app.config.get('ADMIN_USER_IDS', set()))


@login_manager.unauthorized_handler
def unauthorized():
    """Return a JSON 401 instead of redirecting to a login page."""
    from utils.api_response import api_error
    from utils.messages import get_message
    return api_error(get_message('login_required'), status=401)
