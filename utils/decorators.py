"""
Route decorators for authentication and authorization.
Provides admin-only access control for routes.
"""

from functools import wraps
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import get_message


def admin_required(func):
    """
    Decorator to require an administrator identity for a route.

    Usage:
        @bp.route('/admin/pricing')
        @login_required
        @admin_required
        def admin_pricing():
            ...
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not getattr(current_user, 'is_admin', False):
            return api_error(get_message('permission_denied'), status=403)
        return func(*args, **kwargs)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'admin_required']
