"""
Access control
The decision itself is a pure function over an already-resolved identity;
the decorators adapt it to Flask-Login's current_user.
"""
from dataclasses import dataclass
from functools import wraps

from flask import g
from flask_login import current_user

from dominica_news.exceptions import Unauthorized, Forbidden

ROLE_ADMIN = 'admin'
ROLE_USER = 'user'
ROLES = (ROLE_ADMIN, ROLE_USER)

AUTHENTICATION_REQUIRED = 'Authentication required'
INSUFFICIENT_PERMISSIONS = 'Insufficient permissions'


@dataclass(frozen=True)
class Identity:
    """Resolved caller, as carried in the access token"""
    user_id: int
    email: str
    role: str


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str = None

    def __bool__(self):
        return self.allowed


ALLOWED = AccessDecision(True)


def authorize(identity, required_roles):
    """
    Decide whether ``identity`` may act with any of ``required_roles``.

    A missing identity and a present-but-unprivileged identity are denied
    with different reasons so callers can answer 401 vs 403.
    """
    if isinstance(required_roles, str):
        required_roles = (required_roles,)
    if identity is None:
        return AccessDecision(False, AUTHENTICATION_REQUIRED)
    if identity.role not in required_roles:
        return AccessDecision(False, INSUFFICIENT_PERMISSIONS)
    return ALLOWED


def current_identity():
    """Identity of the authenticated caller, or None"""
    if not current_user.is_authenticated:
        return None
    return current_user.identity


def roles_required(*roles):
    """
    Role check decorator

    Usage:
        @roles_required('admin', 'user')
        def view():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            decision = authorize(current_identity(), roles)
            if not decision:
                if decision.reason == AUTHENTICATION_REQUIRED:
                    # request_loader leaves the precise token failure in g
                    raise Unauthorized(g.get('auth_error') or decision.reason)
                raise Forbidden(decision.reason)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = roles_required(ROLE_ADMIN)
