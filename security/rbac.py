from functools import wraps
from flask import g, jsonify

from models.profile import ADMIN

def has_user_type(*user_types: str) -> bool:
    profile = getattr(g, "profile", None)
    if not profile:
        return False
    return profile.user_type == ADMIN or profile.user_type in user_types

def require_roles(*user_types: str):
    """
    Usage: @require_roles("barber", "tattoo_artist")
    Tenant admins pass every check.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if getattr(g, "auth_user_id", None) is None:
                return jsonify(error="Authentication required"), 401

            profile = getattr(g, "profile", None)
            if profile is None:
                return jsonify(error="Profile required"), 403

            if not has_user_type(*user_types):
                return jsonify(error="Forbidden"), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator

