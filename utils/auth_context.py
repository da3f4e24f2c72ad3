from functools import wraps
from flask import g, jsonify
from security.tokens import get_claims_from_request
from models.profile import Profile

def load_current_user():
    claims = get_claims_from_request()
    if not claims or not claims.get("sub"):
        g.auth_user_id = None
        g.claims = None
        g.profile = None
        return
    g.claims = claims
    g.auth_user_id = str(claims["sub"])
    g.profile = Profile.query.filter_by(user_id=g.auth_user_id).first()

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "auth_user_id", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper

def profile_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "auth_user_id", None) is None:
            return jsonify(error="Authentication required"), 401
        if getattr(g, "profile", None) is None:
            return jsonify(error="Profile required"), 403
        return fn(*args, **kwargs)
    return wrapper
