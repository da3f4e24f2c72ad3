from flask import request, current_app
from jose import jwt, JWTError

def _bearer_token():
    header = request.headers.get("Authorization") or ""
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None

def decode_access_token(token: str):
    """
    Verifies an access token issued by the hosted auth provider.
    Returns the claims dict, or None when the token is invalid or expired.
    """
    if not token:
        return None
    try:
        return jwt.decode(
            token,
            current_app.config["AUTH_JWT_SECRET"],
            algorithms=current_app.config.get("AUTH_JWT_ALGORITHMS", ["HS256"]),
            audience=current_app.config.get("AUTH_JWT_AUDIENCE"),
        )
    except JWTError as exc:
        current_app.logger.info("Rejected access token: %s", exc)
        return None

def get_claims_from_request():
    return decode_access_token(_bearer_token())
