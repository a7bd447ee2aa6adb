from functools import wraps

from flask import current_app, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from library_api.utils.responses import json_error


def role_required(*roles):
    """Reject the request unless its access token carries one of ``roles``."""
    allowed = set(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get("role")
            if role not in allowed:
                current_app.logger.info(
                    f"[auth] user={get_jwt_identity()} role={role} denied {request.method} {request.path}"
                )
                return json_error("Forbidden", 403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
