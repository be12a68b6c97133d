from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity
from hospitium.errors import error_response

def user_required(fn):
    """Load the authenticated, active user into ``g.current_user``."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        from hospitium.models.user import User

        user_id = get_jwt_identity()
        user = User.query.filter_by(id=user_id).first() if user_id else None

        if not user or not user.is_active:
            return error_response("Authentication required", 401)

        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return error_response("Insufficient permissions", 403)

            return fn(*args, **kwargs)
        return wrapper
    return decorator
