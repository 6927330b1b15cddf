from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            g.actor_id = get_jwt_identity()
            return fn(*args, **kwargs)
        return wrapper
    return decorator
