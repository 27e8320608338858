"""Request helpers shared by every blueprint."""

from functools import wraps

from flask import jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from pydantic import ValidationError


def current_user_id():
    """Return the authenticated user's id as an int.

    Tokens carry the id as a string subject."""
    return int(get_jwt_identity())


def validation_error_response(exc: ValidationError):
    """Flatten a pydantic error into the API's field-level 400 body."""
    details = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err['loc']) or 'body'
        details.append({'field': field, 'message': err['msg']})
    return jsonify({'error': 'Validation failed', 'details': details}), 400


def request_json():
    """The JSON body as a dict; absent, malformed or non-object bodies give ``{}``."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_body(schema):
    """Validate the JSON body against *schema*.

    Raises ``ValidationError``; an absent or non-object body validates as ``{}``
    so required fields are reported individually.
    """
    return schema.model_validate(request_json())


def admin_required(fn):
    """Restrict a view to admin users (403 for everyone else)."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        from auth.models import User
        from app.extensions import db

        user = db.session.get(User, current_user_id())
        if not user or not user.is_admin:
            return jsonify({'error': 'Admin access required'}), 403
        return fn(*args, **kwargs)
    return wrapper


def feature_required(feature):
    """Restrict a view to users whose plan includes *feature*."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            from auth.models import User
            from app.extensions import db
            from subscriptions.utils import plan_features

            user = db.session.get(User, current_user_id())
            if not user:
                return jsonify({'error': 'User not found'}), 404
            if not user.is_admin and not plan_features(user).get(feature):
                return jsonify({
                    'error': 'Your subscription plan does not include this feature',
                    'feature': feature
                }), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator
