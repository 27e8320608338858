from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.extensions import db
from app.utils import current_user_id, request_json
from auth.utils import registration_errors, text_value
from .models import User
from . import auth_bp

@auth_bp.route('/register', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Register a new user',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'janedoe'},
                'email': {'type': 'string', 'example': 'jane@example.com'},
                'password': {'type': 'string', 'example': 'Secure#Pass1'}
            },
            'required': ['username', 'email', 'password']
        }
    }],
    'responses': {
        '201': {
            'description': 'User registered successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'message': {'type': 'string'},
                    'user': {'$ref': '#/definitions/User'},
                    'token': {'type': 'string'}
                }
            }
        },
        '400': {'description': 'Invalid input data', 'schema': {'$ref': '#/definitions/ValidationError'}},
        '409': {'description': 'Username or email already exists'}
    }
})
def register():
    """Register a new user on the free plan."""
    data = request_json()
    username = text_value(data.get('username')).strip()
    email = text_value(data.get('email')).strip().lower()
    password = text_value(data.get('password'))

    details = registration_errors(username, email, password)
    if details:
        return jsonify({'error': 'Validation failed', 'details': details}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 409

    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 409

    try:
        user = User(username=username, email=email, password=password)
        db.session.add(user)
        db.session.commit()

        return jsonify({
            'message': 'User registered successfully',
            'user': user.to_dict(),
            'token': user.generate_auth_token()
        }), 201

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Registration error: {str(e)}')
        return jsonify({'error': 'Failed to register user'}), 500

@auth_bp.route('/login', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Login with username or email and password',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'janedoe'},
                'email': {'type': 'string', 'example': 'jane@example.com'},
                'password': {'type': 'string', 'example': 'Secure#Pass1'}
            },
            'required': ['password']
        }
    }],
    'responses': {
        '200': {
            'description': 'Login successful',
            'schema': {
                'type': 'object',
                'properties': {
                    'message': {'type': 'string'},
                    'user': {'$ref': '#/definitions/User'},
                    'token': {'type': 'string'}
                }
            }
        },
        '400': {'description': 'Invalid input data'},
        '401': {'description': 'Invalid credentials'},
        '403': {'description': 'Account disabled'}
    }
})
def login():
    """Login user and return JWT token."""
    data = request_json()
    identifier = text_value(data.get('email')).strip() or text_value(data.get('username')).strip()
    password = text_value(data.get('password'))

    if not identifier or not password:
        return jsonify({'error': 'Missing username/email or password'}), 400

    user = User.query.filter(
        (User.email == identifier.lower()) |
        (User.username == identifier)
    ).first()

    if not user or not user.check_password(password):
        return jsonify({'error': 'Invalid credentials'}), 401

    if not user.is_active:
        return jsonify({'error': 'Account is disabled'}), 403

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict(),
        'token': user.generate_auth_token()
    })

@auth_bp.route('/me')
@jwt_required()
@swag_from({
    'security': [{'Bearer': []}],
    'tags': ['Authentication'],
    'description': 'Get current user profile',
    'responses': {
        '200': {
            'description': 'User profile',
            'schema': {'$ref': '#/definitions/User'}
        },
        '401': {'description': 'Invalid or missing token'},
        '404': {'description': 'User not found'}
    }
})
def get_current_user():
    """Get current user's profile."""
    user = db.session.get(User, current_user_id())

    if not user:
        return jsonify({'error': 'User not found'}), 404

    return jsonify(user.to_dict())
