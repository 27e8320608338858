from typing import Any, Dict, Literal
from flask import jsonify, current_app
from flasgger import swag_from
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from app.extensions import db
from app.utils import admin_required, current_user_id, parse_body, validation_error_response
from auth.models import User
from subscriptions.models import SubscriptionPlan, UNLIMITED
from subscriptions.utils import assign_plan, incidents_this_month
from .utils import platform_metrics
from . import admin_bp

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

class UserAdminUpdate(CamelModel):
    subscription_tier: str = Field(None, min_length=1)
    subscription_status: Literal['active', 'trialing', 'past_due', 'cancelled'] = None
    is_admin: bool = None
    is_active: bool = None

class PlanCreate(CamelModel):
    name: str = Field(..., pattern=r'^[a-z0-9_-]{2,50}$')
    display_name: str = Field(..., min_length=1, max_length=100)
    price: int = Field(..., ge=0)
    currency: str = Field('usd', min_length=3, max_length=3)
    interval: Literal['month', 'year'] = 'month'
    incident_limit: int = Field(UNLIMITED, ge=UNLIMITED)
    features: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

@admin_bp.route('/metrics', methods=['GET'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'Platform metrics: users, paid subscriptions, revenue and feature usage',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Metrics'},
        '403': {'description': 'Admin access required'}
    }
})
def get_metrics():
    return jsonify(platform_metrics())

@admin_bp.route('/users', methods=['GET'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'All users with their incident count for the current month',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Users'},
        '403': {'description': 'Admin access required'}
    }
})
def get_users():
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([
        {**user.to_dict(), 'incidentsThisMonth': incidents_this_month(user.id)}
        for user in users
    ])

@admin_bp.route('/users/<int:user_id>', methods=['PATCH'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'Change a user\'s plan, status or flags',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'user_id', 'in': 'path', 'type': 'integer', 'required': True},
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'type': 'object',
                'properties': {
                    'subscriptionTier': {'type': 'string'},
                    'subscriptionStatus': {'type': 'string'},
                    'isAdmin': {'type': 'boolean'},
                    'isActive': {'type': 'boolean'}
                }
            }
        }
    ],
    'responses': {
        '200': {'description': 'Updated user'},
        '400': {'description': 'Validation failed or unknown plan'},
        '403': {'description': 'Admin access required'},
        '404': {'description': 'User not found'}
    }
})
def update_user(user_id):
    try:
        payload = parse_body(UserAdminUpdate)
    except ValidationError as e:
        return validation_error_response(e)

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    changes = payload.model_dump(exclude_unset=True)
    tier = changes.pop('subscription_tier', None)
    plan = SubscriptionPlan.query.filter_by(name=tier).first() if tier else None
    if tier and not plan:
        return jsonify({'error': f'Unknown subscription tier: {tier}'}), 400

    try:
        subscription = user.subscription
        if plan and (tier != user.subscription_tier or subscription is None or subscription.plan_id != plan.id):
            assign_plan(user, plan)
        for column, value in changes.items():
            setattr(user, column, value)
        if 'subscription_status' in changes and user.subscription:
            user.subscription.status = changes['subscription_status']
        db.session.commit()
        current_app.logger.info(f'Admin {current_user_id()} updated user {user.id}: {sorted(payload.model_fields_set)}')
        return jsonify({**user.to_dict(), 'incidentsThisMonth': incidents_this_month(user.id)})
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating user {user_id}: {str(e)}')
        return jsonify({'error': 'Failed to update user'}), 500

@admin_bp.route('/subscription-plans', methods=['GET'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'All plans, including inactive ones',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Plans'},
        '403': {'description': 'Admin access required'}
    }
})
def get_plans():
    plans = SubscriptionPlan.query.order_by(SubscriptionPlan.price, SubscriptionPlan.id).all()
    return jsonify([plan.to_dict() for plan in plans])

@admin_bp.route('/subscription-plans', methods=['POST'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'Create a subscription plan',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'name': {'type': 'string', 'example': 'family'},
                'displayName': {'type': 'string', 'example': 'Family'},
                'price': {'type': 'integer', 'description': 'Price in cents'},
                'currency': {'type': 'string', 'example': 'usd'},
                'interval': {'type': 'string', 'enum': ['month', 'year']},
                'incidentLimit': {'type': 'integer', 'description': '-1 for unlimited'},
                'features': {'type': 'object'}
            },
            'required': ['name', 'displayName', 'price']
        }
    }],
    'responses': {
        '201': {'description': 'Plan created'},
        '400': {'description': 'Validation failed'},
        '403': {'description': 'Admin access required'},
        '409': {'description': 'Plan name already exists'}
    }
})
def create_plan():
    try:
        payload = parse_body(PlanCreate)
    except ValidationError as e:
        return validation_error_response(e)

    if SubscriptionPlan.query.filter_by(name=payload.name).first():
        return jsonify({'error': 'A plan with this name already exists'}), 409

    try:
        plan = SubscriptionPlan(**payload.model_dump())
        plan.currency = plan.currency.lower()
        db.session.add(plan)
        db.session.commit()
        return jsonify(plan.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating subscription plan: {str(e)}')
        return jsonify({'error': 'Failed to create subscription plan'}), 500

@admin_bp.route('/subscription-plans/<int:plan_id>/toggle-status', methods=['PATCH'])
@admin_required
@swag_from({
    'tags': ['Admin'],
    'description': 'Activate or retire a plan',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'plan_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Updated plan'},
        '403': {'description': 'Admin access required'},
        '404': {'description': 'Plan not found'}
    }
})
def toggle_plan_status(plan_id):
    plan = db.session.get(SubscriptionPlan, plan_id)
    if not plan:
        return jsonify({'error': 'Plan not found'}), 404

    try:
        plan.is_active = not plan.is_active
        db.session.commit()
        return jsonify(plan.to_dict())
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error toggling plan {plan_id}: {str(e)}')
        return jsonify({'error': 'Failed to update plan status'}), 500
