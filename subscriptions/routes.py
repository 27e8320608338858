from datetime import datetime
from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from app.extensions import db
from app.utils import current_user_id, parse_body, validation_error_response
from auth.models import User
from .models import SubscriptionPlan
from .utils import assign_plan, effective_tier, plan_features, subscription_usage
from . import subscriptions_bp

class UpgradeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan_id: int

@subscriptions_bp.route('/plans', methods=['GET'])
@swag_from({
    'tags': ['Subscriptions'],
    'description': 'Active plans, cheapest first',
    'responses': {'200': {'description': 'Plans'}}
})
def get_plans():
    plans = SubscriptionPlan.query.filter_by(is_active=True)\
        .order_by(SubscriptionPlan.price, SubscriptionPlan.id)\
        .all()
    return jsonify([plan.to_dict() for plan in plans])

@subscriptions_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Subscriptions'],
    'description': 'The current user\'s subscription and the plan whose limits apply',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Subscription state'},
        '404': {'description': 'User not found'}
    }
})
def get_subscription():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({'error': 'User not found'}), 404

    tier = effective_tier(user)
    plan = SubscriptionPlan.query.filter_by(name=tier).first()
    return jsonify({
        'tier': tier,
        'status': user.subscription_status,
        'subscription': user.subscription.to_dict() if user.subscription else None,
        'plan': plan.to_dict() if plan else None,
        'features': plan_features(user)
    })

@subscriptions_bp.route('/usage', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Subscriptions'],
    'description': 'Usage counters for the current month',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Usage'},
        '404': {'description': 'User not found'}
    }
})
def get_usage():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({'error': 'User not found'}), 404
    return jsonify(subscription_usage(user))

@subscriptions_bp.route('/upgrade', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Subscriptions'],
    'description': 'Switch the current user to another plan; no payment is taken',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {'planId': {'type': 'integer'}},
            'required': ['planId']
        }
    }],
    'responses': {
        '200': {'description': 'Updated subscription'},
        '400': {'description': 'Validation failed or plan unavailable'},
        '404': {'description': 'Plan not found'}
    }
})
def upgrade_subscription():
    try:
        payload = parse_body(UpgradeRequest)
    except ValidationError as e:
        return validation_error_response(e)

    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({'error': 'User not found'}), 404

    plan = db.session.get(SubscriptionPlan, payload.plan_id)
    if not plan:
        return jsonify({'error': 'Plan not found'}), 404
    if not plan.is_active:
        return jsonify({'error': 'Plan is not available'}), 400

    try:
        subscription = assign_plan(user, plan)
        db.session.commit()

        current_app.logger.info(f'User {user.id} moved to plan {plan.name}')
        return jsonify({
            'message': f'Subscribed to {plan.display_name}',
            'subscription': subscription.to_dict(),
            'user': user.to_dict()
        })
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error upgrading subscription: {str(e)}')
        return jsonify({'error': 'Failed to upgrade subscription'}), 500

@subscriptions_bp.route('/cancel', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Subscriptions'],
    'description': 'Cancel the current subscription; paid limits apply until the period ends',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Cancelled subscription'},
        '400': {'description': 'No active subscription'}
    }
})
def cancel_subscription():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({'error': 'User not found'}), 404

    subscription = user.subscription
    if subscription is None or subscription.status == 'cancelled':
        return jsonify({'error': 'No active subscription to cancel'}), 400

    try:
        subscription.status = 'cancelled'
        subscription.cancelled_at = datetime.utcnow()
        user.subscription_status = 'cancelled'
        db.session.commit()
        return jsonify({
            'message': 'Subscription cancelled',
            'subscription': subscription.to_dict(),
            'user': user.to_dict()
        })
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error cancelling subscription: {str(e)}')
        return jsonify({'error': 'Failed to cancel subscription'}), 500
