from typing import Optional
from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from app.extensions import db
from app.utils import current_user_id, parse_body, validation_error_response
from ai import utils as ai_utils
from .models import GreyRockScenario, GreyRockAttempt
from .utils import EVALUATOR_PROMPT, build_evaluation_prompt, parse_score
from . import greyrock_bp

class AttemptCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    scenario_id: int
    user_response: str = Field(..., min_length=1, max_length=2000)
    ai_score: Optional[int] = Field(None, ge=0, le=100)
    ai_feedback: Optional[str] = None

class EvaluationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    response: str = Field(..., min_length=1, max_length=2000)

def save_attempt(user_id, scenario_id, user_response, ai_score, ai_feedback):
    attempt = GreyRockAttempt(
        user_id=user_id,
        scenario_id=scenario_id,
        user_response=user_response,
        ai_score=ai_score,
        ai_feedback=ai_feedback
    )
    db.session.add(attempt)
    db.session.commit()
    return attempt

@greyrock_bp.route('/scenarios', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Grey Rock'],
    'description': 'List practice scenarios',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'difficulty', 'in': 'query', 'type': 'string'},
        {'name': 'category', 'in': 'query', 'type': 'string'}
    ],
    'responses': {'200': {'description': 'Scenarios'}}
})
def get_scenarios():
    query = GreyRockScenario.query
    if request.args.get('difficulty'):
        query = query.filter_by(difficulty=request.args['difficulty'])
    if request.args.get('category'):
        query = query.filter_by(category=request.args['category'])

    scenarios = query.order_by(GreyRockScenario.difficulty, GreyRockScenario.category, GreyRockScenario.id).all()
    return jsonify([scenario.to_dict() for scenario in scenarios])

@greyrock_bp.route('/scenarios/<int:scenario_id>', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Grey Rock'],
    'description': 'Get a practice scenario',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'scenario_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Scenario'},
        '404': {'description': 'Scenario not found'}
    }
})
def get_scenario(scenario_id):
    scenario = db.session.get(GreyRockScenario, scenario_id)
    if not scenario:
        return jsonify({'error': 'Scenario not found'}), 404
    return jsonify(scenario.to_dict())

@greyrock_bp.route('/scenarios/<int:scenario_id>/evaluate', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Grey Rock'],
    'description': 'Score a written response with the AI model and record the attempt',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'scenario_id', 'in': 'path', 'type': 'integer', 'required': True},
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'type': 'object',
                'properties': {'response': {'type': 'string', 'example': 'Okay.'}},
                'required': ['response']
            }
        }
    ],
    'responses': {
        '201': {'description': 'Recorded attempt with score and feedback'},
        '400': {'description': 'Validation failed or AI not configured'},
        '404': {'description': 'Scenario not found'},
        '500': {'description': 'Upstream failure'}
    }
})
def evaluate_response(scenario_id):
    """Have the model grade a response, then store it as an attempt."""
    try:
        payload = parse_body(EvaluationRequest)
    except ValidationError as e:
        return validation_error_response(e)

    scenario = db.session.get(GreyRockScenario, scenario_id)
    if not scenario:
        return jsonify({'error': 'Scenario not found'}), 404

    try:
        feedback = ai_utils.chat_completion(
            build_evaluation_prompt(scenario, payload.response),
            system_prompt=EVALUATOR_PROMPT
        )
    except ai_utils.AIConfigurationError:
        return jsonify({'error': 'AI API key not configured'}), 400
    except ai_utils.AIServiceError:
        return jsonify({'error': 'Failed to evaluate response'}), 500

    try:
        attempt = save_attempt(current_user_id(), scenario.id, payload.response, parse_score(feedback), feedback)
        return jsonify(attempt.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error saving grey rock attempt: {str(e)}')
        return jsonify({'error': 'Failed to create attempt'}), 500

@greyrock_bp.route('/attempts', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Grey Rock'],
    'description': 'Record an attempt that was already scored',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'scenarioId': {'type': 'integer'},
                'userResponse': {'type': 'string'},
                'aiScore': {'type': 'integer'},
                'aiFeedback': {'type': 'string'}
            },
            'required': ['scenarioId', 'userResponse']
        }
    }],
    'responses': {
        '201': {'description': 'Attempt recorded'},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Scenario not found'}
    }
})
def create_attempt():
    try:
        payload = parse_body(AttemptCreate)
    except ValidationError as e:
        return validation_error_response(e)

    if not db.session.get(GreyRockScenario, payload.scenario_id):
        return jsonify({'error': 'Scenario not found'}), 404

    try:
        attempt = save_attempt(current_user_id(), payload.scenario_id, payload.user_response,
                               payload.ai_score, payload.ai_feedback)
        return jsonify(attempt.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error saving grey rock attempt: {str(e)}')
        return jsonify({'error': 'Failed to create attempt'}), 500

@greyrock_bp.route('/attempts', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Grey Rock'],
    'description': 'The current user\'s attempts, newest first',
    'security': [{'Bearer': []}],
    'responses': {'200': {'description': 'Attempts'}}
})
def get_attempts():
    attempts = GreyRockAttempt.query.filter_by(user_id=current_user_id())\
        .order_by(GreyRockAttempt.completed_at.desc(), GreyRockAttempt.id.desc())\
        .all()
    return jsonify([attempt.to_dict() for attempt in attempts])
