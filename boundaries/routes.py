from datetime import datetime, timezone
from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from pydantic import ValidationError
from app.extensions import db
from app.utils import current_user_id, parse_body, validation_error_response
from .models import BoundaryTemplate, UserBoundary, BoundaryViolation
from .schemas import BoundaryCreate, BoundaryUpdate, ViolationCreate
from . import boundaries_bp

BOUNDARY_BODY = {
    'name': 'body',
    'in': 'body',
    'required': True,
    'schema': {
        'type': 'object',
        'properties': {
            'templateId': {'type': 'integer'},
            'customBoundary': {'type': 'string'},
            'category': {'type': 'string', 'enum': ['emotional', 'physical', 'personal', 'digital', 'financial', 'other']},
            'notes': {'type': 'string'},
            'isActive': {'type': 'boolean'}
        }
    }
}

def get_owned_boundary(boundary_id):
    return UserBoundary.query.filter_by(id=boundary_id, user_id=current_user_id()).first()

def as_utc_naive(value):
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

@boundaries_bp.route('/templates', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'List boundary templates',
    'security': [{'Bearer': []}],
    'responses': {'200': {'description': 'Templates'}}
})
def get_templates():
    templates = BoundaryTemplate.query.order_by(
        BoundaryTemplate.category, BoundaryTemplate.difficulty, BoundaryTemplate.id
    ).all()
    return jsonify([template.to_dict() for template in templates])

@boundaries_bp.route('/templates/<int:template_id>', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'Get a boundary template',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'template_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Template'},
        '404': {'description': 'Template not found'}
    }
})
def get_template(template_id):
    template = db.session.get(BoundaryTemplate, template_id)
    if not template:
        return jsonify({'error': 'Template not found'}), 404
    return jsonify(template.to_dict())

@boundaries_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'The current user\'s boundaries, newest first',
    'security': [{'Bearer': []}],
    'responses': {'200': {'description': 'Boundaries'}}
})
def get_boundaries():
    boundaries = UserBoundary.query.filter_by(user_id=current_user_id())\
        .order_by(UserBoundary.created_at.desc(), UserBoundary.id.desc())\
        .all()
    return jsonify([boundary.to_dict() for boundary in boundaries])

@boundaries_bp.route('', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'Create a boundary, optionally from a template',
    'security': [{'Bearer': []}],
    'parameters': [BOUNDARY_BODY],
    'responses': {
        '201': {'description': 'Boundary created'},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Template not found'}
    }
})
def create_boundary():
    try:
        payload = parse_body(BoundaryCreate)
    except ValidationError as e:
        return validation_error_response(e)

    if payload.template_id is not None and not db.session.get(BoundaryTemplate, payload.template_id):
        return jsonify({'error': 'Template not found'}), 404

    try:
        boundary = UserBoundary(user_id=current_user_id(), **payload.model_dump())
        db.session.add(boundary)
        db.session.commit()
        return jsonify(boundary.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating boundary: {str(e)}')
        return jsonify({'error': 'Failed to create boundary'}), 500

@boundaries_bp.route('/<int:boundary_id>', methods=['PUT'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'Update a boundary',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'boundary_id', 'in': 'path', 'type': 'integer', 'required': True},
        BOUNDARY_BODY
    ],
    'responses': {
        '200': {'description': 'Updated boundary'},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Boundary not found'}
    }
})
def update_boundary(boundary_id):
    try:
        payload = parse_body(BoundaryUpdate)
    except ValidationError as e:
        return validation_error_response(e)

    boundary = get_owned_boundary(boundary_id)
    if not boundary:
        return jsonify({'error': 'Boundary not found'}), 404

    try:
        for column, value in payload.model_dump(exclude_unset=True).items():
            setattr(boundary, column, value)
        db.session.commit()
        return jsonify(boundary.to_dict())
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating boundary {boundary_id}: {str(e)}')
        return jsonify({'error': 'Failed to update boundary'}), 500

@boundaries_bp.route('/<int:boundary_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'Delete a boundary and its violation history',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'boundary_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '204': {'description': 'Boundary deleted'},
        '404': {'description': 'Boundary not found'}
    }
})
def delete_boundary(boundary_id):
    boundary = get_owned_boundary(boundary_id)
    if not boundary:
        return jsonify({'error': 'Boundary not found'}), 404

    try:
        db.session.delete(boundary)
        db.session.commit()
        return '', 204
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting boundary {boundary_id}: {str(e)}')
        return jsonify({'error': 'Failed to delete boundary'}), 500

@boundaries_bp.route('/violations', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'The current user\'s recorded violations, newest first',
    'security': [{'Bearer': []}],
    'responses': {'200': {'description': 'Violations'}}
})
def get_violations():
    violations = BoundaryViolation.query.filter_by(user_id=current_user_id())\
        .order_by(BoundaryViolation.violated_at.desc(), BoundaryViolation.id.desc())\
        .all()
    return jsonify([violation.to_dict() for violation in violations])

@boundaries_bp.route('/violations', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Boundaries'],
    'description': 'Record that someone crossed one of your boundaries',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'boundaryId': {'type': 'integer'},
                'description': {'type': 'string'},
                'severity': {'type': 'integer', 'minimum': 1, 'maximum': 5},
                'emotionalImpact': {'type': 'string'},
                'actionTaken': {'type': 'string'},
                'violatedAt': {'type': 'string', 'format': 'date-time'}
            },
            'required': ['boundaryId', 'description', 'severity']
        }
    }],
    'responses': {
        '201': {'description': 'Violation recorded'},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Boundary not found'}
    }
})
def create_violation():
    """Record a violation and update the boundary's tally."""
    try:
        payload = parse_body(ViolationCreate)
    except ValidationError as e:
        return validation_error_response(e)

    boundary = get_owned_boundary(payload.boundary_id)
    if not boundary:
        return jsonify({'error': 'Boundary not found'}), 404

    violated_at = as_utc_naive(payload.violated_at) if payload.violated_at else datetime.utcnow()
    try:
        violation = BoundaryViolation(
            user_id=boundary.user_id,
            boundary_id=boundary.id,
            description=payload.description,
            severity=payload.severity,
            emotional_impact=payload.emotional_impact,
            action_taken=payload.action_taken,
            violated_at=violated_at
        )
        db.session.add(violation)

        boundary.violation_count = (boundary.violation_count or 0) + 1
        if boundary.last_violated is None or violated_at > boundary.last_violated:
            boundary.last_violated = violated_at

        db.session.commit()
        return jsonify(violation.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error recording violation: {str(e)}')
        return jsonify({'error': 'Failed to create violation'}), 500
