from datetime import datetime
from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy import case
from app.extensions import db
from app.utils import current_user_id, parse_body, validation_error_response
from .models import EducationalLesson, UserProgress
from . import education_bp

DIFFICULTY_ORDER = case(
    {'beginner': 0, 'intermediate': 1, 'advanced': 2},
    value=EducationalLesson.difficulty,
    else_=3
)

class LessonCompletion(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    time_spent: int = Field(0, ge=0)

@education_bp.route('/lessons', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Education'],
    'description': 'List lessons ordered by category and difficulty',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'category', 'in': 'query', 'type': 'string'},
        {'name': 'difficulty', 'in': 'query', 'type': 'string', 'enum': ['beginner', 'intermediate', 'advanced']}
    ],
    'responses': {
        '200': {'description': 'Lessons'},
        '401': {'description': 'Unauthorized'}
    }
})
def get_lessons():
    query = EducationalLesson.query
    if request.args.get('category'):
        query = query.filter_by(category=request.args['category'])
    if request.args.get('difficulty'):
        query = query.filter_by(difficulty=request.args['difficulty'])

    lessons = query.order_by(EducationalLesson.category, DIFFICULTY_ORDER, EducationalLesson.id).all()
    return jsonify([lesson.to_dict() for lesson in lessons])

@education_bp.route('/lessons/<int:lesson_id>', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Education'],
    'description': 'Get a lesson',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'lesson_id', 'in': 'path', 'type': 'integer', 'required': True}],
    'responses': {
        '200': {'description': 'Lesson'},
        '404': {'description': 'Lesson not found'}
    }
})
def get_lesson(lesson_id):
    lesson = db.session.get(EducationalLesson, lesson_id)
    if not lesson:
        return jsonify({'error': 'Lesson not found'}), 404
    return jsonify(lesson.to_dict())

@education_bp.route('/progress', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Education'],
    'description': 'Lesson progress of the current user',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Progress records'},
        '401': {'description': 'Unauthorized'}
    }
})
def get_progress():
    progress = UserProgress.query.filter_by(user_id=current_user_id()).all()
    return jsonify([record.to_dict() for record in progress])

@education_bp.route('/complete/<int:lesson_id>', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Education'],
    'description': 'Mark a lesson complete for the current user',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'lesson_id', 'in': 'path', 'type': 'integer', 'required': True},
        {
            'name': 'body',
            'in': 'body',
            'schema': {
                'type': 'object',
                'properties': {'timeSpent': {'type': 'integer', 'description': 'Seconds spent reading'}}
            }
        }
    ],
    'responses': {
        '200': {'description': 'Updated progress record'},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Lesson not found'}
    }
})
def complete_lesson(lesson_id):
    """Create or refresh the completion record for a lesson."""
    try:
        payload = parse_body(LessonCompletion)
    except ValidationError as e:
        return validation_error_response(e)

    if not db.session.get(EducationalLesson, lesson_id):
        return jsonify({'error': 'Lesson not found'}), 404

    user_id = current_user_id()
    try:
        progress = UserProgress.query.filter_by(user_id=user_id, lesson_id=lesson_id).first()
        if not progress:
            progress = UserProgress(user_id=user_id, lesson_id=lesson_id)
            db.session.add(progress)

        progress.completed = True
        progress.completed_at = datetime.utcnow()
        progress.time_spent = payload.time_spent
        db.session.commit()

        return jsonify(progress.to_dict())
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error marking lesson {lesson_id} complete: {str(e)}')
        return jsonify({'error': 'Failed to mark lesson complete'}), 500
