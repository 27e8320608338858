import os
import uuid
from datetime import date
from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from pydantic import ValidationError
from werkzeug.utils import secure_filename
from app.extensions import db
from app.utils import current_user_id, parse_body, validation_error_response
from auth.models import User
from subscriptions.utils import check_incident_limit
from .models import Incident, AudioRecording
from .schemas import IncidentCreate, IncidentUpdate, AudioRecordingCreate, incident_columns

from . import incidents_bp

ALLOWED_EXTENSIONS = {'wav', 'mp3', 'm4a', 'ogg', 'webm'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS

def remove_stored_file(path):
    if path and os.path.exists(path):
        try:
            os.remove(path)
        except OSError as e:
            current_app.logger.warning(f'Could not remove audio file {path}: {str(e)}')

def get_owned_incident(incident_id):
    return Incident.query.filter_by(id=incident_id, user_id=current_user_id()).first()

INCIDENT_BODY = {
    'name': 'body',
    'in': 'body',
    'required': True,
    'schema': {
        'type': 'object',
        'properties': {
            'date': {'type': 'string', 'example': '2026-10-18'},
            'time': {'type': 'string', 'example': '19:45'},
            'behaviorType': {'type': 'string', 'example': 'gaslighting'},
            'description': {'type': 'string'},
            'feelings': {'type': 'string'},
            'impact': {'type': 'string'},
            'moodBefore': {'type': 'string', 'example': 'calm'},
            'moodAfter': {'type': 'string', 'example': 'confused'},
            'safetyRating': {'type': 'integer', 'example': 3},
            'transcription': {'type': 'string'},
            'photos': {'type': 'array', 'items': {'type': 'object'}}
        }
    }
}

@incidents_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Incidents'],
    'description': 'List the current user\'s incidents, newest first',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'behaviorType', 'in': 'query', 'type': 'string'},
        {'name': 'from', 'in': 'query', 'type': 'string', 'format': 'date'},
        {'name': 'to', 'in': 'query', 'type': 'string', 'format': 'date'}
    ],
    'responses': {
        '200': {
            'description': 'List of incidents',
            'schema': {'type': 'array', 'items': {'$ref': '#/definitions/Incident'}}
        },
        '400': {'description': 'Invalid filter'},
        '401': {'description': 'Unauthorized'}
    }
})
def get_incidents():
    """List incidents for the current user."""
    query = Incident.query.filter_by(user_id=current_user_id())

    behavior_type = request.args.get('behaviorType')
    if behavior_type:
        query = query.filter(Incident.behavior_type == behavior_type)

    bounds = {}
    for param in ('from', 'to'):
        value = request.args.get(param)
        if not value:
            continue
        try:
            bounds[param] = date.fromisoformat(value)
        except ValueError:
            return jsonify({
                'error': 'Validation failed',
                'details': [{'field': param, 'message': 'Expected a date in YYYY-MM-DD format'}]
            }), 400
    if 'from' in bounds:
        query = query.filter(Incident.date >= bounds['from'])
    if 'to' in bounds:
        query = query.filter(Incident.date <= bounds['to'])

    incidents = query.order_by(Incident.created_at.desc(), Incident.id.desc()).all()
    return jsonify([incident.to_dict() for incident in incidents])

@incidents_bp.route('/<int:incident_id>', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Incidents'],
    'description': 'Get a specific incident',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '200': {'description': 'Incident details', 'schema': {'$ref': '#/definitions/Incident'}},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Incident not found'}
    }
})
def get_incident(incident_id):
    """Get a specific incident by ID."""
    incident = get_owned_incident(incident_id)

    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    return jsonify(incident.to_dict())

@incidents_bp.route('', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Incidents'],
    'description': 'Log a new incident',
    'security': [{'Bearer': []}],
    'parameters': [INCIDENT_BODY],
    'responses': {
        '201': {'description': 'Incident created', 'schema': {'$ref': '#/definitions/Incident'}},
        '400': {'description': 'Validation failed', 'schema': {'$ref': '#/definitions/ValidationError'}},
        '401': {'description': 'Unauthorized'},
        '403': {'description': 'Monthly incident limit reached'}
    }
})
def create_incident():
    """Create a new incident for the current user."""
    try:
        payload = parse_body(IncidentCreate)
    except ValidationError as e:
        return validation_error_response(e)

    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({'error': 'User not found'}), 404

    allowed, usage = check_incident_limit(user)
    if not allowed:
        return jsonify({
            'error': 'Monthly incident limit reached for your plan',
            'usage': usage
        }), 403

    try:
        incident = Incident(user_id=user.id, **incident_columns(payload))
        db.session.add(incident)
        db.session.commit()
        return jsonify(incident.to_dict()), 201

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating incident: {str(e)}')
        return jsonify({'error': 'Failed to create incident'}), 500

@incidents_bp.route('/<int:incident_id>', methods=['PATCH'])
@jwt_required()
@swag_from({
    'tags': ['Incidents'],
    'description': 'Update some fields of an incident',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True},
        dict(INCIDENT_BODY, required=False)
    ],
    'responses': {
        '200': {'description': 'Updated incident', 'schema': {'$ref': '#/definitions/Incident'}},
        '400': {'description': 'Validation failed', 'schema': {'$ref': '#/definitions/ValidationError'}},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Incident not found'}
    }
})
def update_incident(incident_id):
    """Apply a partial update to an incident."""
    try:
        payload = parse_body(IncidentUpdate)
    except ValidationError as e:
        return validation_error_response(e)

    incident = get_owned_incident(incident_id)
    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    try:
        for column, value in incident_columns(payload, exclude_unset=True).items():
            setattr(incident, column, value)
        db.session.commit()
        return jsonify(incident.to_dict())

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error updating incident {incident_id}: {str(e)}')
        return jsonify({'error': 'Failed to update incident'}), 500

@incidents_bp.route('/<int:incident_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Incidents'],
    'description': 'Delete an incident together with its audio recordings',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '204': {'description': 'Incident deleted'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Incident not found'}
    }
})
def delete_incident(incident_id):
    """Delete an incident."""
    incident = get_owned_incident(incident_id)

    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    try:
        stored_files = [recording.file_path for recording in incident.audio_recordings]

        db.session.delete(incident)
        db.session.commit()

        for path in stored_files:
            remove_stored_file(path)

        return '', 204
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting incident {incident_id}: {str(e)}')
        return jsonify({'error': 'Failed to delete incident'}), 500

@incidents_bp.route('/<int:incident_id>/audio', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Audio'],
    'description': 'List audio recordings attached to an incident',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '200': {
            'description': 'Recordings, newest first',
            'schema': {'type': 'array', 'items': {'$ref': '#/definitions/AudioRecording'}}
        },
        '404': {'description': 'Incident not found'}
    }
})
def get_audio_recordings(incident_id):
    incident = get_owned_incident(incident_id)
    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    return jsonify([recording.to_dict() for recording in incident.audio_recordings])

@incidents_bp.route('/<int:incident_id>/audio', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['Audio'],
    'description': 'Attach an audio recording, either as JSON metadata or as a multipart upload',
    'security': [{'Bearer': []}],
    'consumes': ['application/json', 'multipart/form-data'],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True},
        {'name': 'audio', 'in': 'formData', 'type': 'file', 'description': 'Audio file'},
        {'name': 'duration', 'in': 'formData', 'type': 'integer', 'description': 'Length in seconds'},
        {'name': 'transcription', 'in': 'formData', 'type': 'string'}
    ],
    'responses': {
        '201': {'description': 'Recording attached', 'schema': {'$ref': '#/definitions/AudioRecording'}},
        '400': {'description': 'Validation failed'},
        '404': {'description': 'Incident not found'}
    }
})
def create_audio_recording(incident_id):
    """Attach an audio recording to an incident."""
    incident = get_owned_incident(incident_id)
    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    audio_file = request.files.get('audio')
    file_path = None
    try:
        if audio_file is not None:
            if audio_file.filename == '':
                return jsonify({'error': 'No selected file'}), 400
            if not allowed_file(audio_file.filename):
                return jsonify({'error': 'File type not allowed'}), 400
            payload = AudioRecordingCreate.model_validate({
                'filename': audio_file.filename,
                'duration': request.form.get('duration'),
                'transcription': request.form.get('transcription')
            })
        else:
            payload = parse_body(AudioRecordingCreate)
    except ValidationError as e:
        return validation_error_response(e)

    try:
        if audio_file is not None:
            upload_folder = current_app.config['UPLOAD_FOLDER']
            os.makedirs(upload_folder, exist_ok=True)
            file_path = os.path.join(
                upload_folder, f'{uuid.uuid4().hex}_{secure_filename(audio_file.filename)}'
            )
            audio_file.save(file_path)

        recording = AudioRecording(
            incident_id=incident.id,
            filename=payload.filename,
            file_path=file_path,
            duration=payload.duration,
            transcription=payload.transcription
        )
        db.session.add(recording)
        db.session.commit()
        return jsonify(recording.to_dict()), 201

    except Exception as e:
        db.session.rollback()
        remove_stored_file(file_path)
        current_app.logger.error(f'Error saving audio for incident {incident_id}: {str(e)}')
        return jsonify({'error': 'Failed to create audio recording'}), 500

@incidents_bp.route('/<int:incident_id>/audio/<int:recording_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Audio'],
    'description': 'Delete an audio recording',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'incident_id', 'in': 'path', 'type': 'integer', 'required': True},
        {'name': 'recording_id', 'in': 'path', 'type': 'integer', 'required': True}
    ],
    'responses': {
        '204': {'description': 'Recording deleted'},
        '404': {'description': 'Incident or recording not found'}
    }
})
def delete_audio_recording(incident_id, recording_id):
    incident = get_owned_incident(incident_id)
    if not incident:
        return jsonify({'error': 'Incident not found'}), 404

    recording = AudioRecording.query.filter_by(id=recording_id, incident_id=incident.id).first()
    if not recording:
        return jsonify({'error': 'Audio recording not found'}), 404

    try:
        file_path = recording.file_path
        db.session.delete(recording)
        db.session.commit()
        remove_stored_file(file_path)
        return '', 204
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error deleting audio recording {recording_id}: {str(e)}')
        return jsonify({'error': 'Failed to delete audio recording'}), 500
