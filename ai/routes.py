import base64
import binascii
from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.utils import current_user_id, feature_required, request_json
from incidents.models import Incident
from . import ai_bp
from . import utils as ai_utils

@ai_bp.route('/ai/analyze', methods=['POST'])
@feature_required('aiAnalysis')
@swag_from({
    'tags': ['AI'],
    'description': 'Send a prompt to the chat-completion model and return its answer',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'prompt': {'type': 'string', 'example': 'Which behavior types fit this description: ...'}
            },
            'required': ['prompt']
        }
    }],
    'responses': {
        '200': {
            'description': 'Model answer',
            'schema': {'type': 'object', 'properties': {'analysis': {'type': 'string'}}}
        },
        '400': {'description': 'Missing prompt or AI not configured'},
        '403': {'description': 'Plan does not include AI analysis'},
        '500': {'description': 'Upstream failure'}
    }
})
def analyze():
    """Proxy a prompt to the chat-completion API."""
    data = request_json()
    prompt = data.get('prompt')

    if not isinstance(prompt, str) or not prompt.strip():
        return jsonify({
            'error': 'Validation failed',
            'details': [{'field': 'prompt', 'message': 'Prompt is required'}]
        }), 400

    try:
        return jsonify({'analysis': ai_utils.chat_completion(prompt.strip())})
    except ai_utils.AIConfigurationError:
        return jsonify({'error': 'AI API key not configured'}), 400
    except ai_utils.AIServiceError:
        return jsonify({'error': 'Failed to generate AI analysis'}), 500

@ai_bp.route('/ai/summarize', methods=['POST'])
@feature_required('aiAnalysis')
@swag_from({
    'tags': ['AI'],
    'description': 'Summarize patterns across the user\'s most recent incidents',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'schema': {
            'type': 'object',
            'properties': {'limit': {'type': 'integer', 'example': 20}}
        }
    }],
    'responses': {
        '200': {
            'description': 'Summary text',
            'schema': {
                'type': 'object',
                'properties': {
                    'summary': {'type': 'string'},
                    'incidentCount': {'type': 'integer'}
                }
            }
        },
        '400': {'description': 'No incidents to summarize or AI not configured'},
        '500': {'description': 'Upstream failure'}
    }
})
def summarize():
    data = request_json()
    limit = data.get('limit', 20)
    if not isinstance(limit, int) or isinstance(limit, bool) or not 1 <= limit <= 100:
        return jsonify({
            'error': 'Validation failed',
            'details': [{'field': 'limit', 'message': 'Limit must be an integer between 1 and 100'}]
        }), 400

    incidents = Incident.query.filter_by(user_id=current_user_id())\
        .order_by(Incident.date.desc(), Incident.time.desc())\
        .limit(limit).all()
    if not incidents:
        return jsonify({'error': 'No incidents to summarize'}), 400

    try:
        summary = ai_utils.chat_completion(ai_utils.build_summary_prompt(incidents))
    except ai_utils.AIConfigurationError:
        return jsonify({'error': 'AI API key not configured'}), 400
    except ai_utils.AIServiceError:
        return jsonify({'error': 'Failed to generate AI analysis'}), 500

    return jsonify({'summary': summary, 'incidentCount': len(incidents)})

@ai_bp.route('/transcribe', methods=['POST'])
@jwt_required()
@swag_from({
    'tags': ['AI'],
    'description': 'Transcribe a recording (multipart "audio" file or base64 "audioData")',
    'security': [{'Bearer': []}],
    'consumes': ['multipart/form-data', 'application/json'],
    'parameters': [
        {'name': 'audio', 'in': 'formData', 'type': 'file'}
    ],
    'responses': {
        '200': {
            'description': 'Transcription text',
            'schema': {'type': 'object', 'properties': {'transcription': {'type': 'string'}}}
        },
        '400': {'description': 'No audio provided'},
        '500': {'description': 'Transcription failed'}
    }
})
def transcribe():
    """Transcribe an audio recording."""
    audio_file = request.files.get('audio')
    if audio_file is not None and audio_file.filename:
        filename, audio_bytes = audio_file.filename, audio_file.read()
    else:
        data = request_json()
        encoded = data.get('audioData')
        if not isinstance(encoded, str) or not encoded:
            return jsonify({'error': 'No audio provided'}), 400
        if encoded.startswith('data:') and ',' in encoded:
            encoded = encoded.split(',', 1)[1]
        try:
            audio_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return jsonify({
                'error': 'Validation failed',
                'details': [{'field': 'audioData', 'message': 'Audio data must be base64 encoded'}]
            }), 400
        filename = data.get('filename')
        if not isinstance(filename, str) or not filename.strip():
            filename = 'recording.webm'

    try:
        return jsonify({'transcription': ai_utils.transcribe_audio(filename, audio_bytes)})
    except ai_utils.AIServiceError:
        return jsonify({'error': 'Failed to transcribe audio'}), 500
    except Exception as e:
        current_app.logger.error(f'Transcription error: {str(e)}')
        return jsonify({'error': 'Failed to transcribe audio'}), 500
