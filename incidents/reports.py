import csv
import io
from datetime import date
from flask import Response, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from sqlalchemy import func
from app.extensions import db
from app.utils import current_user_id, feature_required
from .models import Incident, AudioRecording
from .stats import PERIODS, compute_incident_stats, period_start

from . import reports_bp

CSV_COLUMNS = (
    ('id', 'ID'),
    ('date', 'Date'),
    ('time', 'Time'),
    ('behaviorType', 'Behavior Type'),
    ('description', 'Description'),
    ('feelings', 'Feelings'),
    ('impact', 'Impact'),
    ('moodBefore', 'Mood Before'),
    ('moodAfter', 'Mood After'),
    ('safetyRating', 'Safety Rating'),
    ('transcription', 'Transcription'),
    ('createdAt', 'Logged At'),
)

def user_incidents(user_id):
    return Incident.query.filter_by(user_id=user_id)\
        .order_by(Incident.date.desc(), Incident.time.desc())\
        .all()

@reports_bp.route('/stats', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Statistics'],
    'description': 'Dashboard statistics for the current user',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'period',
        'in': 'query',
        'type': 'string',
        'enum': list(PERIODS),
        'default': 'all-time'
    }],
    'responses': {
        '200': {
            'description': 'Aggregated incident statistics',
            'schema': {
                'type': 'object',
                'properties': {
                    'total': {'type': 'integer'},
                    'thisMonth': {'type': 'integer'},
                    'avgSafetyRating': {'type': 'number'},
                    'ratedCount': {'type': 'integer'},
                    'totalAudioDuration': {'type': 'integer'},
                    'behaviorTypeDistribution': {'type': 'object'},
                    'weeklyPattern': {'type': 'object'},
                    'monthlyTrend': {'type': 'object'},
                    'moodShift': {'type': 'object'}
                }
            }
        },
        '400': {'description': 'Unknown period'},
        '401': {'description': 'Unauthorized'}
    }
})
def get_stats():
    """Aggregate the current user's incidents for the dashboard."""
    user_id = current_user_id()
    period = request.args.get('period', 'all-time')
    today = date.today()

    try:
        start = period_start(period, today)
    except ValueError:
        return jsonify({
            'error': 'Validation failed',
            'details': [{'field': 'period', 'message': f"Must be one of: {', '.join(PERIODS)}"}]
        }), 400

    try:
        query = Incident.query.filter_by(user_id=user_id)
        if start is not None:
            query = query.filter(Incident.date >= start)
        incidents = query.all()

        durations = dict(
            db.session.query(AudioRecording.incident_id, func.sum(AudioRecording.duration))
            .join(Incident)
            .filter(Incident.user_id == user_id)
            .group_by(AudioRecording.incident_id)
            .all()
        )

        stats = compute_incident_stats(incidents, durations, today)
        stats['period'] = period
        return jsonify(stats)

    except Exception as e:
        current_app.logger.error(f'Error computing statistics: {str(e)}')
        return jsonify({'error': 'Failed to fetch statistics'}), 500

@reports_bp.route('/export/csv', methods=['GET'])
@feature_required('exportReports')
@swag_from({
    'tags': ['Export'],
    'description': 'Download all incidents as CSV',
    'security': [{'Bearer': []}],
    'produces': ['text/csv'],
    'responses': {
        '200': {'description': 'CSV file attachment'},
        '401': {'description': 'Unauthorized'},
        '403': {'description': 'Plan does not include exports'}
    }
})
def export_csv():
    """Export the current user's incidents as a CSV attachment."""
    try:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow([label for _, label in CSV_COLUMNS])
        for incident in user_incidents(current_user_id()):
            row = incident.to_dict()
            writer.writerow(['' if row[key] is None else row[key] for key, _ in CSV_COLUMNS])

        filename = f'incidents-{date.today().isoformat()}.csv'
        return Response(
            buffer.getvalue(),
            mimetype='text/csv',
            headers={'Content-Disposition': f'attachment; filename={filename}'}
        )
    except Exception as e:
        current_app.logger.error(f'Error exporting CSV: {str(e)}')
        return jsonify({'error': 'Failed to export CSV'}), 500

@reports_bp.route('/export/pdf', methods=['GET'])
@feature_required('exportReports')
@swag_from({
    'tags': ['Export'],
    'description': 'PDF report (not generated yet; returns the number of incidents that would be included)',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {
            'description': 'Export summary',
            'schema': {
                'type': 'object',
                'properties': {
                    'message': {'type': 'string'},
                    'incidents': {'type': 'integer'}
                }
            }
        },
        '401': {'description': 'Unauthorized'},
        '403': {'description': 'Plan does not include exports'}
    }
})
def export_pdf():
    try:
        count = Incident.query.filter_by(user_id=current_user_id()).count()
        return jsonify({
            'message': 'PDF export is not available yet',
            'incidents': count
        })
    except Exception as e:
        current_app.logger.error(f'Error exporting PDF: {str(e)}')
        return jsonify({'error': 'Failed to export PDF'}), 500
