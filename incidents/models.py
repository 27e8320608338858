from datetime import datetime
from app.extensions import db

BEHAVIOR_TYPES = (
    'gaslighting',
    'love-bombing',
    'triangulation',
    'silent-treatment',
    'projection',
    'emotional-manipulation',
    'financial-abuse',
    'isolation',
    'verbal-abuse',
    'other',
)

MOOD_OPTIONS = ('calm', 'happy', 'anxious', 'sad', 'angry', 'confused')

class Incident(db.Model):
    """A single logged entry describing an abusive or manipulative event."""
    __tablename__ = 'incidents'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.Time, nullable=False)
    behavior_type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)
    feelings = db.Column(db.Text, nullable=True)
    impact = db.Column(db.Text, nullable=True)
    mood_before = db.Column(db.String(20), nullable=True)
    mood_after = db.Column(db.String(20), nullable=True)
    safety_rating = db.Column(db.Integer, nullable=True)
    transcription = db.Column(db.Text, nullable=True)
    photos = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    audio_recordings = db.relationship(
        'AudioRecording', backref='incident', lazy=True,
        cascade='all, delete-orphan', order_by='AudioRecording.timestamp.desc()'
    )

    def to_dict(self):
        """Return incident data as dictionary."""
        return {
            'id': self.id,
            'userId': self.user_id,
            'date': self.date.isoformat(),
            'time': self.time.strftime('%H:%M'),
            'behaviorType': self.behavior_type,
            'description': self.description,
            'feelings': self.feelings,
            'impact': self.impact,
            'moodBefore': self.mood_before,
            'moodAfter': self.mood_after,
            'safetyRating': self.safety_rating,
            'transcription': self.transcription,
            'photos': self.photos or [],
            'audioRecordings': [recording.to_dict() for recording in self.audio_recordings],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Incident {self.id} {self.behavior_type}>'

class AudioRecording(db.Model):
    """Audio clip attached to an incident; deleted along with it."""
    __tablename__ = 'audio_recordings'

    id = db.Column(db.Integer, primary_key=True)
    incident_id = db.Column(db.Integer, db.ForeignKey('incidents.id'), nullable=False, index=True)
    filename = db.Column(db.String(255), nullable=False)
    file_path = db.Column(db.String(500), nullable=True)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    transcription = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        """Return recording metadata as dictionary."""
        return {
            'id': self.id,
            'incidentId': self.incident_id,
            'filename': self.filename,
            'duration': self.duration,
            'transcription': self.transcription,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }

    def __repr__(self):
        return f'<AudioRecording {self.filename}>'
