from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flasgger import Swagger

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()

# Configure Swagger
swagger = Swagger(
    template={
        "swagger": "2.0",
        "info": {
            "title": "Haven Journal API",
            "description": "API for documenting incidents, practicing grey-rock responses and tracking personal boundaries",
            "version": "1.0.0"
        },
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header using the Bearer scheme. Example: \"Authorization: Bearer {token}\""
            }
        },
        "security": [{"Bearer": []}],
        "schemes": ["http", "https"],
        "consumes": ["application/json"],
        "produces": ["application/json"],
        "definitions": {
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "username": {"type": "string"},
                    "email": {"type": "string", "format": "email"},
                    "isAdmin": {"type": "boolean"},
                    "subscriptionTier": {"type": "string"},
                    "subscriptionStatus": {"type": "string"},
                    "createdAt": {"type": "string", "format": "date-time"}
                }
            },
            "Incident": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "date": {"type": "string", "format": "date"},
                    "time": {"type": "string", "example": "14:30"},
                    "behaviorType": {"type": "string", "example": "gaslighting"},
                    "description": {"type": "string"},
                    "feelings": {"type": "string"},
                    "impact": {"type": "string"},
                    "moodBefore": {"type": "string"},
                    "moodAfter": {"type": "string"},
                    "safetyRating": {"type": "integer", "minimum": 1, "maximum": 5},
                    "transcription": {"type": "string"},
                    "photos": {"type": "array", "items": {"type": "object"}},
                    "audioRecordings": {"type": "array", "items": {"$ref": "#/definitions/AudioRecording"}},
                    "createdAt": {"type": "string", "format": "date-time"}
                }
            },
            "AudioRecording": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "incidentId": {"type": "integer"},
                    "filename": {"type": "string"},
                    "duration": {"type": "integer", "description": "Length in seconds"},
                    "transcription": {"type": "string"},
                    "timestamp": {"type": "string", "format": "date-time"}
                }
            },
            "ValidationError": {
                "type": "object",
                "properties": {
                    "error": {"type": "string"},
                    "details": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "field": {"type": "string"},
                                "message": {"type": "string"}
                            }
                        }
                    }
                }
            },
            "Error": {
                "type": "object",
                "properties": {
                    "error": {"type": "string", "description": "Error message"}
                }
            }
        }
    },
    config={
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/apidocs/"
    }
)
