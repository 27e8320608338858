from flask import Blueprint

# Create blueprint
ai_bp = Blueprint('ai', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
