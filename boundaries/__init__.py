from flask import Blueprint

# Create blueprint
boundaries_bp = Blueprint('boundaries', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
