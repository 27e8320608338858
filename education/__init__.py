from flask import Blueprint

# Create blueprint
education_bp = Blueprint('education', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
