from flask import Blueprint

# Create blueprint
greyrock_bp = Blueprint('greyrock', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
