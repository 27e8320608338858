from flask import Blueprint

# Create blueprints
incidents_bp = Blueprint('incidents', __name__)
reports_bp = Blueprint('reports', __name__)

# Import routes after creating the blueprints to avoid circular imports
from . import routes, reports  # noqa
