import os

import click
from flask import Flask, jsonify
from app.config import Config


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False

    # Initialize extensions
    from app.extensions import db, jwt, swagger
    db.init_app(app)
    jwt.init_app(app)

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Register blueprints
    from auth import auth_bp
    from incidents import incidents_bp, reports_bp
    from ai import ai_bp
    from education import education_bp
    from greyrock import greyrock_bp
    from boundaries import boundaries_bp
    from subscriptions import subscriptions_bp
    from admin import admin_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(incidents_bp, url_prefix='/api/incidents')
    app.register_blueprint(reports_bp, url_prefix='/api')
    app.register_blueprint(ai_bp, url_prefix='/api')
    app.register_blueprint(education_bp, url_prefix='/api/educational')
    app.register_blueprint(greyrock_bp, url_prefix='/api/greyrock')
    app.register_blueprint(boundaries_bp, url_prefix='/api/boundaries')
    app.register_blueprint(subscriptions_bp, url_prefix='/api/subscription')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    # Initialize Swagger
    swagger.init_app(app)

    register_error_handlers(app)
    register_commands(app)

    # Create tables and the default plans
    from subscriptions.utils import ensure_default_plans
    with app.app_context():
        db.create_all()
        if ensure_default_plans():
            db.session.commit()

    # Simple root endpoint for quick check
    @app.route('/')
    def index():
        return {'message': 'Haven Journal API is running', 'docs': '/apidocs/'}

    return app


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def too_large(e):
        limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        return jsonify({'error': f'Upload exceeds the {limit_mb} MB limit'}), 413

    @app.errorhandler(500)
    def internal_error(e):
        from app.extensions import db
        db.session.rollback()
        app.logger.error(f'Unhandled error: {str(e)}')
        return jsonify({'error': 'Internal server error'}), 500


def register_commands(app):
    from app.extensions import db

    @app.cli.command('seed')
    def seed_command():
        """Load default lessons, scenarios, boundary templates and plans."""
        from app.seed import seed_database
        counts = seed_database()
        for table, added in counts.items():
            click.echo(f'{table}: {added} added')

    @app.cli.command('make-admin')
    @click.argument('username')
    def make_admin_command(username):
        """Grant admin rights to an existing user."""
        from auth.models import User
        user = User.query.filter_by(username=username).first()
        if not user:
            raise click.ClickException(f'No user named {username}')
        user.is_admin = True
        db.session.commit()
        click.echo(f'{username} is now an admin')
