import logging
import traceback

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_migrate import Migrate
from flasgger import Swagger
from werkzeug.exceptions import HTTPException

from config import get_config
from common.database import db
from common.decorators import check_rate_limit
from common.errors import APIError
from controllers.intake_controller import IntakePipeline
from services.email_service import EmailService
from services.slack_service import SlackService
import models  # noqa: F401  register models with SQLAlchemy

from routes.contact_routes import contact_bp
from routes.newsletter_routes import newsletter_bp
from routes.waitlist_routes import waitlist_bp
from routes.slack_routes import slack_bp
from routes.health_routes import health_bp


SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'no-referrer',
    'Cross-Origin-Resource-Policy': 'same-origin',
}


def add_headers(response):
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='[%(levelname)s] %(asctime)s %(name)s: %(message)s',
    )
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))


def register_error_handlers(app):
    production = app.config.get('ENVIRONMENT') == 'production'

    @app.errorhandler(APIError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code == 404:
            return jsonify({
                'success': False,
                'error': 'Endpoint not found',
                'path': request.path,
            }), 404
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_error(error):
        app.logger.error(
            f"Error: {str(error)} [{request.method} {request.path}]\n{traceback.format_exc()}"
        )
        response = {
            'success': False,
            'error': 'An error occurred' if production else str(error),
        }
        if not production:
            response['stack'] = traceback.format_exc()
        return jsonify(response), 500


def create_app(config_name=None):
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    configure_logging(app)

    # Configure Swagger
    swagger_config = {
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
        "specs_route": "/docs"
    }

    swagger_template = {
        "swagger": "2.0",
        "info": {
            "title": "Submission Intake API",
            "description": "Contact form, newsletter and waitlist intake with email and Slack notifications",
            "version": "1.0.0",
        },
    }

    Swagger(app, config=swagger_config, template=swagger_template)

    CORS(app,
         resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}},
         supports_credentials=True,
         methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"],
         max_age=3600)

    # Initialize extensions
    db.init_app(app)
    Migrate(app, db)

    # Notification adapters are built once from config and shared by every request
    email_service = EmailService.from_config(app.config)
    slack_service = SlackService.from_config(app.config)
    app.extensions['email_service'] = email_service
    app.extensions['slack_service'] = slack_service
    app.extensions['intake_pipeline'] = IntakePipeline(email_service, slack_service)

    # Register blueprints
    app.register_blueprint(contact_bp, url_prefix='/api/contact')
    app.register_blueprint(newsletter_bp, url_prefix='/api/newsletter')
    app.register_blueprint(waitlist_bp, url_prefix='/api/waitlist')
    app.register_blueprint(slack_bp, url_prefix='/api/slack')
    app.register_blueprint(health_bp, url_prefix='/api/health')

    @app.before_request
    def before_request():
        app.logger.info(f"{request.method} {request.path}")
        if request.path.startswith('/api/'):
            check_rate_limit(
                'rl:api',
                limit=app.config['RATE_LIMIT_MAX'],
                per=app.config['RATE_LIMIT_WINDOW_SECONDS'],
            )

    # Add security headers to every response
    app.after_request(add_headers)

    register_error_handlers(app)

    @app.cli.command('verify-email')
    def verify_email():
        """Check that the configured email transport accepts a connection."""
        if app.extensions['email_service'].verify_connection():
            click.echo("Email transport OK")
        else:
            click.echo("Email transport not configured or unreachable")

    return app


if __name__ == "__main__":
    app = create_app()
    app.logger.info(f"Environment: {app.config['ENVIRONMENT']}")
    app.run(host='0.0.0.0', port=app.config['PORT'])
