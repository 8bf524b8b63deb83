"""
Campground Booking - Reservation rules and booking engine
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager

# Import database functions
from database import close_db, init_db


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if config_name == 'production':
        config[config_name].validate()

    # Korean messages in JSON responses
    app.json.ensure_ascii = False

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.camping import camping_bp

    app.register_blueprint(camping_bp)


def register_error_handlers(app):
    """Register error handlers."""
    from utils.api_response import api_error
    from utils.messages import get_message

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(get_message('not_found'), status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error(str(error), status=405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(get_message('server_error'), status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('expire-pending')
    def expire_pending_command():
        """Cancel PENDING reservations past the payment deadline."""
        from blueprints.camping.services.booking_service import expire_pending_reservations

        with app.app_context():
            result = expire_pending_reservations()

        click.echo(result['message'])
        for entry in result['expired']:
            nights = ', '.join(slot['night_date'] for slot in entry['freed_nights'])
            click.echo(f"  #{entry['reservation_id']} ({entry['user_id']}): {nights}")
        if result['waitlist_subscribers']:
            click.echo(f"Waitlist subscribers to notify: {len(result['waitlist_subscribers'])}")

    @app.cli.command('resolve-season')
    @click.option('--at', 'at', default=None, help='Reference time (ISO format, local timezone)')
    def resolve_season_command(at):
        """Show the booking window resolved at a given time."""
        from blueprints.camping.services.open_window_service import get_current_window, serialize_window
        from utils.datetime_helpers import parse_local_datetime

        with app.app_context():
            now = parse_local_datetime(at) if at else None
            window = serialize_window(get_current_window(now))

        click.echo(f"Status:   {window['status']}")
        click.echo(f"Season:   {window['season_name'] or '-'} ({window['repeat_rule'] or '-'})")
        click.echo(f"Open at:  {window['open_at'] or '-'}")
        click.echo(f"Close at: {window['close_at'] or '-'}")


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/campground.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        # Service and model modules log through their own module loggers
        logging.getLogger('blueprints').addHandler(file_handler)
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('blueprints').setLevel(logging.INFO)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Campground booking startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
