"""
Test application factory and configuration.
"""

import pytest
from app import create_app


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['ADMIN_USER_IDS'] == {'admin-1'}

    def test_create_app_default(self):
        """Test app creation with default config."""
        app = create_app()
        assert app is not None

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without its environment."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            create_app('production')

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        blueprint_names = list(app.blueprints.keys())

        assert 'camping' in blueprint_names
        assert any(rule.rule == '/api/reservations' for rule in app.url_map.iter_rules())

    def test_app_has_extensions(self):
        """Test that extensions are initialized."""
        app = create_app('test')

        # Check login manager
        assert hasattr(app, 'login_manager')


class TestAppConfiguration:
    """Test application configuration."""

    def test_secret_key_set(self):
        """Test that secret key is configured."""
        app = create_app('test')
        assert app.config['SECRET_KEY'] is not None
        assert len(app.config['SECRET_KEY']) > 0

    def test_database_path_set(self):
        """Test that database path is configured."""
        app = create_app('test')
        assert 'DATABASE_PATH' in app.config

    def test_booking_rule_settings(self):
        app = create_app('test')
        assert app.config['TIMEZONE'] == 'Asia/Seoul'
        assert app.config['D_N_DAYS'] == 7
        assert app.config['MAX_STAY_NIGHTS'] == 30
        assert app.config['PAYMENT_DEADLINE_HOURS'] == 6

    def test_app_name_set(self):
        """Test that app name is configured."""
        app = create_app('test')
        assert app.config.get('APP_NAME') == 'Campground Booking'


class TestCLICommands:
    """Test CLI command registration."""

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')

        # Get registered CLI commands
        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'expire-pending' in commands
        assert 'resolve-season' in commands

    def test_resolve_season_command(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['resolve-season', '--at', '2026-05-04T10:00:00'])

        assert result.exit_code == 0
        assert 'OPEN' in result.output
        assert '2026-07-31' in result.output

    def test_expire_pending_command(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['expire-pending'])
        assert result.exit_code == 0
