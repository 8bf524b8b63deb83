"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


def _csv_env(name: str, default: str = '') -> set:
    """Parse a comma separated environment variable into a set of strings."""
    raw = os.environ.get(name, default)
    return {item.strip() for item in raw.split(',') if item.strip()}


class Config:
    """Base configuration class with common settings."""

    # Secret key for session management
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/campground.db'
    # Seconds a writer waits for the ledger lock before giving up
    DATABASE_TIMEOUT = float(os.environ.get('DATABASE_TIMEOUT', 5.0))

    # Identity collaborator: authenticated user id forwarded by the gateway
    USER_ID_HEADER = os.environ.get('USER_ID_HEADER') or 'X-User-Id'
    ADMIN_USER_IDS = _csv_env('ADMIN_USER_IDS')

    # Timezone
    TIMEZONE = 'Asia/Seoul'

    # Booking rules
    D_N_DAYS = int(os.environ.get('D_N_DAYS', 7))
    # Longest stay accepted by quotes, listings and bookings
    MAX_STAY_NIGHTS = int(os.environ.get('MAX_STAY_NIGHTS', 30))
    PAYMENT_DEADLINE_HOURS = int(os.environ.get('PAYMENT_DEADLINE_HOURS', 6))
    # Window before the deadline in which the admin overdue view warns
    PAYMENT_WARNING_HOURS = 1

    # Loyalty rewards granted on confirmation
    CONFIRM_REWARD_XP = 100
    CONFIRM_REWARD_TOKENS = 100

    # Manual wire transfer account shown after booking
    DEPOSIT_BANK_NAME = os.environ.get('DEPOSIT_BANK_NAME') or '카카오뱅크'
    DEPOSIT_ACCOUNT_NUMBER = os.environ.get('DEPOSIT_ACCOUNT_NUMBER') or '3333-00-0000000'
    DEPOSIT_ACCOUNT_HOLDER = os.environ.get('DEPOSIT_ACCOUNT_HOLDER') or '캠핑장'

    # Application settings
    APP_NAME = 'Campground Booking'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', 'instance/campground_test.db')
    SECRET_KEY = 'test-secret-key'
    ADMIN_USER_IDS = {'admin-1'}


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
