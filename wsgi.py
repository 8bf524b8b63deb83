"""WSGI entry point for the campground booking API (gunicorn wsgi:application)."""
import os
from app import create_app

application = create_app(os.environ.get('FLASK_ENV', 'production'))
