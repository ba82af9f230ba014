import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Post-processor and Flask application configuration."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')

    # Authentication
    APP_PASSWORD = os.environ.get('APP_PASSWORD')  # None means no auth required
    SESSION_TIMEOUT_MINUTES = int(os.environ.get('SESSION_TIMEOUT_MINUTES', 480))  # 8 hours

    # Session security
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Uploads (bytes)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 32 * 1024 * 1024))

    # Post-processing
    DEFAULT_FEED_RATE = float(os.environ.get('GCODE_POST_DEFAULT_FEED_RATE', 500))
    PROGRAM_EXTENSION = os.environ.get('GCODE_POST_EXTENSION', '.nc')
    LOG_FILE = os.environ.get('GCODE_POST_LOG_FILE', 'gcode-post.log')
