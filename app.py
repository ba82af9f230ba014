from flask import Flask
from flask_cors import CORS

from config import Config


def create_app(config_class=Config):
    """Application factory for creating Flask app instances."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure CORS - allow same origin by default
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Import and register blueprints inside factory to avoid circular imports
    from web.routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=5001)
