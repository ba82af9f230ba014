"""API routes - merge endpoints."""
from flask import Blueprint, current_app, request

from gcode_post.post_processor import PostProcessError
from web.auth import authenticate, login_required, logout
from web.services.merge_service import MergeService
from web.utils.responses import success_response, error_response, zip_response

api_bp = Blueprint('api', __name__)


def _uploads():
    """Uploaded program files as (name, bytes), in upload order."""
    return [(f.filename, f.read()) for f in request.files.getlist('files')]


def _settings():
    return MergeService.parse_settings(
        request.form.get('feed_rate'),
        request.form.get('filter'),
        current_app.config.get('DEFAULT_FEED_RATE', 500.0),
    )


@api_bp.route('/login', methods=['POST'])
def login():
    """Authenticate the session when APP_PASSWORD is configured."""
    data = request.get_json(silent=True) or request.form
    if authenticate(data.get('password')):
        return success_response(message='Logged in')
    return error_response('Invalid password', 401)


@api_bp.route('/logout', methods=['POST'])
def logout_route():
    logout()
    return success_response(message='Logged out')


@api_bp.route('/analyze', methods=['POST'])
@login_required
def analyze():
    """Report the tool catalog and the groups a merge would produce."""
    try:
        settings = _settings()
        return success_response(data=MergeService.analyze(_uploads(), settings))
    except (PostProcessError, ValueError) as e:
        return error_response(str(e))


@api_bp.route('/merge', methods=['POST'])
@login_required
def merge():
    """Merge uploaded program files and download the result as a zip."""
    try:
        settings = _settings()
        zip_bytes, filename = MergeService.merge(_uploads(), settings)
    except (PostProcessError, ValueError) as e:
        return error_response(str(e))

    return zip_response(zip_bytes, filename)
