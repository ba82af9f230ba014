"""API response helper functions."""
import io

from flask import jsonify, send_file


def success_response(data=None, message=None):
    """Return a successful API response."""
    response = {"status": "ok"}
    if data is not None:
        response["data"] = data
    if message is not None:
        response["message"] = message
    return jsonify(response), 200


def error_response(message, status_code=400):
    """Return an error API response."""
    return jsonify({"status": "error", "message": message}), status_code


def zip_response(zip_bytes, filename):
    """Return a zip archive as a file download."""
    buffer = io.BytesIO(zip_bytes)
    buffer.seek(0)
    return send_file(
        buffer,
        mimetype='application/zip',
        as_attachment=True,
        download_name=filename
    )
