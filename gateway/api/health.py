"""
Health API Endpoints
"""
from flask import Blueprint, current_app, jsonify

bp = Blueprint('health', __name__)


@bp.route('', methods=['GET'])
def health():
    """Health check endpoint."""
    ext = current_app.extensions.get("placeholder_dump")
    return jsonify({
        "status": "ok",
        "service": "placeholder-dump gateway",
        "emitters": ext.describe() if ext else [],
    })
