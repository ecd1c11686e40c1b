import io
import logging
import re
import sys

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from pydantic import ValidationError

# WSGIMiddleware lets Uvicorn (ASGI) serve the Flask (WSGI) app
from uvicorn.middleware.wsgi import WSGIMiddleware

import config
from exporters import create_names_pdf, csv_file_name, names_to_clipboard_text, names_to_csv
from models import NamePreferences
from name_generator import (
    CHAT_WELCOME_MESSAGE,
    CHAT_WELCOME_SUGGESTIONS,
    NAME_LIST_ADAPTER,
    chat_with_ai,
    generate_names,
)

# Configure logging
log_handlers = [logging.StreamHandler(sys.stdout)]
if config.LOG_FILE:
    log_handlers.append(logging.FileHandler(config.LOG_FILE))
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=log_handlers
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
logger.info("Flask app instance created.")
app.config['SECRET_KEY'] = config.SECRET_KEY

limiter = Limiter(
    get_remote_address,
    app=app,
    default_limits=config.DEFAULT_LIMITS,
    storage_uri=config.RATELIMIT_STORAGE_URI
)

# CORS Configuration
CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)

logger.info("CORS configured for the Flask app.")


# --- Security Manager ---
class SecurityManager:
    @staticmethod
    def contains_markup(input_string: str) -> bool:
        return bool(re.search(r'<(script|iframe|img|link|style).*?>', input_string, re.IGNORECASE))

    @staticmethod
    def contains_sql(input_string: str) -> bool:
        return bool(re.search(r'\b(SELECT|INSERT|UPDATE|DELETE|DROP)\s+', input_string, re.IGNORECASE))

    @staticmethod
    def validate_input_security(input_string: str) -> bool:
        """
        Rejects name fields carrying script tags or SQL keywords. Free-text
        chat messages only go through contains_markup, since words like
        "select" or "update" are ordinary English there.
        """
        return not (SecurityManager.contains_markup(input_string) or SecurityManager.contains_sql(input_string))


def _parse_preferences(data):
    """Returns (preferences, error_message)."""
    try:
        return NamePreferences.model_validate(data or {}), None
    except ValidationError as e:
        logger.error(f"Invalid preferences: {e}")
        return None, f"Invalid preferences: {e.errors()[0].get('msg', 'validation failed')}"


def _parse_names(data):
    """Returns (names, error_message) for the export endpoints."""
    if not isinstance(data, dict) or not isinstance(data.get('names'), list):
        return None, "Missing 'names' list for export."
    try:
        return NAME_LIST_ADAPTER.validate_python(data['names']), None
    except ValidationError as e:
        logger.error(f"Invalid names for export: {e}")
        return None, "Invalid 'names' entries for export."


# --- Flask Routes ---
@app.route('/')
def home():
    """Basic home route for health check."""
    return "Hello from AstroName AI!"


@app.route('/generate_names', methods=['POST'])
@limiter.limit("10 per minute")
async def generate_names_endpoint():
    preferences, error = _parse_preferences(request.get_json(silent=True))
    if error:
        return jsonify({"error": error}), 400

    missing = preferences.missing_required_fields()
    if missing:
        return jsonify({"error": f"Missing {', '.join(missing)} for name generation."}), 400

    for value in (preferences.father_name, preferences.mother_name):
        if not SecurityManager.validate_input_security(value):
            return jsonify({"error": "Parent names contain disallowed content."}), 400

    names = await generate_names(preferences)
    logger.info(f"Returning {len(names)} names for {preferences.father_name} and {preferences.mother_name}.")
    return jsonify({"names": [name.to_api() for name in names]}), 200


@app.route('/chat/welcome', methods=['GET'])
def chat_welcome_endpoint():
    return jsonify({"content": CHAT_WELCOME_MESSAGE, "suggestions": CHAT_WELCOME_SUGGESTIONS}), 200


@app.route('/chat', methods=['POST'])
@limiter.limit("30 per minute")
async def chat_endpoint():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        logger.error("Chat request body is not a JSON object.")
        return jsonify({"error": "Chat request body must be a JSON object."}), 400
    message = data.get('message')

    if not message or not isinstance(message, str) or not message.strip():
        logger.error(f"Chat request missing or invalid 'message': '{message}'")
        return jsonify({"error": "Missing or empty 'message' for chat."}), 400

    if SecurityManager.contains_markup(message):
        logger.warning("Chat message rejected by input security check.")
        return jsonify({"error": "Message contains disallowed content."}), 400

    preferences, error = _parse_preferences(data.get('preferences'))
    if error:
        return jsonify({"error": error}), 400

    response = await chat_with_ai(message.strip(), preferences)
    return jsonify(response.model_dump()), 200


@app.route('/export/csv', methods=['POST'])
@limiter.limit("30 per minute")
def export_csv_endpoint():
    data = request.get_json(silent=True)
    names, error = _parse_names(data)
    if error:
        return jsonify({"error": error}), 400

    csv_content = names_to_csv(names)
    return send_file(
        io.BytesIO(csv_content.encode('utf-8')),
        mimetype='text/csv',
        as_attachment=True,
        download_name=csv_file_name(data.get('fileName'))
    )


@app.route('/export/text', methods=['POST'])
@limiter.limit("30 per minute")
def export_text_endpoint():
    names, error = _parse_names(request.get_json(silent=True))
    if error:
        return jsonify({"error": error}), 400
    return jsonify({"text": names_to_clipboard_text(names)}), 200


@app.route('/export/pdf', methods=['POST'])
@limiter.limit("5 per minute")
def export_pdf_endpoint():
    data = request.get_json(silent=True)
    names, error = _parse_names(data)
    if error:
        return jsonify({"error": error}), 400

    try:
        pdf_bytes = create_names_pdf(names, title=data.get('title') or "Your Baby Name Shortlist")
    except Exception as e:
        logger.error(f"Error generating PDF shortlist: {e}", exc_info=True)
        return jsonify({"error": f"Failed to generate PDF shortlist: {e}"}), 500

    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=True,
        download_name="Baby_Name_Shortlist.pdf"
    )


# Error handlers
@app.errorhandler(400)
def bad_request(error):
    logger.error(f"Bad Request: {error}")
    return jsonify({"error": "Bad Request: " + str(error.description)}), 400


@app.errorhandler(404)
def not_found(error):
    logger.error(f"Not Found: {error}")
    return jsonify({"error": "Not Found: The requested URL was not found on the server."}), 404


@app.errorhandler(500)
def internal_server_error(error):
    logger.error(f"Internal Server Error: {error}", exc_info=True)
    return jsonify({"error": "Internal Server Error: The server encountered an internal error and was unable to complete your request. Please try again later."}), 500


# This is the WSGI application that Uvicorn will serve.
# uvicorn app:asgi_app --host 0.0.0.0 --port 8000
asgi_app = WSGIMiddleware(app)

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=config.PORT)
