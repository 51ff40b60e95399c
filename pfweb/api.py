import logging
import os

from flask import Flask, jsonify, request
from passforge.generator import (
    MAX_LENGTH,
    MIN_LENGTH,
    SYMBOLS,
    GenerationRequest,
    PasswordOptionsError,
    check_symbols,
    generate,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["PASSWORD_SYMBOLS"] = check_symbols(os.getenv("PASSFORGE_SYMBOLS") or SYMBOLS)


def _error(message, code, status):
    return jsonify({"error": message, "code": code}), status


@app.route('/')
def home():
    return jsonify({
        "message": "PassForge API is running"
    })


@app.route('/api/defaults', methods=['GET'])
def defaults_route():
    body = GenerationRequest().to_json()
    body.update({"minLength": MIN_LENGTH, "maxLength": MAX_LENGTH})
    return jsonify(body)


@app.route('/api/generate-password', methods=['POST'])
def generate_route():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("Request body must be a JSON object", PasswordOptionsError.code, 400)

    try:
        options = GenerationRequest.from_json(data)
        password = generate(options, symbols=app.config["PASSWORD_SYMBOLS"])
    except PasswordOptionsError as e:
        return _error(str(e), e.code, 400)
    except Exception:
        logger.exception("Password generation error")
        return jsonify({"error": "Internal server error"}), 500
    return jsonify({"password": password})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
