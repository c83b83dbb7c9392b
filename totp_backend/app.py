"""
FLASK APP ENTRY POINT - TOTP TILES BACKEND
==========================================

Builds the Flask app, enables CORS for the tile frontend and registers the
/api blueprint.

MAIN FEATURES
- App factory `create_app()`, configuration from totp_backend.config
- CORS enabled for frontend integration
- In-memory account list shared by all requests
- Root endpoint listing the available API endpoints
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from totp_core import __version__
from totp_core.config import configure_logging

from .config import Config, cors_origins
from .models import AccountList
from .routes import ACCOUNTS_EXTENSION, api_bp

logger = logging.getLogger(__name__)


def create_app(config_object=None) -> Flask:
    """
    Create the Flask app.

    Arguments:
        config_object: config class/object to load (default: Config)
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    configure_logging(app.config["LOG_LEVEL"])

    # Allow the tile frontend (other origin/port) to call the API
    CORS(app, origins=cors_origins(app.config["CORS_ORIGINS"]))

    app.extensions[ACCOUNTS_EXTENSION] = AccountList()
    app.register_blueprint(api_bp)

    @app.route("/", methods=["GET"])
    def index():
        """Basic info and the list of endpoints."""
        return jsonify({
            "name": "totp-tiles",
            "version": __version__,
            "endpoints": {
                "POST /api/accounts": "add an account from a provisioning URI",
                "GET /api/accounts": "list accounts",
                "DELETE /api/accounts/<id>": "remove an account",
                "GET /api/accounts/<id>/code": "current code for one account",
                "GET /api/accounts/<id>/qr": "export one account as a QR code",
                "GET /api/codes": "current codes for all accounts",
                "POST /api/parse": "validate a provisioning URI",
            },
        })

    logger.info("TOTP tiles backend ready")
    return app


def main():
    """Run the development server (HOST/PORT from the environment)."""
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"])


if __name__ == "__main__":
    main()
