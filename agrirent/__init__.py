import sys

from flask import Flask, jsonify
from loguru import logger
from werkzeug.exceptions import HTTPException

from .config import Config
from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.owner import bp as owner_bp
from .controllers.tools import bp as tools_bp
from .exceptions import RentalError
from .models.store import Store


def configure_logging(app):
    logger.remove()
    logger.add(sys.stderr, level=app.config["LOG_LEVEL"])
    if app.config.get("LOG_FILE"):
        logger.add(app.config["LOG_FILE"], level=app.config["LOG_LEVEL"], rotation="10 MB", compression="zip")


def register_error_handlers(app):
    @app.errorhandler(RentalError)
    def handle_rental_error(e):
        if e.status_code >= 500:
            logger.error("Request failed: {}", e.message)
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error")
        return jsonify({"error": "Unexpected server error"}), 500


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)
    Store.instance(app.config["DATA_PATH"])  # load data.pkl or start empty

    app.register_blueprint(auth_bp)
    app.register_blueprint(tools_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(owner_bp)
    register_error_handlers(app)

    return app
