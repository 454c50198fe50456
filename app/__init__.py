"""
Pacchetto principale dell'applicazione Flask.
"""

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from config import DevConfig
from .extensions import init_extensions

def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    init_extensions(app)

    from .middleware.auth_stub import init_auth_stub
    init_auth_stub(app)

    from .services.logistics_sessions import init_logistics_sessions
    init_logistics_sessions(app)

    _register_blueprints(app)

    app.logger.info("Applicazione Flask inizializzata.")

    @app.route("/health")
    def healthcheck():
        return jsonify({"status": "ok"}), 200

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        # Anche 404/405 restituiscono il formato JSON delle API
        return jsonify({"success": False, "message": exc.description, "payload": None}), exc.code

    return app


def _register_blueprints(app: Flask) -> None:
    from .api import api_logistics_bp, api_definitions_bp, api_admin_bp

    app.register_blueprint(api_logistics_bp, url_prefix="/api/logistics")
    app.register_blueprint(api_definitions_bp, url_prefix="/api/definitions")
    app.register_blueprint(api_admin_bp, url_prefix="/api/admin")
