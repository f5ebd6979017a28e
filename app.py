# app.py
import logging

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from dotenv import load_dotenv
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db
from services.errors import ServiceError

# ---- blueprints ----
from routes.auth import auth_bp
from routes.plans import plans_bp
from routes.subscriptions import subscriptions_bp
from routes.courses import courses_bp
from routes.events import events_bp
from routes.career import career_bp
from routes.me import bp_me
from routes.content import content_bp
from routes.meta import meta_bp
from routes.dashboard import dashboard_bp
from routes.media_public import media_public_bp
from routes.upload import upload_bp

load_dotenv()


def _register_jwt_errors(jwt: JWTManager):
    """Token problems get the same {"error": ...} envelope as everything else."""

    @jwt.unauthorized_loader
    def _missing(reason):
        return jsonify({"error": "Authentication required", "details": [{"field": "Authorization", "message": reason}]}), 401

    @jwt.invalid_token_loader
    def _invalid(reason):
        return jsonify({"error": "Invalid token", "details": [{"field": "Authorization", "message": reason}]}), 401

    @jwt.expired_token_loader
    def _expired(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.revoked_token_loader
    def _revoked(jwt_header, jwt_payload):
        return jsonify({"error": "Token has been revoked"}), 401

    @jwt.needs_fresh_token_loader
    def _not_fresh(jwt_header, jwt_payload):
        return jsonify({"error": "Fresh token required"}), 401

    @jwt.user_lookup_error_loader
    def _lookup(jwt_header, jwt_payload):
        return jsonify({"error": "Unknown user"}), 401


def _register_error_handlers(app: Flask):

    @app.errorhandler(ServiceError)
    def _service_error(e: ServiceError):
        if e.status_code >= 500:
            app.logger.error("service error: %s", e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        app.logger.exception("unhandled error")
        db.session.rollback()
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # ---- extensions ----
    db.init_app(app)
    # make sure every table is on the metadata before create_all / migrate
    from models import user, plan, course, event, profile, career, content  # noqa: F401

    jwt = JWTManager(app)
    _register_jwt_errors(jwt)
    Migrate(app, db)

    # ---- CORS ----
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"],
                "supports_credentials": True,
                "allow_headers": ["Content-Type", "Authorization", "X-Career-Token"],
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            }
        },
    )

    # ---- blueprints ----
    app.register_blueprint(auth_bp)
    app.register_blueprint(plans_bp)
    app.register_blueprint(subscriptions_bp)
    app.register_blueprint(courses_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(career_bp)
    app.register_blueprint(bp_me)
    app.register_blueprint(content_bp)
    app.register_blueprint(meta_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(media_public_bp)
    app.register_blueprint(upload_bp)

    _register_error_handlers(app)

    # ---- health check ----
    @app.get("/")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
