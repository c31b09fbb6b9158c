import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager


def create_app(config_object="backend.config.Config", mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.json.sort_keys = False

    # Core extensions
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)

    from backend.errors import register_error_handlers
    from backend.utils.db import init_app as init_db

    register_error_handlers(app)
    init_db(app, mongo_client)

    # Register blueprints
    from backend.routes.auth_routes import auth_bp
    from backend.routes.task_routes import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", message="Server is running"), 200

    return app


def _register_jwt_handlers(jwt):
    # Every token failure on a protected route is a plain 401.
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify(message="No token, authorization denied"), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify(message="Token is not valid"), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify(message="Token has expired"), 401


if __name__ == "__main__":
    # Direct run support: python -m backend.app
    create_app().run(
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8001")),
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
    )
