import os
from flask import Flask, send_from_directory
from flask_swagger_ui import get_swaggerui_blueprint
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .middleware.activity_middleware import activity_middleware
from .errors import register_error_handlers, register_jwt_handlers

OPENAPI_URL = "/openapi/hospitium.yaml"
SWAGGER_URL = "/swagger"


def create_app(config_name: str = "development", **overrides) -> Flask:
    """
    Build the Hospitium API.

    ``overrides`` are applied on top of the named config, mainly so tests
    can point ``ACTIVITY_LOG_PATH`` at a temporary file.
    """
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.config.update(overrides)

    # Extensions
    from . import models  # noqa: F401  (tables must be on the metadata before migrate/create_all)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_handlers(jwt)

    activity_middleware(app)

    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # API docs
    spec_dir = os.path.join(app.root_path, "api", "v1")

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_spec")
    def serve_openapi():
        return send_from_directory(spec_dir, "openapi.yaml", mimetype="application/yaml")

    app.register_blueprint(
        get_swaggerui_blueprint(
            SWAGGER_URL,
            OPENAPI_URL,
            config={
                "app_name": "Hospitium Research API",
                "deepLinking": True,
                "persistAuthorization": True,
            },
        ),
        url_prefix=SWAGGER_URL,
    )

    return app
