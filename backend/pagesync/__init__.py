from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from .auth.hooks import role_based_hooks
from .application.pages import PageLifecycleController
from .domain.invariants.homepage import enforce_homepage_unique
from .domain.root_props import FieldMapping
from .store.sqlalchemy_store import SqlAlchemyDocumentStore
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development", *, auth_hooks=None, root_props_mapping=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # Page lifecycle
    # -------------------------------------------------
    store = SqlAlchemyDocumentStore(before_change=[enforce_homepage_unique])

    if auth_hooks is None:
        auth_hooks = role_based_hooks(
            edit_roles=app.config["PAGES_EDIT_ROLES"],
            publish_roles=app.config["PAGES_PUBLISH_ROLES"],
            delete_roles=app.config["PAGES_DELETE_ROLES"],
        )

    mappings = [FieldMapping.from_dict(m) for m in app.config["PAGES_ROOT_PROPS_MAPPING"]]
    mappings.extend(root_props_mapping or [])

    app.extensions["pagesync"] = PageLifecycleController(
        store,
        auth_hooks,
        collection=app.config["PAGES_COLLECTION"],
        root_props_mapping=mappings,
        max_limit=app.config["PAGES_MAX_LIMIT"],
    )

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/pages.yaml", methods=["GET"], endpoint="openapi_pages")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "pages_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("pages_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/pages.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Pages API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
