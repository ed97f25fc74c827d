from flask import Flask

from .clients.kibana_client import KibanaClient
from .models.kibana import KibanaSettings
from .models.storage import StorageSettings
from .routers.files import bp as files_bp
from .routers.query import bp as query_bp

__version__ = "1.0.0"


def create_app(config_data: dict | None = None) -> Flask:
    config_data = config_data or {}
    app = Flask(__name__)

    app.config["KIBANA"] = KibanaSettings.model_validate(config_data.get("kibana", {}))
    app.config["STORAGE"] = StorageSettings.model_validate(config_data.get("storage", {}))
    app.config["MAX_CONTENT_LENGTH"] = config_data.get("max_content_length", 50 * 1024 * 1024)

    app.extensions["kibana"] = KibanaClient(app.config["KIBANA"])

    # Blueprints
    app.register_blueprint(query_bp, url_prefix="/api")
    app.register_blueprint(files_bp, url_prefix="/api")

    return app
