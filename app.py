import logging

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config, LoaderConfig


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config_overrides=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config["LOG_LEVEL"])
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)
    # Keep column order in JSON payloads
    app.json.sort_keys = False

    # Uploads live in memory only, one entry per dataset id
    from models import DatasetStore
    from parsers.file_parser import DatasetLoader
    app.extensions["dataset_store"] = DatasetStore(max_datasets=app.config["MAX_DATASETS"])
    app.extensions["dataset_loader"] = DatasetLoader(LoaderConfig.from_mapping(app.config))

    # Register routes
    from routes import register_routes
    register_routes(app)

    logging.info(f"Upload limit set to {app.config['MAX_CONTENT_LENGTH'] / (1024 * 1024):g} MB")
    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=5000, debug=True)
