"""Application factory and app-wide configuration."""

from typing import Optional

from flask import Flask
from flask_cors import CORS

from yieldfarm.app.api.routes import api_bp
from yieldfarm.config import AppSettings
from yieldfarm.core.ledger import Ledger
from yieldfarm.core.store import JsonFileStore, MemoryStore, StoreBackend
from yieldfarm.logging_config import setup_logging


def build_store(settings: AppSettings) -> StoreBackend:
    if settings.STORE == "memory":
        return MemoryStore(wallet_address=settings.WALLET_ADDRESS)
    store = JsonFileStore(settings.DB_PATH, wallet_address=settings.WALLET_ADDRESS)
    store.initialize()
    return store


def create_app(settings: Optional[AppSettings] = None, ledger: Optional[Ledger] = None) -> Flask:
    """Build the Flask app instance around a single ledger."""
    settings = settings or AppSettings()
    setup_logging(settings.LOG_LEVEL)

    app = Flask(__name__)
    app.config["ENVIRONMENT"] = settings.ENVIRONMENT

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.CORS_ORIGINS}},
        supports_credentials=True,
    )

    app.extensions["ledger"] = ledger or Ledger(
        build_store(settings),
        max_accounts=settings.MAX_ACCOUNTS,
    )
    app.register_blueprint(api_bp, url_prefix="/api")
    return app
