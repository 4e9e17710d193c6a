#!/usr/bin/env python3
"""
Trade Journal Web App
A Flask API over the Supabase trade repository plus the cumulative P/L chart
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify

from config.constants import VERSION
from config.settings import Settings, get_settings
from data.repositories.base_repository import BaseTradeRepository
from data.repositories.repository_factory import RepositoryFactory, set_trade_repository
from web_dashboard.log_handler import setup_logging
from web_dashboard.routes.trade_routes import trades_bp
from web_dashboard.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def create_app(repository: Optional[BaseTradeRepository] = None,
               settings: Optional[Settings] = None,
               configure_logging: bool = True) -> Flask:
    """Build the Flask app.

    Args:
        repository: Trade repository to serve; built from settings with a
            SupabaseClient (and installed as the global repository) when omitted
        settings: Settings for logging and display currency (global settings by default)
        configure_logging: Attach the file log handler
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_logging(log_config=settings.get_logging_config())

    app = Flask(__name__)
    app.secret_key = os.getenv("FLASK_SECRET_KEY", "dev-secret-key-change-this")
    if repository is None:
        client = SupabaseClient(settings=settings)
        repository = RepositoryFactory.create_from_settings(settings, client=client.supabase)
        set_trade_repository(repository)

    app.config['TRADE_REPOSITORY'] = repository
    app.config['DISPLAY_CURRENCY'] = settings.get_display_currency()

    app.register_blueprint(trades_bp)

    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok", "version": VERSION})

    logger.info(f"Trade journal app created (repository: {type(app.config['TRADE_REPOSITORY']).__name__})")
    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.getenv("PORT", 5000))
    app.run(debug=get_settings().is_development_mode(), host='0.0.0.0', port=port)
