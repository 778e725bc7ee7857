"""
Flask application factory for the storefront home page.

It creates the app, wires the page composer, registers the home blueprint and
maps load failures to whole-page error responses.
"""

from __future__ import annotations

from typing import Optional

from flask import Flask

from ..application.use_cases.compose_home_page import ComposeHomePageUseCase
from ..domain.errors import FatalLoadError
from ..domain.interfaces import StorefrontClient
from ..infrastructure.logging import get_logger
from ..infrastructure.storefront.client import StorefrontGraphQLClient
from .routes import COMPOSER_EXTENSION, home_bp

logger = get_logger("storefront_home.web")

_ERROR_PAGE = "<!DOCTYPE html><html><body><h1>{status}</h1><p>{message}</p></body></html>"


def create_app(
    client: Optional[StorefrontClient] = None,
    composer: Optional[ComposeHomePageUseCase] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        client: Storefront client; defaults to the GraphQL adapter configured from env/.env.
        composer: Pre-built page composer (tests); built from ``client`` when omitted.

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.extensions[COMPOSER_EXTENSION] = composer or ComposeHomePageUseCase(client or StorefrontGraphQLClient())
    app.register_blueprint(home_bp)
    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """
    Register error handlers for the app.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(FatalLoadError)
    def critical_data_unavailable(error):
        logger.error("Home page failed | error=%s", error)
        return _ERROR_PAGE.format(status=500, message="This page is temporarily unavailable."), 500

    @app.errorhandler(404)
    def not_found(error):
        return _ERROR_PAGE.format(status=404, message="Page not found."), 404
