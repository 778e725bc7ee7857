"""
Home page routes.

This module contains the HTTP route for the storefront home page, with an
optional ``language-country`` locale prefix.
"""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response, abort, current_app, stream_with_context

from ..application.dto import RequestContext
from ..application.use_cases.compose_home_page import ComposeHomePageUseCase
from ..domain.errors import ContractError
from ..domain.models import PageLifecycle
from ..infrastructure.config import default_country, default_language
from ..rendering.stream import HomePageStream

home_bp = Blueprint("home", __name__)

COMPOSER_EXTENSION = "home_composer"


def _composer() -> ComposeHomePageUseCase:
    return current_app.extensions[COMPOSER_EXTENSION]


@home_bp.route("/")
@home_bp.route("/<locale>")
def index(locale: Optional[str] = None):
    """
    Home page.

    Blocks on critical data only; a FatalLoadError propagates to the app's
    error handler before any byte is sent. The recommended products arrive as
    a later chunk of the same response.

    Returns:
        Streamed text/html response
    """
    default = RequestContext(country=default_country(), language=default_language())
    try:
        context = RequestContext.from_locale(locale, default=default)
    except ContractError:
        abort(404)

    lifecycle = PageLifecycle()
    page = _composer().execute(context, lifecycle)
    stream = HomePageStream(page, lifecycle)
    response = Response(stream_with_context(stream), mimetype="text/html")
    response.call_on_close(stream.close)
    return response
