from __future__ import annotations

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, Optional, Sequence

from ..application.dto import RequestContext
from ..application.use_cases.compose_home_page import ComposeHomePageUseCase
from ..domain.errors import ContractError, FatalLoadError
from ..domain.interfaces import StorefrontClient
from ..domain.models import DeferredResult, PageLifecycle
from ..infrastructure.config import default_country, default_language
from ..infrastructure.logging import get_logger
from ..infrastructure.storefront.client import StorefrontGraphQLClient
from ..rendering.stream import HomePageStream
from .parsers import build_parser

logger = get_logger("storefront_home.cli")


def _resolve_context(locale: Optional[str]) -> RequestContext:
    """Resolve buyer context from an explicit --locale or the configured defaults."""
    default = RequestContext(country=default_country(), language=default_language())
    return RequestContext.from_locale(locale, default=default)


def _serialize(record: Optional[object]) -> Optional[Dict[str, Any]]:
    return asdict(record) if record is not None else None


def run(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(argv)
    client = StorefrontGraphQLClient()
    return dispatch_commands(ns, client)


def dispatch_commands(ns, client: StorefrontClient) -> int:
    """
    Dispatch a parsed command against the given storefront client.

    Args:
        ns: Parsed argparse namespace.
        client: Storefront client used by the page loaders.

    Returns:
        int: Process exit code; 2 for invalid input or a fatal page load.
    """
    if ns.cmd == "load":
        return load_page(ns, client)
    if ns.cmd == "render":
        return render_page(ns, client)
    if ns.cmd == "serve":
        return serve(ns, client)
    print(json.dumps({"status": "error", "error": f"Unknown command '{ns.cmd}'"}))
    return 2


def load_page(ns, client: StorefrontClient) -> int:
    """
    Print page data as two JSON lines.

    The critical line is printed as soon as it resolves; the deferred line
    follows when the recommended products settle (null when unavailable).
    """
    try:
        context = _resolve_context(getattr(ns, "locale", None))
    except ContractError as exc:
        print(json.dumps({"status": "error", "error": str(exc)}))
        return 2

    composer = ComposeHomePageUseCase(client, recommended_count=getattr(ns, "first", None))
    try:
        try:
            page = composer.execute(context)
        except FatalLoadError as exc:
            print(json.dumps({"status": "error", "locale": context.locale, "error": str(exc)}))
            return 2
        print(
            json.dumps(
                {
                    "status": "ok",
                    "locale": context.locale,
                    "featured_collection": _serialize(page.featured_collection),
                }
            ),
            flush=True,
        )
        outcome = page.recommended_products.result()
        products = [asdict(p) for p in outcome.products] if isinstance(outcome, DeferredResult) else None
        print(json.dumps({"recommended_products": products}), flush=True)
        return 0
    finally:
        composer.shutdown()


def render_page(ns, client: StorefrontClient) -> int:
    """Write the progressive HTML to stdout, flushing after each chunk."""
    try:
        context = _resolve_context(getattr(ns, "locale", None))
    except ContractError as exc:
        print(json.dumps({"status": "error", "error": str(exc)}), file=sys.stderr)
        return 2

    composer = ComposeHomePageUseCase(client, recommended_count=getattr(ns, "first", None))
    lifecycle = PageLifecycle()
    try:
        try:
            page = composer.execute(context, lifecycle)
        except FatalLoadError as exc:
            print(json.dumps({"status": "error", "locale": context.locale, "error": str(exc)}), file=sys.stderr)
            return 2
        for chunk in HomePageStream(page, lifecycle):
            sys.stdout.write(chunk)
            sys.stdout.flush()
        logger.info("Render completed | locale=%s | state=%s", context.locale, lifecycle.state.value)
        return 0
    finally:
        composer.shutdown()


def serve(ns, client: StorefrontClient) -> int:
    from ..web.app import create_app

    app = create_app(client=client)
    logger.info("Serving home page | host=%s | port=%d", ns.host, ns.port)
    app.run(host=ns.host, port=ns.port, debug=bool(ns.debug), threaded=True, use_reloader=False)
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
