from __future__ import annotations

from typing import Any, Dict
import requests

from ...application.dto import RequestContext
from ...domain.errors import ContractError, StorefrontError
from ...domain.interfaces import StorefrontClient
from ...domain.models import Query
from ..config import storefront_api_token, storefront_api_url
from ..logging import get_logger
from ..timeouts import http_timeout_seconds

logger = get_logger("storefront_home.storefront")


def _error_messages(errors: Any) -> str:
    if isinstance(errors, list):
        msgs = [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]
        return "; ".join(msgs)
    return str(errors)


class StorefrontGraphQLClient(StorefrontClient):
    """Storefront adapter for the GraphQL endpoint (/api/{version}/graphql.json)."""

    def execute(self, query: Query, context: RequestContext) -> Dict[str, Any]:
        url = storefront_api_url()
        timeout = http_timeout_seconds()
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = storefront_api_token()
        if token:
            headers["X-Shopify-Storefront-Access-Token"] = token
        variables: Dict[str, object] = {"country": context.country, "language": context.language}
        variables.update(query.variables)

        logger.debug("Storefront query | name=%s | url=%s | locale=%s", query.name, url, context.locale)
        r = requests.post(
            url,
            json={"query": query.document, "variables": variables},
            headers=headers,
            timeout=timeout,
        )
        r.raise_for_status()
        try:
            body = r.json() or {}
        except ValueError as exc:
            raise ContractError(f"{query.name}: response is not JSON") from exc
        if not isinstance(body, dict):
            raise ContractError(f"{query.name}: response is not a JSON object")

        if body.get("errors"):
            raise StorefrontError(f"{query.name}: {_error_messages(body['errors'])}")
        data = body.get("data")
        if not isinstance(data, dict):
            raise ContractError(f"{query.name}: response has no 'data' object")
        return data
