from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Optional

from ..dto import RequestContext
from ..queries import parse_recommended_products, recommended_products_query
from ...domain.interfaces import StorefrontClient
from ...domain.models import UNAVAILABLE, DeferredOutcome
from ...infrastructure.logging import get_logger

logger = get_logger("storefront_home.deferred")


class LoadDeferredDataUseCase:
    """Use-case: start the below-the-fold query and hand back its future without waiting.

    The returned future always resolves to a value: a DeferredResult, or
    UNAVAILABLE when anything on the deferred path fails. Single attempt, no retries.
    """

    def __init__(self, client: StorefrontClient, executor: Executor, first: Optional[int] = None) -> None:
        self._client = client
        self._executor = executor
        self._first = first

    def execute(self, context: RequestContext) -> "Future[DeferredOutcome]":
        try:
            return self._executor.submit(self._fetch, context)
        except RuntimeError:
            logger.exception("Recommended products not scheduled | locale=%s", context.locale)
            resolved: "Future[DeferredOutcome]" = Future()
            resolved.set_result(UNAVAILABLE)
            return resolved

    def _fetch(self, context: RequestContext) -> DeferredOutcome:
        query = recommended_products_query(self._first)
        try:
            data = self._client.execute(query, context)
            result = parse_recommended_products(data)
        except Exception:
            # Log query errors, but don't raise them so the page can still render
            logger.exception("Recommended products unavailable | locale=%s | query=%s", context.locale, query.name)
            return UNAVAILABLE
        logger.info("Deferred load completed | locale=%s | products=%d", context.locale, len(result.products))
        return result
