from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Dict, List, Sequence

from ..dto import RequestContext
from ..queries import FEATURED_COLLECTION_QUERY, parse_featured_collection
from ...domain.errors import FatalLoadError
from ...domain.interfaces import StorefrontClient
from ...domain.models import CriticalResult, Query
from ...infrastructure.logging import get_logger

logger = get_logger("storefront_home.critical")

CRITICAL_QUERIES: Sequence[Query] = (FEATURED_COLLECTION_QUERY,)


class LoadCriticalDataUseCase:
    """Use-case: fan out the above-the-fold queries and wait for all of them."""

    def __init__(self, client: StorefrontClient, executor: Executor) -> None:
        self._client = client
        self._executor = executor

    def execute(self, context: RequestContext) -> CriticalResult:
        """
        Load the data the page cannot render without.

        All critical queries are submitted before any is awaited. A failure in
        any of them cancels the others and fails the whole load; no partial
        CriticalResult is ever returned.

        Args:
            context: Buyer context (country/language) for the queries.

        Returns:
            CriticalResult: featured_collection is None when the store has no collections.

        Raises:
            FatalLoadError: Chained to the underlying backend or payload error.
        """
        futures: List[Future] = []
        try:
            for q in CRITICAL_QUERIES:
                futures.append(self._executor.submit(self._client.execute, q, context))
            results: List[Dict[str, Any]] = [f.result() for f in futures]
            (collections,) = results
            featured = parse_featured_collection(collections)
        except Exception as exc:
            for f in futures:
                f.cancel()
            logger.error("Critical load failed | locale=%s | error=%s", context.locale, exc)
            raise FatalLoadError(f"Critical page data unavailable: {exc}") from exc

        logger.info(
            "Critical load completed | locale=%s | featured_collection=%s",
            context.locale,
            featured.id if featured else None,
        )
        return CriticalResult(featured_collection=featured)
