from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, Optional

from ..dto import RequestContext
from .load_critical_data import LoadCriticalDataUseCase
from .load_deferred_data import LoadDeferredDataUseCase
from ...domain.errors import FatalLoadError
from ...domain.interfaces import StorefrontClient
from ...domain.models import PageData, PageLifecycle, PageState
from ...infrastructure.config import loader_workers
from ...infrastructure.logging import get_logger

logger = get_logger("storefront_home.page")


class ComposeHomePageUseCase:
    """Use-case: start critical and deferred loads together, block on critical only.

    Critical and deferred queries run on separate worker pools, so a backlog of
    slow deferred fetches can never hold a critical query in the queue.
    """

    def __init__(
        self,
        client: StorefrontClient,
        executor: Optional[Executor] = None,
        max_workers: Optional[int] = None,
        recommended_count: Optional[int] = None,
        deferred_executor: Optional[Executor] = None,
    ) -> None:
        workers = max_workers or loader_workers()
        self._owned: List[Executor] = []
        critical_pool = executor or self._own(ThreadPoolExecutor(workers, thread_name_prefix="storefront-critical"))
        deferred_pool = deferred_executor or self._own(ThreadPoolExecutor(workers, thread_name_prefix="storefront-deferred"))
        self._critical = LoadCriticalDataUseCase(client, critical_pool)
        self._deferred = LoadDeferredDataUseCase(client, deferred_pool, first=recommended_count)

    def _own(self, pool: Executor) -> Executor:
        self._owned.append(pool)
        return pool

    def execute(self, context: RequestContext, lifecycle: Optional[PageLifecycle] = None) -> PageData:
        """
        Compose the home page data for one request.

        The deferred query is started first so it never waits on the critical
        path. The call returns as soon as the critical data resolves, embedding
        the still-pending deferred future.

        Args:
            context: Buyer context for every query.
            lifecycle: Optional per-request tracker advanced to CRITICAL_RESOLVED or CRITICAL_FAILED.

        Returns:
            PageData: Resolved critical fields plus the deferred future.

        Raises:
            FatalLoadError: Critical data could not be loaded; the deferred future is abandoned.
        """
        deferred = self._deferred.execute(context)
        try:
            critical = self._critical.execute(context)
        except FatalLoadError:
            deferred.cancel()
            if lifecycle is not None:
                lifecycle.advance(PageState.CRITICAL_FAILED)
            raise
        if lifecycle is not None:
            lifecycle.advance(PageState.CRITICAL_RESOLVED)
        logger.debug("Page data composed | locale=%s | deferred_done=%s", context.locale, deferred.done())
        return PageData(critical=critical, recommended_products=deferred)

    def shutdown(self, wait: bool = False) -> None:
        """Release the worker pools this use-case created."""
        for pool in self._owned:
            pool.shutdown(wait=wait)
