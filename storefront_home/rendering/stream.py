from __future__ import annotations

from concurrent.futures import CancelledError
from typing import Iterator, Optional

from jinja2 import Environment

from ..domain.models import (
    UNAVAILABLE,
    DeferredOutcome,
    DeferredResult,
    PageData,
    PageLifecycle,
    PageState,
)
from ..infrastructure.logging import get_logger
from .templates import PLACEHOLDER_CARDS, SLOT_RECOMMENDED_PRODUCTS, build_environment

logger = get_logger("storefront_home.render")


class HomePageStream:
    """Progressive renderer: shell chunk now, one deferred patch chunk later.

    Iterating yields exactly two chunks when consumed to the end. The shell
    never touches the deferred future. Closing before the patch, whether through
    the iterator or close() on a stream that never started, abandons the
    deferred load.
    """

    def __init__(
        self,
        page: PageData,
        lifecycle: Optional[PageLifecycle] = None,
        env: Optional[Environment] = None,
    ) -> None:
        self._page = page
        self.lifecycle = lifecycle or PageLifecycle()
        self._env = env or build_environment()
        self._patched = False
        self._closed = False

    def render_shell(self) -> str:
        return self._env.get_template("shell.html").render(
            collection=self._page.featured_collection,
            slot_id=SLOT_RECOMMENDED_PRODUCTS,
            placeholders=PLACEHOLDER_CARDS,
        )

    def render_patch(self, outcome: DeferredOutcome) -> str:
        products = outcome.products if isinstance(outcome, DeferredResult) else ()
        state = "resolved" if isinstance(outcome, DeferredResult) else "unavailable"
        return self._env.get_template("patch.html").render(
            slot_id=SLOT_RECOMMENDED_PRODUCTS,
            products=products,
            state=state,
        )

    def __iter__(self) -> Iterator[str]:
        future = self._page.recommended_products
        try:
            shell = self.render_shell()
            if self.lifecycle.state is PageState.PENDING:
                self.lifecycle.advance(PageState.CRITICAL_RESOLVED)
            yield shell

            try:
                outcome = future.result()
            except CancelledError:
                outcome = UNAVAILABLE
            patch = self.render_patch(outcome)
            self.lifecycle.advance(
                PageState.DEFERRED_RESOLVED if isinstance(outcome, DeferredResult) else PageState.DEFERRED_UNAVAILABLE
            )
            self._patched = True
            yield patch
        finally:
            self.close()

    def close(self) -> None:
        """Abandon the deferred load unless the patch already went out. Safe to call more than once."""
        if self._patched or self._closed:
            return
        self._closed = True
        self._page.recommended_products.cancel()
        logger.info("Stream closed before deferred patch | state=%s", self.lifecycle.state.value)
