"""
Unit tests for the home page composer.

Tests concurrency between the critical and deferred paths and the
per-request lifecycle.
"""

import pytest
import requests

from storefront_home.application.dto import RequestContext
from storefront_home.application.use_cases.compose_home_page import ComposeHomePageUseCase
from storefront_home.domain.errors import ContractError, FatalLoadError
from storefront_home.domain.models import UNAVAILABLE, PageData, PageLifecycle, PageState


pytestmark = pytest.mark.unit


class TestComposeHomePage:
    """Test composing critical and deferred page data."""

    def test_exposes_critical_now_and_deferred_later(self, fake_client, executor, deferred_executor):
        """Test featured collection is available synchronously, products after resolution."""
        page = ComposeHomePageUseCase(fake_client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext())

        assert isinstance(page, PageData)
        assert page.featured_collection.id == "c1"
        assert page.featured_collection.title == "Featured"
        outcome = page.recommended_products.result(timeout=5)
        assert [p.id for p in outcome.products] == ["p1", "p2"]

    def test_returns_while_deferred_pending(self, make_client, collections_payload, products_payload, executor, deferred_executor, gate):
        """Test the composer never waits on the deferred query."""
        client = make_client(
            {"FeaturedCollection": collections_payload, "RecommendedProducts": products_payload},
            gates={"RecommendedProducts": gate},
        )
        lifecycle = PageLifecycle()

        page = ComposeHomePageUseCase(client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext(), lifecycle)

        assert page.featured_collection.id == "c1"
        assert not page.recommended_products.done()
        assert lifecycle.state is PageState.CRITICAL_RESOLVED
        gate.set()
        assert page.recommended_products.result(timeout=5).products

    def test_both_queries_started(self, fake_client, executor, deferred_executor):
        """Test critical and deferred queries are both issued for one request."""
        page = ComposeHomePageUseCase(fake_client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext())
        page.recommended_products.result(timeout=5)

        assert sorted(fake_client.names()) == ["FeaturedCollection", "RecommendedProducts"]

    def test_critical_failure_fails_request(self, make_client, products_payload, executor, deferred_executor):
        """Test a critical failure propagates and no PageData is produced."""
        client = make_client(
            {"FeaturedCollection": requests.ConnectionError("down"), "RecommendedProducts": products_payload}
        )
        lifecycle = PageLifecycle()

        with pytest.raises(FatalLoadError):
            ComposeHomePageUseCase(client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext(), lifecycle)

        assert lifecycle.state is PageState.CRITICAL_FAILED
        assert lifecycle.history == [PageState.PENDING, PageState.CRITICAL_FAILED]

    def test_deferred_failure_never_fails_request(self, make_client, collections_payload, executor, deferred_executor):
        """Test a deferred failure leaves the critical path untouched."""
        client = make_client(
            {"FeaturedCollection": collections_payload, "RecommendedProducts": requests.ConnectionError("down")}
        )
        lifecycle = PageLifecycle()

        page = ComposeHomePageUseCase(client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext(), lifecycle)

        assert lifecycle.state is PageState.CRITICAL_RESOLVED
        assert page.featured_collection.id == "c1"
        assert page.recommended_products.result(timeout=5) is UNAVAILABLE

    def test_empty_store_still_renders(self, make_client, empty_collections_payload, products_payload, executor, deferred_executor):
        """Test no featured collection is a valid page."""
        client = make_client(
            {"FeaturedCollection": empty_collections_payload, "RecommendedProducts": products_payload}
        )

        page = ComposeHomePageUseCase(client, executor=executor, deferred_executor=deferred_executor).execute(RequestContext())

        assert page.featured_collection is None

    def test_owned_executor_shutdown(self, fake_client):
        """Test a composer without an injected pool creates and releases its own."""
        composer = ComposeHomePageUseCase(fake_client, max_workers=2)
        page = composer.execute(RequestContext())
        assert page.recommended_products.result(timeout=5).products

        composer.shutdown(wait=True)

        assert page.featured_collection.id == "c1"

    def test_injected_executor_not_shut_down(self, fake_client, executor, deferred_executor):
        """Test shutdown leaves a caller-owned pool usable."""
        composer = ComposeHomePageUseCase(fake_client, executor=executor, deferred_executor=deferred_executor)
        composer.shutdown()

        assert executor.submit(lambda: 42).result(timeout=5) == 42
        assert deferred_executor.submit(lambda: 7).result(timeout=5) == 7

    def test_critical_not_queued_behind_deferred(self, make_client, collections_payload, products_payload, gate):
        """Test held deferred queries beyond the pool size never delay the critical path."""
        client = make_client(
            {"FeaturedCollection": collections_payload, "RecommendedProducts": products_payload},
            gates={"RecommendedProducts": gate},
        )
        composer = ComposeHomePageUseCase(client, max_workers=1)
        try:
            pages = [composer.execute(RequestContext()) for _ in range(3)]

            assert [p.featured_collection.id for p in pages] == ["c1", "c1", "c1"]
            assert not any(p.recommended_products.done() for p in pages)
        finally:
            gate.set()
            composer.shutdown(wait=True)

        assert all(p.recommended_products.result(timeout=5).products for p in pages)

    def test_shutdown_releases_both_owned_pools(self, fake_client):
        """Test a shut-down composer refuses new pages with a fatal load error."""
        composer = ComposeHomePageUseCase(fake_client, max_workers=1)
        composer.shutdown(wait=True)

        with pytest.raises(FatalLoadError):
            composer.execute(RequestContext())


class TestPageLifecycle:
    """Test the per-request state machine."""

    def test_happy_path(self):
        lifecycle = PageLifecycle()
        lifecycle.advance(PageState.CRITICAL_RESOLVED)
        lifecycle.advance(PageState.DEFERRED_RESOLVED)

        assert lifecycle.history == [
            PageState.PENDING,
            PageState.CRITICAL_RESOLVED,
            PageState.DEFERRED_RESOLVED,
        ]

    def test_patch_before_critical_rejected(self):
        """Test a deferred patch cannot precede the critical response."""
        lifecycle = PageLifecycle()

        with pytest.raises(ContractError):
            lifecycle.advance(PageState.DEFERRED_UNAVAILABLE)

    def test_patch_at_most_once(self):
        lifecycle = PageLifecycle()
        lifecycle.advance(PageState.CRITICAL_RESOLVED)
        lifecycle.advance(PageState.DEFERRED_UNAVAILABLE)

        with pytest.raises(ContractError):
            lifecycle.advance(PageState.DEFERRED_RESOLVED)

    def test_critical_failed_is_terminal(self):
        lifecycle = PageLifecycle()
        lifecycle.advance(PageState.CRITICAL_FAILED)

        with pytest.raises(ContractError):
            lifecycle.advance(PageState.CRITICAL_RESOLVED)
