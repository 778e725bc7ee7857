"""
Pytest configuration and fixtures for storefront home tests.

Provides fake storefront clients, critical and deferred worker pools, gates for holding queries
open, and sample backend payloads.
"""

import copy
import os
import threading
from concurrent.futures import ThreadPoolExecutor
import pytest

from storefront_home.domain.interfaces import StorefrontClient


FEATURED_NAME = "FeaturedCollection"
RECOMMENDED_NAME = "RecommendedProducts"


class FakeStorefrontClient(StorefrontClient):
    """In-memory storefront keyed by query name.

    A response may be a payload dict (returned as a deep copy) or an exception
    instance (raised). A gate (threading.Event) holds that query open until set.
    """

    def __init__(self, responses=None, gates=None):
        self.responses = dict(responses or {})
        self.gates = dict(gates or {})
        self.calls = []
        self._lock = threading.Lock()

    def execute(self, query, context):
        with self._lock:
            self.calls.append((query.name, context, dict(query.variables)))
        gate = self.gates.get(query.name)
        if gate is not None:
            gate.wait(timeout=10)
        resp = self.responses[query.name]
        if isinstance(resp, BaseException):
            raise resp
        return copy.deepcopy(resp)

    def names(self):
        with self._lock:
            return [c[0] for c in self.calls]


@pytest.fixture
def executor():
    """Worker pool shared by the loaders under test."""
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-loader")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def deferred_executor():
    """Separate pool for below-the-fold queries."""
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-deferred")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def gate(executor, deferred_executor):
    """Event holding a query open; released before the pool shuts down."""
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def collections_payload():
    return {
        "collections": {
            "nodes": [
                {
                    "id": "c1",
                    "title": "Featured",
                    "handle": "featured",
                    "image": {
                        "id": "img-c1",
                        "url": "https://cdn.example.com/c1.jpg",
                        "altText": "Featured collection",
                        "width": 800,
                        "height": 600,
                    },
                }
            ]
        }
    }


@pytest.fixture
def empty_collections_payload():
    return {"collections": {"nodes": []}}


@pytest.fixture
def products_payload():
    return {
        "products": {
            "nodes": [
                {
                    "id": "p1",
                    "title": "Rose Serum",
                    "handle": "rose-serum",
                    "priceRange": {"minVariantPrice": {"amount": "24.0", "currencyCode": "USD"}},
                    "featuredImage": {"id": "img-p1", "url": "https://cdn.example.com/p1.jpg", "altText": None},
                },
                {
                    "id": "p2",
                    "title": "Clay Mask",
                    "handle": "clay-mask",
                    "priceRange": {"minVariantPrice": {"amount": "1200", "currencyCode": "USD"}},
                    "featuredImage": None,
                },
            ]
        }
    }


@pytest.fixture
def make_client():
    """Factory for FakeStorefrontClient instances with custom responses/gates."""
    return FakeStorefrontClient


@pytest.fixture
def fake_client(collections_payload, products_payload):
    """Storefront answering both home page queries successfully."""
    return FakeStorefrontClient(
        {FEATURED_NAME: collections_payload, RECOMMENDED_NAME: products_payload}
    )


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Clear storefront env vars and run from an empty directory (no stray .env)."""
    for var in [
        'PUBLIC_STORE_DOMAIN',
        'PUBLIC_STOREFRONT_API_TOKEN',
        'PUBLIC_STOREFRONT_API_VERSION',
        'STOREFRONT_DEFAULT_COUNTRY',
        'STOREFRONT_DEFAULT_LANGUAGE',
        'HOME_RECOMMENDED_COUNT',
        'HOME_LOADER_WORKERS',
        'SF_HTTP_TIMEOUT',
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as CLI command test"
    )
    config.addinivalue_line(
        "markers", "env: mark test as environment resolution test"
    )
