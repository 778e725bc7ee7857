from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import ContractError


@dataclass(frozen=True)
class Query:
    """A request descriptor sent to the storefront client.

    Fields:
        name: Operation name, used in logs.
        document: GraphQL document (fragments + operation).
        variables: Operation variables merged over the buyer context.
    """
    name: str
    document: str
    variables: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Image:
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class Money:
    """Price amount as returned by the backend (decimal string) with ISO currency code."""
    amount: str
    currency_code: str


@dataclass(frozen=True)
class FeaturedCollection:
    """Collection shown above the fold.

    Fields:
        id: Backend global ID.
        title: Display title.
        handle: URL handle.
        image: Optional collection image.
    """
    id: str
    title: str
    handle: str
    image: Optional[Image] = None


@dataclass(frozen=True)
class RecommendedProduct:
    id: str
    title: str
    handle: str
    min_price: Optional[Money] = None
    featured_image: Optional[Image] = None


@dataclass(frozen=True)
class CriticalResult:
    """Data required before the page is renderable.

    Fields:
        featured_collection: Most recently updated collection, or None when the
            store has none. Absence is a valid state, not a failure.
    """
    featured_collection: Optional[FeaturedCollection]


@dataclass(frozen=True)
class DeferredResult:
    """Supplementary data streamed in after the first chunk."""
    products: Tuple[RecommendedProduct, ...] = ()


class DeferredUnavailable:
    """Sentinel substituted for a DeferredResult on any deferred-path failure."""

    _instance: Optional["DeferredUnavailable"] = None

    def __new__(cls) -> "DeferredUnavailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = DeferredUnavailable()

DeferredOutcome = Union[DeferredResult, DeferredUnavailable]


@dataclass(frozen=True)
class PageData:
    """Critical fields merged with the still-pending deferred future.

    Fields:
        critical: Fully resolved critical data.
        recommended_products: Future resolving to a DeferredResult or UNAVAILABLE;
            it never resolves to an exception.
    """
    critical: CriticalResult
    recommended_products: "Future[DeferredOutcome]"

    @property
    def featured_collection(self) -> Optional[FeaturedCollection]:
        return self.critical.featured_collection


class PageState(str, Enum):
    PENDING = "pending"
    CRITICAL_RESOLVED = "critical_resolved"
    DEFERRED_RESOLVED = "deferred_resolved"
    DEFERRED_UNAVAILABLE = "deferred_unavailable"
    CRITICAL_FAILED = "critical_failed"


_TRANSITIONS: Dict[PageState, Tuple[PageState, ...]] = {
    PageState.PENDING: (PageState.CRITICAL_RESOLVED, PageState.CRITICAL_FAILED),
    PageState.CRITICAL_RESOLVED: (PageState.DEFERRED_RESOLVED, PageState.DEFERRED_UNAVAILABLE),
    PageState.DEFERRED_RESOLVED: (),
    PageState.DEFERRED_UNAVAILABLE: (),
    PageState.CRITICAL_FAILED: (),
}


class PageLifecycle:
    """Per-request state tracker.

    Guarantees the critical response and the deferred patch are each recorded
    at most once, and the patch only after the critical response.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = PageState.PENDING
        self._history: List[PageState] = [PageState.PENDING]

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def history(self) -> List[PageState]:
        return list(self._history)

    def advance(self, new_state: PageState) -> None:
        with self._lock:
            if new_state not in _TRANSITIONS[self._state]:
                raise ContractError(f"Illegal page transition {self._state.value} -> {new_state.value}")
            self._state = new_state
            self._history.append(new_state)
