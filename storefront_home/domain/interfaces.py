from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, TYPE_CHECKING

from .models import Query

if TYPE_CHECKING:
    from ..application.dto import RequestContext


class StorefrontClient(ABC):
    """Port for the commerce backend (e.g., Storefront GraphQL API)."""

    @abstractmethod
    def execute(self, query: Query, context: "RequestContext") -> Dict[str, Any]:
        """Execute a query in the buyer context and return its ``data`` mapping.

        Independent calls may run concurrently and carry no ordering guarantee.

        Raises:
            Exception: Provider/network failures should surface; use-case decides.
        """
        raise NotImplementedError
