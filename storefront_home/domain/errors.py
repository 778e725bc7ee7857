from __future__ import annotations


class StorefrontError(RuntimeError):
    """Raised when the storefront backend reports query errors."""


class FatalLoadError(RuntimeError):
    """Raised when critical page data cannot be loaded; the whole page fails."""


class ContractError(ValueError):
    """Raised when a payload or request violates the documented contract (e.g., malformed response)."""
