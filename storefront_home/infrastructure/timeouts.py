from __future__ import annotations

from .config import env_str


def http_timeout_seconds() -> float:
    """Per-request transport timeout for storefront calls (SF_HTTP_TIMEOUT, default 15s)."""
    try:
        value = float(env_str("SF_HTTP_TIMEOUT", "15"))
    except Exception:
        return 15.0
    return value if value > 0 else 15.0
