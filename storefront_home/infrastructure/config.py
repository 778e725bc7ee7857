from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Dict, Optional


def _parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(Exception):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def _env_get(key: str) -> Optional[str]:
    """Get environment value from process env, falling back to .env in CWD."""
    v = os.getenv(key)
    if v is not None and v.strip():
        return v.strip()
    local = _parse_dotenv(Path(".env"))
    v2 = local.get(key)
    return v2.strip() if v2 is not None and v2.strip() else None


def env_str(name: str, default: str) -> str:
    return _env_get(name) or default


def env_int(name: str, default: int) -> int:
    try:
        return int(env_str(name, str(default)))
    except Exception:
        return default


def store_domain() -> str:
    domain = env_str("PUBLIC_STORE_DOMAIN", "mock.shop")
    for prefix in ("https://", "http://"):
        if domain.startswith(prefix):
            domain = domain[len(prefix):]
    return domain.rstrip("/")


def storefront_api_version() -> str:
    return env_str("PUBLIC_STOREFRONT_API_VERSION", "2025-01")


def storefront_api_url() -> str:
    return f"https://{store_domain()}/api/{storefront_api_version()}/graphql.json"


def storefront_api_token() -> str:
    return env_str("PUBLIC_STOREFRONT_API_TOKEN", "")


def default_country() -> str:
    return env_str("STOREFRONT_DEFAULT_COUNTRY", "US").upper()


def default_language() -> str:
    return env_str("STOREFRONT_DEFAULT_LANGUAGE", "EN").upper()


def recommended_products_count() -> int:
    """
    Number of recommended products requested below the fold.
    Defaults to 4 when HOME_RECOMMENDED_COUNT is not set, invalid, or not positive.
    """
    n = env_int("HOME_RECOMMENDED_COUNT", 4)
    return n if n > 0 else 4


def loader_workers() -> int:
    n = env_int("HOME_LOADER_WORKERS", 8)
    return n if n > 0 else 8
