from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..domain.errors import ContractError

_LOCALE_RE = re.compile(r"^([a-z]{2})-([a-z]{2})$", re.IGNORECASE)


@dataclass(frozen=True)
class RequestContext:
    """Buyer context passed to every storefront query (``@inContext``)."""
    country: str = "US"
    language: str = "EN"

    @property
    def locale(self) -> str:
        return f"{self.language.lower()}-{self.country.lower()}"

    @classmethod
    def from_locale(cls, segment: Optional[str], default: Optional["RequestContext"] = None) -> "RequestContext":
        """
        Build a context from an optional ``language-country`` path prefix.

        Args:
            segment: Locale prefix such as ``en-us`` or ``fr-ca``; None or blank selects the default.
            default: Context used when no prefix is given.

        Returns:
            RequestContext: Context with upper-case ISO codes.

        Raises:
            ContractError: When the prefix is not of the form ``ll-cc``.
        """
        base = default or cls()
        if segment is None or not str(segment).strip():
            return base
        m = _LOCALE_RE.match(str(segment).strip())
        if not m:
            raise ContractError(f"Unsupported locale prefix '{segment}'")
        return cls(country=m.group(2).upper(), language=m.group(1).upper())
