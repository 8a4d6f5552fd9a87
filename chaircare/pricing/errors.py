from __future__ import annotations

from typing import Any, Dict, Optional


class PricingError(Exception):
    """Base class for all pricing engine errors."""


class InvalidPricingInput(PricingError, ValueError):
    """
    Malformed input (context, catalogue entry, rule row).
    Fatal: raised before any evaluation happens.
    """

    def __init__(self, field: str, message: str, meta: Optional[Dict[str, Any]] = None):
        self.field = str(field)
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.field}: {self.message}")


class CatalogError(PricingError, LookupError):
    """A service/part price entry is missing, inactive or unreadable."""

    def __init__(self, kind: str, ids: list[str], message: str = "not found in price catalogue"):
        self.kind = kind
        self.ids = list(ids)
        super().__init__(f"{kind} {self.ids}: {message}")


class RuleTableError(PricingError):
    """A rule-table source could not be parsed or validated."""
