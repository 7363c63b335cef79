"""Domain error taxonomy for the aggregation and budget engine."""

from __future__ import annotations


class CostLedgerError(Exception):
    """Base class for engine errors surfaced to callers."""


class SchemeConstructionError(CostLedgerError, ValueError):
    """Raised for a structurally invalid (scheme, year) pair."""


class ConfigurationInvariantError(CostLedgerError, ValueError):
    """Raised when an input breaks a calculation contract (e.g. area <= 0)."""


class SourceUnavailableError(CostLedgerError):
    """A single category source could not be read.

    Absorbed by the aggregation coordinator, which substitutes a zero series.
    """

    def __init__(self, category_key: str, message: str | None = None) -> None:
        self.category_key = category_key
        super().__init__(message or f"Source for category '{category_key}' is unavailable.")


class CategoryAggregationError(CostLedgerError):
    """Strict-mode failure: one or more category sources failed."""

    def __init__(self, failed_keys: list[str]) -> None:
        self.failed_keys = list(failed_keys)
        super().__init__(f"Category sources failed: {', '.join(self.failed_keys)}")
