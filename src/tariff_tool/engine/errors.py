"""Errors raised by the tariff engine and the catalog loader."""
from typing import Any, Mapping, Optional


class InvalidInputError(ValueError):
    """Raised when a household request cannot be priced at all.

    Attributes:
        message: human-readable message
        details: optional mapping with the offending fields
        http_status: suggested HTTP status code for handlers (400)
    """

    http_status = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class CatalogError(ValueError):
    """Raised when the tariff tables are missing or inconsistent."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.problems = problems or []

    def __str__(self) -> str:
        if not self.problems:
            return self.message
        return f"{self.message}: " + "; ".join(self.problems)
