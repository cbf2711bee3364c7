# gdp_dashboard/errors.py
from __future__ import annotations

from typing import Optional


class IngestError(Exception):
    """Base class for everything that can go wrong while ingesting one country."""

    def __init__(self, message: str, country_id: Optional[str] = None):
        super().__init__(message)
        self.country_id = country_id

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.country_id}: {msg}" if self.country_id else msg


class FetchError(IngestError):
    """Transport failure, timeout, or non-success status."""


class NotFound(IngestError):
    """No embedded data literal in the source document."""


class MalformedData(IngestError):
    """The literal could not be parsed, even after repair."""


class InvalidShape(IngestError):
    """Parsed fine but a required field is missing or unusable."""
