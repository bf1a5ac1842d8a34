# oa_export/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .config import PLACEHOLDER
from .errors import QueryValidationError

@dataclass(frozen=True)
class Record:
    """
    Canonical bibliographic record, independent of the upstream schema.
    Every attribute is always set; absence is an explicit value.
    """
    year: int | None
    """Publication year, or None when the source gave nothing parseable."""
    authors: str
    """Comma-joined author/contributor names, or the placeholder."""
    title: str
    """The title, verbatim (may be empty)."""
    url: str | None
    """Landing page URL, or None when there is no link."""

    @property
    def year_text(self) -> str:
        return PLACEHOLDER if self.year is None else str(self.year)

    @classmethod
    def empty(cls) -> "Record":
        return cls(year=None, authors=PLACEHOLDER, title="", url=None)


ResultSet = Tuple[Record, ...]
"""Ordered records produced by exactly one query."""


@dataclass(frozen=True)
class SearchQuery:
    """
    A search as entered by the user.

    `start_year <= end_year` is deliberately not checked; an inverted range
    simply matches nothing.
    """
    subject: str
    start_year: int
    end_year: int
    limit: int

    def validate(self) -> None:
        """Raise QueryValidationError if the query must not be sent upstream."""
        if not isinstance(self.subject, str) or not self.subject.strip():
            raise QueryValidationError("Please enter a subject before searching.")
        if self.limit < 0:
            raise QueryValidationError(f"limit must be >= 0, got {self.limit}")


@dataclass(frozen=True)
class ExportJob:
    """One request to materialise a ResultSet in a given format."""
    format: str
    records: ResultSet
    derived_name: str


@dataclass(frozen=True)
class ExportOutcome:
    """What the export orchestrator reports back to its caller."""
    ok: bool
    message: str
    filename: str | None = None
    mime_type: str | None = None
    blob: bytes | None = None
    failed: bool = False
    """True when encoding or delivery raised (as opposed to a refused request)."""
