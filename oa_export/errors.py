"""
Exception hierarchy for oa-export.

    OAExportError (base)
    ├── QueryValidationError   bad search input, raised before any fetch
    ├── UpstreamError          the search service failed or sent garbage
    └── ExportError            encoding failed; reported, never propagated
"""
from __future__ import annotations


class OAExportError(Exception):
    """Base class for all oa-export errors."""


class QueryValidationError(OAExportError):
    """The search query cannot be sent (e.g. no subject given)."""


class UpstreamError(OAExportError):
    """The upstream search service returned an error or an unreadable body."""

    def __init__(self, message: str, *, source: str | None = None, status: int | None = None):
        super().__init__(message)
        self.source = source
        self.status = status


class ExportError(OAExportError):
    """Building an export blob failed."""
