from __future__ import annotations
from typing import Callable, Dict, Sequence

from ..config import MIME_TYPES, SOURCES
from ..errors import ExportError
from ..models import ExportJob, ExportOutcome, Record, SearchQuery
from ..utils.delivery import Deliver
from ..utils.filename import derive_name
from .encoders import encode_csv, encode_docx

NOTHING_TO_EXPORT = "Nothing to export"


class ExportAgent:
    """
    Turns the current result set into one downloadable file.

    Picks the encoder for the requested format, derives the file name from
    the query, and hands the finished blob to the delivery collaborator.
    Either a complete file is delivered or nothing is: empty result sets are
    refused up front, and encoding or delivery errors are caught here and
    reported in the returned ExportOutcome.
    """

    def __init__(self, source: str = "doab", deliver: Deliver | None = None, logger=None):
        """
        Args:
            source (str): Upstream source of the records; selects the filename
                fallback, the link caption and the document heading.
            deliver: Optional callable (blob, filename, mime_type) receiving each export.
            logger: Optional RunLogger.
        """
        self.profile = SOURCES.get(source, SOURCES["doab"])
        self.source = source
        self.deliver = deliver
        self.logger = logger
        self._encoders: Dict[str, Callable[[Sequence[Record], SearchQuery], bytes]] = {
            "csv": lambda records, query: encode_csv(records),
            "docx": self._encode_docx,
        }

    def heading(self, query: SearchQuery) -> str:
        return self.profile["heading"].format(
            subject=query.subject.strip(), start=query.start_year, end=query.end_year
        )

    def _encode_docx(self, records: Sequence[Record], query: SearchQuery) -> bytes:
        return encode_docx(records, self.heading(query), link_caption=self.profile["link_caption"])

    def _log(self, level: str, msg: str, **kv):
        if self.logger is not None:
            getattr(self.logger, level)(msg, **kv)

    def export_results(self, fmt: str, records: Sequence[Record], query: SearchQuery) -> ExportOutcome:
        """
        Encodes `records` as `fmt` ("csv" or "docx").

        Args:
            fmt (str): Target format.
            records (Sequence[Record]): The current result set (read only).
            query (SearchQuery): The query that produced `records`.

        Returns:
            ExportOutcome: ok=True with blob and filename, or ok=False with a
            user-facing message (empty result set, unknown format, encoder failure).
        """
        fmt = (fmt or "").lower().lstrip(".")
        if not records:
            self._log("info", "export_refused", format=fmt, reason="empty")
            return ExportOutcome(ok=False, message=NOTHING_TO_EXPORT)

        encoder = self._encoders.get(fmt)
        if encoder is None:
            self._log("warn", "export_refused", format=fmt, reason="unsupported_format")
            return ExportOutcome(ok=False, message=f"Unsupported export format: {fmt!r}")

        job = ExportJob(
            format=fmt,
            records=tuple(records),
            derived_name=derive_name(
                query.subject, query.start_year, query.end_year, fmt,
                default=self.profile["default_name"],
            ),
        )
        try:
            blob = encoder(job.records, query)
            if not blob:
                raise ExportError(f"{fmt} encoder produced an empty file")
        except Exception as e:
            self._log("error", "export_failed", format=fmt, error=str(e))
            return ExportOutcome(ok=False, message=f"Export failed: {e}", failed=True)

        mime = MIME_TYPES[fmt]
        if self.deliver is not None:
            try:
                self.deliver(blob, job.derived_name, mime)
            except Exception as e:
                self._log("error", "export_failed", format=fmt, error=str(e), stage="delivery")
                return ExportOutcome(ok=False, message=f"Export failed: {e}", failed=True)

        self._log("info", "export_done", format=fmt, filename=job.derived_name,
                  records=len(job.records), size=len(blob))
        return ExportOutcome(
            ok=True,
            message=f"Exported {len(job.records)} records to {job.derived_name}",
            filename=job.derived_name,
            mime_type=mime,
            blob=blob,
        )
