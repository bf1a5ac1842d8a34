# oa_export/agents/coordinator.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..config import DEFAULT_TIMEOUT, LOG_DIR
from ..errors import UpstreamError
from ..models import ExportOutcome, ResultSet, SearchQuery
from ..utils.delivery import Deliver
from ..utils.logging import RunLogger

from .discovery import DiscoveryAgent
from .fetch import FetchAgent
from .extract import ExtractAgent
from .export import ExportAgent


class CoordinatorAgent:
    """
    Session holder: runs searches (discovery → fetch → extract) and owns the
    current result set, which exports borrow read-only.

    The result set is only ever replaced whole: after a successful search it
    holds the new records, after an upstream failure it is empty, and a
    rejected query leaves it untouched.
    """

    def __init__(
        self,
        contact_email: str,
        source: str = "doab",
        timeout: float = DEFAULT_TIMEOUT,
        log_dir: Path | str | None = None,
        catalogue: List[Dict[str, Any]] | None = None,
    ):
        """
        Args:
            contact_email: Email address sent to upstream services in the User-Agent.
            source: Default upstream source ("doab", "doaj" or "local").
            timeout: Timeout for upstream requests in seconds.
            log_dir: Directory for the run log; defaults to OA_EXPORT_LOG_DIR.
            catalogue: Rows served by the "local" source instead of the samples.
        """
        self.contact_email = contact_email
        self.source = source
        self.timeout = timeout
        self.logger = RunLogger(Path(log_dir or LOG_DIR).resolve())
        self.catalogue = catalogue
        # (source, query, records) of the latest search, swapped as one value
        self._state: Tuple[str, SearchQuery | None, ResultSet] = (source, None, ())

    @property
    def query(self) -> SearchQuery | None:
        return self._state[1]

    @property
    def results(self) -> ResultSet:
        return self._state[2]

    @property
    def last_source(self) -> str:
        return self._state[0]

    def search(self, query: SearchQuery, source: str | None = None) -> ResultSet:
        """
        Runs one search and makes its records the current result set.

        Args:
            query: The search to run; validated before anything is sent.
            source: Upstream source for this search; defaults to the session's.

        Returns:
            ResultSet: The new current records.

        Raises:
            QueryValidationError: Bad query or unknown source (state unchanged).
            UpstreamError: The service failed (state reset to empty).
        """
        source = source or self.source
        log = self.logger.bind(source=source)
        query.validate()

        tasks = DiscoveryAgent(contact_email=self.contact_email).plan(query, source)
        log.info("search_start", subject=query.subject, start_year=query.start_year,
                 end_year=query.end_year, limit=query.limit)

        try:
            payload = FetchAgent(
                timeout=self.timeout, catalogue=self.catalogue
            ).execute(tasks)
            log.info("fetch_done")
            records = ExtractAgent().process(payload, source)
        except UpstreamError as e:
            log.warn("search_failed", error=str(e), status=e.status)
            self._state = (source, None, ())
            raise

        log.info("extract_done", count=len(records))
        self._state = (source, query, records)
        return records

    def export(self, fmt: str, deliver: Deliver | None = None) -> ExportOutcome:
        """Exports the current result set as `fmt` (see ExportAgent.export_results)."""
        source, query, records = self._state
        agent = ExportAgent(source=source, deliver=deliver, logger=self.logger.bind(source=source))
        if query is None:
            return agent.export_results(fmt, (), SearchQuery("", 0, 0, 0))
        return agent.export_results(fmt, records, query)
