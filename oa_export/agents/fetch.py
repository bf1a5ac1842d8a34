from __future__ import annotations
from typing import Dict, Any, List

from ..models import SearchQuery
from ..utils.http import get_json
from .filtering import filter_records
from .extract import normalize

# In-process stand-in for a scraper, used for demos and offline runs.
SAMPLE_BOOKS: List[Dict[str, Any]] = [
    {
        "year": 2023,
        "authors": "John Smith, Jane Doe",
        "title": "Advanced Computer Science Concepts",
        "url": "https://example.com/book1",
    },
    {
        "year": 2022,
        "authors": "Alice Johnson",
        "title": "Modern Web Development Practices",
        "url": "https://example.com/book2",
    },
    {
        "year": 2021,
        "authors": "Bob Wilson, Carol Brown",
        "title": "Data Structures and Algorithms",
        "url": "https://example.com/book3",
    },
]

ACCEPT_HEADERS: Dict[str, str] = {"Accept": "application/json,text/plain;q=0.9,*/*;q=0.1"}
"""Sent with every upstream request; the User-Agent comes from the plan."""

def search_local(query: SearchQuery, catalogue: List[Dict[str, Any]] | None = None) -> Dict[str, Any]:
    """
    Mock scrape endpoint: filters the catalogue locally and answers with the
    same envelope the scrape route uses.
    """
    rows = SAMPLE_BOOKS if catalogue is None else catalogue
    kept = filter_records((normalize(raw, "local") for raw in rows), query)
    results = [
        {"year": r.year, "authors": r.authors, "title": r.title, "url": r.url}
        for r in kept
    ]
    return {"success": True, "results": results, "totalFound": len(results)}


class FetchAgent:
    """
    Executes one planned request and returns the decoded JSON body.

    Upstream failures (network, non-2xx, unreadable JSON) surface as
    UpstreamError from `get_json`; nothing is retried beyond http_get's
    own backoff.
    """
    def __init__(self, timeout: float = 30.0, catalogue: List[Dict[str, Any]] | None = None):
        """
        Args:
            timeout (float): Timeout for upstream requests in seconds.
            catalogue: Rows served by the "local" source (defaults to SAMPLE_BOOKS).
        """
        self.timeout = timeout
        self.catalogue = catalogue

    def execute(self, task: Dict[str, Any]) -> Any:
        """
        Args:
            task (Dict[str, Any]): A request specification from DiscoveryAgent.plan.

        Returns:
            Any: The decoded JSON body.
        """
        if task["url"] is None:
            return search_local(task["params"]["query"], self.catalogue)

        headers = dict(ACCEPT_HEADERS)
        headers.update(task.get("headers") or {})
        return get_json(
            task["url"],
            source=task["source"],
            params=task.get("params"),
            headers=headers,
            timeout=self.timeout,
        )
