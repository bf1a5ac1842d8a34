from __future__ import annotations
from typing import Dict, Any

from ..config import DOAJ_SEARCH_API, DOAB_SCRAPE_API, DEFAULT_USER_AGENT
from ..errors import QueryValidationError
from ..models import SearchQuery

class DiscoveryAgent:
    """
    Translates a SearchQuery into the concrete request for one upstream source.
    Only the query parameters travel upstream; requests URL-encodes them.
    """
    def __init__(self, contact_email: str):
        """
        Args:
            contact_email (str): Email address included in the User-Agent header.
        """
        self.contact_email = contact_email

    def user_agent(self) -> str:
        return DEFAULT_USER_AGENT.format(email=self.contact_email)

    def plan(self, query: SearchQuery, source: str) -> Dict[str, Any]:
        """
        Builds the request specification for `source`.

        Args:
            query (SearchQuery): The validated search.
            source (str): "doaj", "doab" or "local".

        Returns:
            Dict[str, Any]: {"source", "url", "params", "headers"}; `url` is None
            for the in-process local catalogue.

        Raises:
            QueryValidationError: If the source is unknown.
        """
        subject = query.subject.strip()
        headers = {"User-Agent": self.user_agent()}

        if source == "doaj":
            return {
                "source": "doaj",
                "url": DOAJ_SEARCH_API,
                "params": {
                    "query": subject,
                    "year_from": query.start_year,
                    "year_to": query.end_year,
                    "size": query.limit,
                },
                "headers": headers,
            }

        if source == "doab":
            return {
                "source": "doab",
                "url": DOAB_SCRAPE_API,
                "params": {
                    "query": subject,
                    "start_year": query.start_year,
                    "end_year": query.end_year,
                    "limit": query.limit,
                },
                "headers": headers,
            }

        if source == "local":
            return {"source": "local", "url": None, "params": {"query": query}, "headers": {}}

        raise QueryValidationError(f"Unknown source: {source!r} (expected doaj, doab or local)")
