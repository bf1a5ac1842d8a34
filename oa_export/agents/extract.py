from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from ..errors import UpstreamError
from ..models import Record, ResultSet
from ..utils.normalise import coerce_year, join_authors, title_text, link_or_none

def _first(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    """Value of the first alias present in `raw` (None if none is)."""
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return None


@dataclass(frozen=True)
class SchemaAdapter:
    """
    Maps one upstream record schema onto the canonical Record.

    Each upstream names its fields differently; an adapter lists the keys
    to look up for each canonical field, in order of preference. Adding a
    source means adding an adapter, encoders never change.
    """
    name: str
    year_keys: Tuple[str, ...]
    author_keys: Tuple[str, ...]
    title_keys: Tuple[str, ...]
    url_keys: Tuple[str, ...]

    def to_record(self, raw: Any) -> Record:
        """
        Converts one raw record. Never raises: anything unusable becomes a
        placeholder, so one broken entry cannot sink the whole batch.
        """
        if not isinstance(raw, Mapping):
            return Record.empty()
        return Record(
            year=coerce_year(_first(raw, self.year_keys)),
            authors=join_authors(_first(raw, self.author_keys)),
            title=title_text(_first(raw, self.title_keys)),
            url=link_or_none(_first(raw, self.url_keys)),
        )


ADAPTERS: Dict[str, SchemaAdapter] = {
    # DOAJ scraper: [{"Journal", "Title", "Authors": [...], "Year", "URL"}]
    "doaj": SchemaAdapter(
        name="doaj",
        year_keys=("Year", "year"),
        author_keys=("Authors", "authors"),
        title_keys=("Title", "title"),
        url_keys=("URL", "url"),
    ),
    # DOAB scraper: {"books": [{"Year", "Author(s)/Contributors", "Title", "URL"}]}
    "doab": SchemaAdapter(
        name="doab",
        year_keys=("Year", "year"),
        author_keys=("Author(s)/Contributors", "Authors", "authors"),
        title_keys=("Title", "title"),
        url_keys=("URL", "url"),
    ),
    # Local sample catalogue: {"results": [{"year", "authors", "title", "url"}]}
    "local": SchemaAdapter(
        name="local",
        year_keys=("year", "Year"),
        author_keys=("authors", "Authors", "Author(s)/Contributors"),
        title_keys=("title", "Title"),
        url_keys=("url", "URL"),
    ),
}
"""Known upstream schemas, keyed by source name."""

GENERIC = SchemaAdapter(
    name="generic",
    year_keys=("Year", "year"),
    author_keys=("Author(s)/Contributors", "Authors", "authors"),
    title_keys=("Title", "title"),
    url_keys=("URL", "url"),
)
"""Fallback for unknown schema names: accepts every alias seen so far."""

_ENVELOPES = {"doab": "books", "local": "results"}

def normalize(raw: Any, schema: str) -> Record:
    """Normalises one raw upstream record with the adapter registered for `schema`."""
    return ADAPTERS.get(schema, GENERIC).to_record(raw)


class ExtractAgent:
    """
    Unwraps an upstream JSON body and turns every entry into a Record.
    """

    def process(self, payload: Any, schema: str) -> ResultSet:
        """
        Args:
            payload: The decoded JSON body returned by the upstream service.
            schema: Source name selecting the envelope and the adapter ("doaj", "doab", "local").

        Returns:
            ResultSet: The normalised records, in upstream order.

        Raises:
            UpstreamError: If the envelope does not have the expected shape.
        """
        items = self._items(payload, schema)
        return tuple(normalize(it, schema) for it in items)

    def _items(self, payload: Any, schema: str) -> List[Any]:
        envelope_key = _ENVELOPES.get(schema)
        if envelope_key is not None:
            items = payload.get(envelope_key, []) if isinstance(payload, dict) else None
            # {"books": null} means no hits
            if isinstance(payload, dict) and items is None:
                items = []
        elif isinstance(payload, dict):
            # tolerate a wrapped array from newer scraper deployments
            items = payload.get("results")
        else:
            items = payload

        if not isinstance(items, list):
            raise UpstreamError(
                f"{schema}: unexpected payload shape ({type(payload).__name__})", source=schema
            )
        return items
