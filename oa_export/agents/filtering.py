from __future__ import annotations
from typing import Iterable

from ..models import Record, ResultSet, SearchQuery

def year_in_range(record: Record, query: SearchQuery) -> bool:
    """Inclusive bounds; records without a year never match."""
    if record.year is None:
        return False
    return query.start_year <= record.year <= query.end_year

def title_matches(record: Record, query: SearchQuery) -> bool:
    return query.subject.lower() in record.title.lower()

def filter_records(records: Iterable[Record], query: SearchQuery) -> ResultSet:
    """
    Year range, then case-insensitive subject-in-title, then the first
    `query.limit` survivors. Order is preserved; nothing is ranked.

    Args:
        records: Canonical records in upstream order.
        query: The search whose bounds, subject and limit apply.

    Returns:
        ResultSet: The surviving records.
    """
    kept = [r for r in records if year_in_range(r, query)]
    kept = [r for r in kept if title_matches(r, query)]
    return tuple(kept[: max(0, query.limit)])
