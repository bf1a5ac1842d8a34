from oa_export.agents.filtering import filter_records
from oa_export.models import Record, SearchQuery

def _rec(year, title="Book"):
    return Record(year=year, authors="—", title=title, url=None)

def test_year_inclusive_bounds():
    """
    Tests that the year filter keeps the boundary years, in their incoming order.
    """
    records = [_rec(2019, "a"), _rec(2020, "b"), _rec(2021, "c"), _rec(2022, "d")]
    out = filter_records(records, SearchQuery("", 2020, 2021, 10))
    assert [r.year for r in out] == [2020, 2021]
    assert [r.title for r in out] == ["b", "c"]

def test_records_without_year_are_dropped():
    out = filter_records([_rec(None), _rec(2020)], SearchQuery("", 1900, 2100, 10))
    assert [r.year for r in out] == [2020]

def test_subject_matches_title_case_insensitively():
    records = [_rec(2020, "Modern HISTORY"), _rec(2020, "Physics"), _rec(2020, "history of maps")]
    out = filter_records(records, SearchQuery("History", 2020, 2020, 10))
    assert [r.title for r in out] == ["Modern HISTORY", "history of maps"]

def test_limit_truncates_after_filtering():
    records = [_rec(2018, "x1"), _rec(2020, "x2"), _rec(2020, "x3"), _rec(2020, "x4")]
    out = filter_records(records, SearchQuery("x", 2020, 2020, 2))
    assert [r.title for r in out] == ["x2", "x3"]
    assert filter_records(records, SearchQuery("x", 2020, 2020, 0)) == ()

def test_inverted_range_matches_nothing():
    assert filter_records([_rec(2020)], SearchQuery("", 2021, 2019, 5)) == ()

def test_subject_is_matched_as_given():
    """
    Surrounding spaces in the subject are part of the match.
    """
    records = [_rec(2020, "Old maps"), _rec(2020, "Maps of Europe")]
    out = filter_records(records, SearchQuery(" maps", 2020, 2020, 10))
    assert [r.title for r in out] == ["Old maps"]
