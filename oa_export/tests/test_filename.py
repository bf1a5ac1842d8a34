import re

import pytest

from oa_export.utils.filename import derive_name

def test_whitespace_collapses_and_punctuation_is_dropped():
    assert derive_name("  African   Studies! ", 2021, 2025, "csv") == "African_Studies_2021-2025.csv"

def test_empty_subject_uses_default_token():
    assert derive_name("!!!", 2021, 2022, "docx") == "books_2021-2022.docx"
    assert derive_name("", 2021, 2022, "csv", default="articles") == "articles_2021-2022.csv"
    assert derive_name(None, 2021, 2022, "csv") == "books_2021-2022.csv"

def test_missing_years_render_as_placeholder():
    assert derive_name("maps", None, 2020, "docx") == "maps_XXXX-2020.docx"

def test_deterministic():
    """
    Same arguments, same name: no timestamps or randomness.
    """
    args = ("Computer Science & AI", 2020, 2024, "csv")
    assert derive_name(*args) == derive_name(*args) == "Computer_Science__AI_2020-2024.csv"

@pytest.mark.parametrize("subject", ["histoire/é", "a\tb\nc", "../../etc/passwd", "日本語", "x" * 3])
def test_only_safe_characters(subject):
    name = derive_name(subject, 2001, 2002, "csv")
    assert re.fullmatch(r"[A-Za-z0-9_]+_\d{4}-\d{4}\.csv", name)
    assert name.count(".") == 1
