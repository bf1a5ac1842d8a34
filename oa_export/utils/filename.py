from __future__ import annotations
import re

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^A-Za-z0-9_]")

def safe_subject(subject: str | None, default: str = "books") -> str:
    """'  African  Studies!' -> 'African_Studies'; empty results fall back to `default`."""
    s = _WHITESPACE.sub("_", (subject or "").strip())
    s = _UNSAFE.sub("", s)
    return s or default

def derive_name(
    subject: str | None,
    start_year: int | None,
    end_year: int | None,
    ext: str,
    default: str = "books",
) -> str:
    """
    Builds a descriptive, filesystem-safe export name such as
    ``Computer_Science_2021-2025.csv``.

    The result depends only on the arguments, so repeated exports of the
    same query produce the same name. A missing year is written as XXXX.

    Args:
        subject: Free-text subject as typed by the user.
        start_year: Lower bound of the searched year range.
        end_year: Upper bound of the searched year range.
        ext: File extension without the dot (e.g. "csv").
        default: Token used when nothing of the subject survives sanitising.

    Returns:
        str: The file name.
    """
    start = "XXXX" if start_year is None else str(start_year)
    end = "XXXX" if end_year is None else str(end_year)
    return f"{safe_subject(subject, default)}_{start}-{end}.{ext.lstrip('.')}"
