from __future__ import annotations
import re
from typing import Any

from ..config import PLACEHOLDER

_LEADING_YEAR = re.compile(r"^\s*(\d{4})(?!\d)")
# Lone surrogates and U+FFFE/U+FFFF: valid in JSON, unencodable in UTF-8 or XML
_UNENCODABLE = re.compile(r"[\ud800-\udfff\ufffe\uffff]")

def strip_unencodable(s: str) -> str:
    return _UNENCODABLE.sub("", s)

def coerce_year(value: Any) -> int | None:
    """Best-effort integer year; None when nothing usable is present."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            pass
        # ISO dates like 2021-05-01
        m = _LEADING_YEAR.match(s)
        if m:
            return int(m.group(1))
    return None

def join_authors(value: Any) -> str:
    """Join a sequence of names with ", "; pass strings through."""
    if isinstance(value, str):
        value = strip_unencodable(value)
        return value if value.strip() else PLACEHOLDER
    if isinstance(value, (list, tuple)):
        names = []
        for a in value:
            # DOAJ bibjson style: {"name": "..."}
            if isinstance(a, dict):
                a = a.get("name")
            if isinstance(a, str):
                a = strip_unencodable(a).strip()
                if a:
                    names.append(a)
        return ", ".join(names) if names else PLACEHOLDER
    return PLACEHOLDER

def title_text(value: Any) -> str:
    if isinstance(value, str):
        return strip_unencodable(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""

def link_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        value = strip_unencodable(value)
        if value.strip():
            return value
    return None
