from __future__ import annotations
import os

# Upstream endpoints and User-Agent
DOAJ_SEARCH_API = os.environ.get(
    "OA_EXPORT_DOAJ_API", "https://doaj-scrapper-api.onrender.com/search"
)                                                          # JSON array
"""The search endpoint of the DOAJ article scraper service."""
DOAB_SCRAPE_API = os.environ.get(
    "OA_EXPORT_DOAB_API", "https://doab-scrapper-api.onrender.com/scrape"
)                                                          # JSON {"books": [...]}
"""The scrape endpoint of the DOAB book scraper service."""

DEFAULT_USER_AGENT = "oa-export/0.2 (+https://example.org/contact; mailto:{email})"
"""The default User-Agent string used for upstream requests."""
DEFAULT_TIMEOUT = float(os.environ.get("OA_EXPORT_TIMEOUT", "30"))
"""Seconds to wait for an upstream response (the scraper services cold-start slowly)."""
LOG_DIR = os.environ.get("OA_EXPORT_LOG_DIR", "logs")
"""Directory receiving the JSON-lines run log."""

# Search defaults (mirrors the search form)
DEFAULT_START_YEAR = 2021
"""Default lower bound of the publication year range."""
DEFAULT_END_YEAR = 2025
"""Default upper bound of the publication year range."""
DEFAULT_LIMIT = 50
"""Default maximum number of records per search."""

# Rendering
PLACEHOLDER = "—"
"""Rendered in place of a missing year or author list (an em dash)."""
EXPORT_HEADERS = ("Year", "Author(s)/Contributors", "Title", "URL")
"""Column headers shared by the CSV and the Word table."""
MIME_TYPES = {
    "csv": "text/csv;charset=utf-8",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
"""MIME type handed to the delivery collaborator, keyed by export format."""

DOCX_TABLE_WIDTH_TWIPS = 10000
"""Total table width in twentieths of a point."""
DOCX_COLUMN_PERCENTS = (10, 25, 45, 20)
"""Share of the table width given to Year, Authors, Title and URL."""
DOCX_HEADER_FILL = "E5E7EB"
"""Background colour of the header row cells."""
DOCX_BORDER_COLOR = "000000"
"""Colour of every table border."""

SOURCES = {
    "doab": {
        "default_name": "books",
        "link_caption": "View Book",
        "heading": 'Book Results for "{subject}" ({start}-{end})',
    },
    "doaj": {
        "default_name": "articles",
        "link_caption": "View",
        "heading": 'DOAJ Articles for "{subject}" ({start}-{end})',
    },
    "local": {
        "default_name": "books",
        "link_caption": "View Book",
        "heading": 'Book Results for "{subject}" ({start}-{end})',
    },
}
"""Per-source export profile: filename fallback token, link caption, heading template."""
