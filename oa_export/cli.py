from __future__ import annotations
import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .agents.coordinator import CoordinatorAgent
from .config import DEFAULT_END_YEAR, DEFAULT_LIMIT, DEFAULT_START_YEAR, DEFAULT_TIMEOUT, SOURCES
from .errors import QueryValidationError, UpstreamError
from .models import SearchQuery
from .utils.delivery import save_to_dir


def _year(value: str) -> int:
    """argparse type: a non-negative integer year."""
    year = int(value)
    if year < 0:
        raise argparse.ArgumentTypeError(f"year must be >= 0, got {year}")
    return year


def build_parser() -> argparse.ArgumentParser:
    """
    Builds and returns an argument parser for the command-line interface.

    Returns:
        argparse.ArgumentParser: An argument parser configured with all the available command-line options.
    """
    p = argparse.ArgumentParser(
        prog="oa-export",
        description="Search DOAB / DOAJ and export the results as CSV or Word"
    )
    p.add_argument("--subject", "-s", required=True, help="Subject or topic, e.g. 'Computer Science'")
    p.add_argument("--source", choices=sorted(SOURCES), default="doab",
                   help="Upstream service: doab (books), doaj (articles) or local (sample data). Default: doab")
    p.add_argument("--from-year", type=_year, default=DEFAULT_START_YEAR,
                   help=f"Only include items published on/after this year (default: {DEFAULT_START_YEAR})")
    p.add_argument("--to-year", type=_year, default=DEFAULT_END_YEAR,
                   help=f"Only include items published on/before this year (default: {DEFAULT_END_YEAR})")
    p.add_argument("--limit", "-n", type=int, default=DEFAULT_LIMIT,
                   help=f"Maximum number of results (default: {DEFAULT_LIMIT})")
    p.add_argument("--format", "-f", dest="formats", action="append", choices=["csv", "docx"],
                   help="Export format; repeat for both (default: csv)")
    p.add_argument("--out", "-o", default=".", help="Directory receiving the exported files (default: .)")
    p.add_argument("--email", default=os.getenv("OA_EXPORT_CONTACT_EMAIL", "you@example.com"),
                   help="Contact email sent in the User-Agent (default from env OA_EXPORT_CONTACT_EMAIL)")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help=f"HTTP timeout seconds per request (default: {DEFAULT_TIMEOUT:g})")
    p.add_argument("--log-dir", default=None, help="Directory for the JSON-lines run log")
    return p


def _print_table(records) -> None:
    for r in records:
        link = r.url or "—"
        print(f"  {r.year_text:>4}  {r.title[:60]:<60}  {r.authors[:30]:<30}  {link}")


def main(argv: list[str] | None = None) -> int:
    """
    Parses command-line arguments, runs one search and writes the requested exports.

    Returns:
        int: 0 on success, 1 on upstream failure or when nothing was exported, 2 on invalid input.
    """
    load_dotenv(override=False)
    args = build_parser().parse_args(argv)

    coordinator = CoordinatorAgent(
        contact_email=args.email,
        source=args.source,
        timeout=args.timeout,
        log_dir=args.log_dir,
    )
    query = SearchQuery(
        subject=args.subject,
        start_year=args.from_year,
        end_year=args.to_year,
        limit=args.limit,
    )

    try:
        records = coordinator.search(query)
    except QueryValidationError as e:
        print(f"⚠ {e}", file=sys.stderr)
        return 2
    except UpstreamError as e:
        print(f"✖ Search failed: {e}. Please retry.", file=sys.stderr)
        return 1

    if not records:
        print("No results found for your search.")
        return 1

    print(f"Found {len(records)} record{'s' if len(records) != 1 else ''}:")
    _print_table(records)

    deliver = save_to_dir(Path(args.out).expanduser().resolve())
    status = 0
    for fmt in args.formats or ["csv"]:
        outcome = coordinator.export(fmt, deliver=deliver)
        if outcome.ok:
            print(f"✔ {outcome.message}")
        else:
            print(f"✖ {outcome.message}", file=sys.stderr)
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())
