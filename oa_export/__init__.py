"""
Open Access Export Agent (oa-export)

A small, API-first agent that searches open-access bibliographic services
(DOAJ journal articles, DOAB books), reconciles their record schemas into one
canonical record, and exports the result set as CSV or as a Word document.

Pipeline (high-level):
- Discovery = turn a search query into a concrete upstream request
- Fetch     = execute the request and decode the JSON body
- Extract   = normalise each raw record through its source schema adapter
- Export    = encode the in-memory result set and hand the file to delivery

Result sets live in memory only; every export works on the latest search.
"""
__all__ = ["agents"]
__version__ = "0.2.0"
