from __future__ import annotations
import io
import os
from dataclasses import asdict
from pathlib import Path
from datetime import datetime, UTC
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from dotenv import load_dotenv
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env", override=False)

from . import __version__
from .agents.coordinator import CoordinatorAgent
from .config import DEFAULT_END_YEAR, DEFAULT_LIMIT, DEFAULT_START_YEAR, DEFAULT_TIMEOUT
from .errors import QueryValidationError, UpstreamError
from .models import SearchQuery

# --- config from env ---
CONTACT_EMAIL = (os.environ.get("OA_EXPORT_CONTACT_EMAIL", "") or "").strip() or "contact@example.com"

app = FastAPI(title="OA Export API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_SESSION: CoordinatorAgent | None = None

def get_session() -> CoordinatorAgent:
    """The process-wide session holding the latest result set."""
    global _SESSION
    if _SESSION is None:
        _SESSION = CoordinatorAgent(contact_email=CONTACT_EMAIL, timeout=DEFAULT_TIMEOUT)
    return _SESSION

# ---------- models ----------

class SearchRequest(BaseModel):
    """Model for the search request body."""
    source: Literal["doab", "doaj", "local"] = "doab"
    subject: str = Field(..., description="Subject or topic, e.g. 'African Studies'")
    start_year: int = Field(DEFAULT_START_YEAR, ge=0, le=9999)
    end_year: int = Field(DEFAULT_END_YEAR, ge=0, le=9999)
    limit: int = Field(DEFAULT_LIMIT, ge=0, le=1000)

class RecordOut(BaseModel):
    """Model for one exported record."""
    year: Optional[int] = None
    authors: str
    title: str
    url: Optional[str] = None

# ---------- routes ----------

@app.get("/", include_in_schema=False)
def root():
    """Root endpoint."""
    return {"service": "oa-export-api", "docs": "/docs", "health": "/health"}

@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "time": datetime.now(UTC).isoformat()}

@app.post("/search")
def search(req: SearchRequest, session: CoordinatorAgent = Depends(get_session)):
    """Runs a search and makes its records the current result set."""
    query = SearchQuery(subject=req.subject, start_year=req.start_year,
                        end_year=req.end_year, limit=req.limit)
    try:
        records = session.search(query, source=req.source)
    except QueryValidationError as e:
        raise HTTPException(400, str(e))
    except UpstreamError as e:
        raise HTTPException(502, f"Search failed: {e}. Please retry.")

    return {
        "ok": True,
        "source": req.source,
        "count": len(records),
        "records": [RecordOut(**asdict(r)) for r in records],
    }

@app.get("/results")
def results(session: CoordinatorAgent = Depends(get_session)):
    """Returns the current result set and the query that produced it."""
    query = session.query
    return {
        "source": session.last_source,
        "query": asdict(query) if query else None,
        "count": len(session.results),
        "records": [RecordOut(**asdict(r)) for r in session.results],
    }

@app.get("/export/{fmt}")
def export(fmt: Literal["csv", "docx"], session: CoordinatorAgent = Depends(get_session)):
    """Encodes the current result set and streams it back as an attachment."""
    outcome = session.export(fmt)
    if not outcome.ok:
        status = 500 if outcome.failed else 400
        raise HTTPException(status, outcome.message)

    return StreamingResponse(
        io.BytesIO(outcome.blob),
        media_type=outcome.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{outcome.filename}"'},
    )
