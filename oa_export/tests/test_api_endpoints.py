# oa_export/tests/test_api_endpoints.py
from __future__ import annotations
import pytest
from fastapi.testclient import TestClient

# Import the FastAPI app
from oa_export.agents.coordinator import CoordinatorAgent
from oa_export.api import app, get_session
from oa_export.errors import UpstreamError

@pytest.fixture()
def client(tmp_path):
    # A fresh session per test, logging into the temp dir
    session = CoordinatorAgent(contact_email="test@example.com", source="local", log_dir=tmp_path)
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()

def _search(client, **body):
    payload = {"source": "local", "subject": "data", "start_year": 2021, "end_year": 2023, "limit": 10}
    payload.update(body)
    return client.post("/search", json=payload)

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_export_before_search_is_refused(client):
    r = client.get("/export/csv")
    assert r.status_code == 400
    assert r.json()["detail"] == "Nothing to export"

def test_search_local_catalogue(client):
    r = _search(client)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 1
    assert body["records"][0] == {
        "year": 2021,
        "authors": "Bob Wilson, Carol Brown",
        "title": "Data Structures and Algorithms",
        "url": "https://example.com/book3",
    }

    r = client.get("/results")
    assert r.json()["count"] == 1
    assert r.json()["query"]["subject"] == "data"

def test_export_csv_download(client):
    _search(client)
    r = client.get("/export/csv")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.headers["content-disposition"] == 'attachment; filename="data_2021-2023.csv"'
    assert r.text.startswith('"Year","Author(s)/Contributors","Title","URL"\n"2021"')

def test_export_docx_download(client):
    _search(client)
    r = client.get("/export/docx")
    assert r.status_code == 200
    assert r.headers["content-disposition"].endswith('data_2021-2023.docx"')
    assert r.content[:2] == b"PK"

def test_unknown_export_format(client):
    _search(client)
    assert client.get("/export/pdf").status_code == 422

def test_blank_subject(client):
    r = _search(client, subject="   ")
    assert r.status_code == 400
    assert "subject" in r.json()["detail"]

def test_upstream_failure_is_502_and_clears_results(client, monkeypatch):
    _search(client)

    def fail(url, *, source, **kwargs):
        raise UpstreamError("doab: network error: timed out", source=source)

    monkeypatch.setattr("oa_export.agents.fetch.get_json", fail)
    r = _search(client, source="doab")
    assert r.status_code == 502
    assert r.json()["detail"].startswith("Search failed:")
    assert client.get("/results").json()["count"] == 0
    assert client.get("/export/csv").status_code == 400
