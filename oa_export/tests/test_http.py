import pytest
import requests

from oa_export.errors import UpstreamError
from oa_export.utils.http import get_json, http_get

class FakeResponse:
    def __init__(self, status_code, text="", headers=None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}

@pytest.fixture()
def script(monkeypatch):
    """
    Replays a fixed list of responses (or exceptions) from Session.get and
    records the sleeps between attempts.
    """
    state = {"queue": [], "calls": [], "sleeps": []}

    def fake_get(self, url, params=None, headers=None, timeout=None):
        state["calls"].append({"url": url, "params": params, "timeout": timeout})
        item = state["queue"].pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(requests.Session, "get", fake_get)
    monkeypatch.setattr("oa_export.utils.http.time.sleep", lambda s: state["sleeps"].append(s))
    return state

def test_retries_then_succeeds(script):
    script["queue"] = [FakeResponse(503), FakeResponse(200, '{"books": []}')]
    status, text, _ = http_get("https://doab.test/scrape", params={"query": "x"}, timeout=5)
    assert status == 200 and text == '{"books": []}'
    assert len(script["calls"]) == 2
    assert script["calls"][0]["timeout"] == 5
    assert len(script["sleeps"]) == 1

def test_retry_after_is_honoured(script):
    script["queue"] = [FakeResponse(429, headers={"Retry-After": "7"}), FakeResponse(200, "[]")]
    http_get("https://doaj.test/search")
    assert script["sleeps"] == [7.0]

def test_exhausted_retries_return_last_status(script):
    script["queue"] = [FakeResponse(502)] * 3
    status, _, _ = http_get("https://doab.test/scrape", retries=3)
    assert status == 502
    assert len(script["sleeps"]) == 2

def test_get_json_decodes_body(script):
    script["queue"] = [FakeResponse(200, '[{"Title": "Maps"}]')]
    assert get_json("https://doaj.test/search", source="doaj") == [{"Title": "Maps"}]

def test_get_json_http_error(script):
    script["queue"] = [FakeResponse(404, "not found")]
    with pytest.raises(UpstreamError) as exc:
        get_json("https://doaj.test/search", source="doaj")
    assert exc.value.status == 404
    assert exc.value.source == "doaj"

def test_get_json_invalid_json(script):
    script["queue"] = [FakeResponse(200, "<html>Service waking up</html>")]
    with pytest.raises(UpstreamError, match="not valid JSON"):
        get_json("https://doab.test/scrape", source="doab")

def test_get_json_network_error(script):
    script["queue"] = [requests.ConnectionError("refused")] * 3
    with pytest.raises(UpstreamError, match="network error"):
        get_json("https://doab.test/scrape", source="doab")
    assert len(script["calls"]) == 3
