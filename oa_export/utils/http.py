from __future__ import annotations
import json, time, random
import requests
from typing import Any, Dict, Optional, Tuple

from ..errors import UpstreamError

RETRYABLE_STATUS = {429, 500, 502, 503, 504}

def _backoff(attempt: int, backoff_base: float, max_sleep: float) -> float:
    return min((backoff_base ** attempt) * 1.5 + random.uniform(0, 0.5), max_sleep)

def http_get(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
    retries: int = 3,
    backoff_base: float = 0.8,
    max_sleep: float = 10.0,
) -> Tuple[int, str, Dict[str, str]]:
    """
    GET with retry on 429/5xx. Honors Retry-After (seconds) when present.
    Exponential backoff with jitter. Returns (status_code, text, response_headers).
    Network errors are retried too; the last one is re-raised.
    """
    last_exc: requests.RequestException | None = None
    status, text, hdrs = 0, "", {}
    with requests.Session() as session:
        for attempt in range(retries):
            try:
                r = session.get(url, params=params, headers=headers, timeout=timeout)
            except requests.RequestException as e:
                last_exc = e
                time.sleep(_backoff(attempt, backoff_base, max_sleep))
                continue

            status, text, hdrs = r.status_code, r.text, dict(r.headers)
            if status not in RETRYABLE_STATUS:
                return status, text, hdrs

            retry_after = 0.0
            ra = r.headers.get("Retry-After")
            if ra:
                try:
                    retry_after = float(ra)
                except ValueError:
                    retry_after = 0.0
            if attempt < retries - 1:
                time.sleep(max(retry_after, _backoff(attempt, backoff_base, max_sleep)))

    if status:
        # Retries exhausted on a retryable status: hand back the last answer
        return status, text, hdrs
    if last_exc:
        raise last_exc
    raise RuntimeError(f"Exceeded retries for {url}")

def get_json(url: str, *, source: str, **kwargs) -> Any:
    """
    http_get + JSON decoding. Any failure (network, non-2xx, bad JSON)
    becomes an UpstreamError tagged with `source`.
    """
    try:
        status, text, _ = http_get(url, **kwargs)
    except requests.RequestException as e:
        raise UpstreamError(f"{source}: network error: {e}", source=source) from e
    if status >= 400:
        raise UpstreamError(f"{source}: upstream returned HTTP {status}", source=source, status=status)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise UpstreamError(f"{source}: response is not valid JSON", source=source, status=status) from e
