from __future__ import annotations

"""Lightweight HTTP client util.

Uses stdlib urllib; focus is a single GET returning decoded JSON. Retries are
opt-in: rate fetching runs with ``retries=0`` so one call is one request.
"""
import http.client
import json
import time
import urllib.request
import urllib.error
from typing import Any, Optional


class HttpError(Exception):
    pass


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 0, backoff: float = 0.5
) -> Any:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            req = urllib.request.Request(url, headers={"Accept": "application/json"})
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                if not 200 <= resp.status < 300:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                data = resp.read()
                return json.loads(data.decode("utf-8"))
        except (
            urllib.error.URLError,
            http.client.HTTPException,  # IncompleteRead, BadStatusLine
            TimeoutError,
            OSError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON / unicode decode
            last_err = e
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
