"""
Transports move one JSON request to the REST backend and back.

HttpTransport talks to a remote API over requests; WsgiTransport dispatches
in-process to the bundled /api blueprint through the Werkzeug test client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import ResourceError

log = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json"}


@dataclass(frozen=True)
class TransportResponse:
    status: int
    payload: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport:
    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TransportResponse:
        raise NotImplementedError


def _build_session(retries: int) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        backoff_factor=0.3,
        status_forcelist=[502, 503, 504],
        allowed_methods=frozenset(["GET", "HEAD"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    s.headers.update(JSON_HEADERS)
    return s


class HttpTransport(Transport):
    """Remote backend over HTTP. Only idempotent GETs are retried."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or _build_session(retries)

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TransportResponse:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise ResourceError(f"Network error: {e}", status=None, path=path) from e

        text = r.text or ""
        payload: Any = None
        if text:
            try:
                payload = r.json()
            except ValueError:
                payload = None
        return TransportResponse(status=r.status_code, payload=payload, text=text)


class WsgiTransport(Transport):
    """In-process calls into a Flask app (the bundled reference API)."""

    def __init__(self, app: Any):
        self.app = app

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TransportResponse:
        try:
            with self.app.test_client() as client:
                r = client.open(path, method=method, json=body, headers=JSON_HEADERS)
                text = r.get_data(as_text=True)
                payload = r.get_json(silent=True)
                return TransportResponse(status=r.status_code, payload=payload, text=text)
        except Exception as e:
            log.exception("In-process %s %s failed", method, path)
            raise ResourceError(f"Request failed: {e}", status=None, path=path) from e
