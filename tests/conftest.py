from __future__ import annotations

import copy
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Tuple

import pytest

from impactsite import create_app
from impactsite.config import TestingConfig
from impactsite.extensions import db
from impactsite.resources import ResourceClient, Transport, TransportResponse, init_resources
from impactsite.schemas import ENTITY_PARSERS


# ─────────────────────────────────────────────────────────────
# Transport doubles
# ─────────────────────────────────────────────────────────────
class Hold:
    """Parks one request until the test releases it."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.released = threading.Event()

    def release(self) -> None:
        self.released.set()


class ScriptedTransport(Transport):
    """Replies from a per-(method, path) queue; the last reply repeats."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self._replies: Dict[Tuple[str, str], Deque[TransportResponse]] = {}
        self._holds: Dict[Tuple[str, str], Deque[Hold]] = {}
        self._lock = threading.Lock()

    def reply(self, method: str, path: str, payload: Any, status: int = 200) -> "ScriptedTransport":
        self._replies.setdefault((method, path), deque()).append(TransportResponse(status, payload))
        return self

    def hold(self, method: str, path: str) -> Hold:
        h = Hold()
        self._holds.setdefault((method, path), deque()).append(h)
        return h

    def count(self, method: str, path: Optional[str] = None) -> int:
        return sum(1 for m, p, _ in self.calls if m == method and (path is None or p == path))

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TransportResponse:
        with self._lock:
            self.calls.append((method, path, copy.deepcopy(body)))
            queue = self._replies.get((method, path))
            if not queue:
                resp = TransportResponse(404, {"message": f"No reply scripted for {method} {path}"})
            elif len(queue) > 1:
                resp = queue.popleft()
            else:
                resp = queue[0]
            holds = self._holds.get((method, path))
            hold = holds.popleft() if holds else None
        if hold is not None:
            hold.started.set()
            hold.released.wait(5)
        return resp


class InMemoryApi(Transport):
    """A small stand-in for the REST backend, good enough for page flows."""

    def __init__(self) -> None:
        self.programs: List[Dict[str, Any]] = []
        self.blog: List[Dict[str, Any]] = []
        self.contacts: List[Dict[str, Any]] = []
        self.donations: List[Dict[str, Any]] = []
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self._failures: Dict[Tuple[str, str], TransportResponse] = {}
        self._holds: Dict[Tuple[str, str], Deque[Hold]] = {}
        self._lock = threading.Lock()
        self._seq = 0

    # test controls
    def fail(self, method: str, path: str, status: int = 500, message: str = "Server exploded") -> None:
        self._failures[(method, path)] = TransportResponse(status, {"message": message})

    def recover(self, method: str, path: str) -> None:
        self._failures.pop((method, path), None)

    def hold(self, method: str, path: str) -> Hold:
        h = Hold()
        self._holds.setdefault((method, path), deque()).append(h)
        return h

    def count(self, method: str, path: Optional[str] = None) -> int:
        return sum(1 for m, p, _ in self.calls if m == method and (path is None or p == path))

    def bodies(self, method: str) -> List[Optional[Dict[str, Any]]]:
        return [b for m, _, b in self.calls if m == method]

    def _next_id(self) -> int:
        self._seq += 1
        return self._seq

    def add_program(self, title: str, **extra: Any) -> Dict[str, Any]:
        row = {
            "id": f"p{self._next_id()}",
            "title": title,
            "category": extra.get("category", "Health"),
            "description": extra.get("description", f"About {title}"),
            "image": extra.get("image", "https://example.org/img.png"),
            "createdAt": extra.get("createdAt", _now()),
        }
        self.programs.append(row)
        return row

    def add_post(self, title: str, published_at: str, **extra: Any) -> Dict[str, Any]:
        row = {
            "id": self._next_id(),
            "title": title,
            "category": extra.get("category", "Health"),
            "excerpt": extra.get("excerpt", "Short excerpt"),
            "content": extra.get("content", "First.\n\nSecond."),
            "readTime": extra.get("readTime", 3),
            "publishedAt": published_at,
        }
        self.blog.append(row)
        return row

    def add_contact(self, name: str, **extra: Any) -> Dict[str, Any]:
        row = {
            "id": self._next_id(),
            "name": name,
            "email": extra.get("email", "someone@example.org"),
            "subject": extra.get("subject", "Hello"),
            "message": extra.get("message", "Just saying hi."),
            "createdAt": extra.get("createdAt", _now()),
        }
        self.contacts.append(row)
        return row

    # transport
    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TransportResponse:
        with self._lock:
            self.calls.append((method, path, copy.deepcopy(body)))
            holds = self._holds.get((method, path))
            hold = holds.popleft() if holds else None
        if hold is not None:
            hold.started.set()
            hold.released.wait(5)
        failure = self._failures.get((method, path))
        if failure is not None:
            return failure
        with self._lock:
            return self._dispatch(method, path, body or {})

    def _dispatch(self, method: str, path: str, body: Dict[str, Any]) -> TransportResponse:
        if path == "/api/programs":
            if method == "GET":
                return TransportResponse(200, copy.deepcopy(self.programs))
            if method == "POST":
                row = {"id": f"p{self._next_id()}", "createdAt": _now(), **body}
                self.programs.append(row)
                return TransportResponse(201, dict(row))
        if path.startswith("/api/programs/"):
            program_id = path.rsplit("/", 1)[-1]
            row = next((p for p in self.programs if p["id"] == program_id), None)
            if row is None:
                return TransportResponse(404, {"message": "Program not found"})
            if method == "PATCH":
                row.update(body)
                return TransportResponse(200, dict(row))
            if method == "DELETE":
                self.programs.remove(row)
                return TransportResponse(204, None)
        if path == "/api/blog" and method == "GET":
            return TransportResponse(200, copy.deepcopy(self.blog))
        if path == "/api/contact-messages":
            if method == "GET":
                return TransportResponse(200, copy.deepcopy(self.contacts))
            if method == "POST":
                row = {"id": self._next_id(), "createdAt": _now(), **body}
                self.contacts.insert(0, row)
                return TransportResponse(201, dict(row))
        if path == "/api/donations" and method == "POST":
            row = {"id": self._next_id(), "status": "pledged", **body}
            self.donations.append(row)
            return TransportResponse(201, dict(row))
        return TransportResponse(404, {"message": "Not found"})


def _now() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


# ─────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-fetch")
    yield pool
    pool.shutdown(wait=True, cancel_futures=True)


@pytest.fixture
def scripted() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def memory_api() -> InMemoryApi:
    return InMemoryApi()


@pytest.fixture
def resource_client(scripted, executor) -> ResourceClient:
    return ResourceClient(scripted, parsers=ENTITY_PARSERS, executor=executor)


@pytest.fixture
def memory_client(memory_api, executor) -> ResourceClient:
    return ResourceClient(memory_api, parsers=ENTITY_PARSERS, executor=executor)


@pytest.fixture
def app(tmp_path: Path):
    # File-backed sqlite: background fetches use their own connections.
    app = create_app(
        TestingConfig,
        overrides={"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}"},
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_backend(app, memory_api) -> InMemoryApi:
    """Point the app's ResourceClient at the in-memory backend."""
    init_resources(app, transport=memory_api)
    return memory_api


@pytest.fixture
def make_program(client):
    def _make(title: str = "Clean Water", **extra: Any) -> Dict[str, Any]:
        body = {
            "title": title,
            "category": extra.get("category", "Health"),
            "description": extra.get("description", "Wells and filters for rural schools."),
            "image": extra.get("image", "https://example.org/water.png"),
        }
        r = client.post("/api/programs", json=body)
        assert r.status_code == 201, r.get_json()
        return r.get_json()

    return _make
