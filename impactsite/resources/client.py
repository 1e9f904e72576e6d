"""
ResourceClient: cache-aware reads and plain writes against the REST backend.

Every collection path ("/api/programs", ...) is a cache key. Reads are served
from the cache until the key is invalidated; concurrent reads of the same
un-invalidated key share one in-flight Future. Writes never touch the cache;
callers invalidate the affected key after a successful write.

Staleness is tracked with a per-key generation counter. `invalidate` bumps
the generation, a fetch remembers the generation it started under, and a
response is only stored if no newer generation has already been stored.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import ResourceError, message_from_payload
from .transport import Transport, TransportResponse

log = logging.getLogger(__name__)

WRITE_METHODS = frozenset(["POST", "PATCH", "PUT", "DELETE"])

Parser = Callable[[Mapping[str, Any]], Any]
Subscriber = Callable[[str, "CacheSnapshot"], None]


@dataclass(frozen=True)
class CacheSnapshot:
    """Point-in-time view of one cache entry. Never blocks."""

    key: str
    status: str  # idle | loading | success | error
    data: Optional[Tuple[Any, ...]]
    error: Optional[ResourceError]
    updated_at: Optional[float]
    is_stale: bool


class _Entry:
    __slots__ = (
        "data",
        "error",
        "updated_at",
        "generation",
        "data_generation",
        "inflight",
        "inflight_generation",
        "subscribers",
        "stale_write_seq",
    )

    def __init__(self) -> None:
        self.data: Optional[Tuple[Any, ...]] = None
        self.error: Optional[ResourceError] = None
        self.updated_at: Optional[float] = None
        self.generation = 0
        self.data_generation = -1
        self.inflight: Optional[Future] = None
        self.inflight_generation = -1
        self.subscribers: List[Subscriber] = []
        self.stale_write_seq = -1

    @property
    def fresh(self) -> bool:
        return self.data is not None and self.data_generation == self.generation


class ResourceClient:
    def __init__(
        self,
        transport: Transport,
        parsers: Optional[Dict[str, Parser]] = None,
        executor: Optional[Executor] = None,
    ):
        if executor is None:
            from impactsite.extensions import get_executor

            executor = get_executor()
        self.transport = transport
        self.parsers = dict(parsers or {})
        self._executor = executor
        self._lock = threading.RLock()
        self._entries: Dict[str, _Entry] = {}
        self._write_seq = 0

    # ─────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────
    def read(self, key: str, timeout: Optional[float] = None) -> Tuple[Any, ...]:
        """Blocking read. Raises ResourceError on failure, TimeoutError on timeout."""
        return self.read_async(key).result(timeout=timeout)

    def read_async(self, key: str) -> Future:
        with self._lock:
            entry = self._entries.setdefault(key, _Entry())
            if entry.fresh:
                log.debug("cache hit %s (gen=%s)", key, entry.generation)
                done: Future = Future()
                done.set_result(entry.data)
                return done
            return self._ensure_fetch(key, entry)

    def peek(self, key: str) -> CacheSnapshot:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return CacheSnapshot(key, "idle", None, None, None, True)
            return self._snapshot(key, entry)

    def _snapshot(self, key: str, entry: _Entry) -> CacheSnapshot:
        if entry.inflight is not None:
            status = "loading"
        elif entry.error is not None:
            status = "error"
        elif entry.data is not None:
            status = "success"
        else:
            status = "idle"
        return CacheSnapshot(
            key=key,
            status=status,
            data=entry.data,
            error=entry.error,
            updated_at=entry.updated_at,
            is_stale=not entry.fresh,
        )

    def _ensure_fetch(self, key: str, entry: _Entry) -> Future:
        # Caller holds the lock.
        if entry.inflight is not None and entry.inflight_generation == entry.generation:
            log.debug("joining in-flight fetch for %s (gen=%s)", key, entry.generation)
            return entry.inflight
        gen = entry.generation
        fut = self._executor.submit(self._fetch, key, gen)
        entry.inflight = fut
        entry.inflight_generation = gen
        return fut

    def _fetch(self, key: str, gen: int) -> Tuple[Any, ...]:
        log.debug("GET %s (gen=%s)", key, gen)
        try:
            resp = self.transport.request("GET", key)
            data = self._parse(key, resp)
        except ResourceError as e:
            log.warning("Fetch %s failed (status=%s): %s", key, e.status, e.message)
            self._settle(key, gen, error=e)
            raise
        except Exception as e:
            log.exception("Unexpected error fetching %s", key)
            err = ResourceError(f"Failed to load {key}: {e}", path=key)
            self._settle(key, gen, error=err)
            raise err from e
        self._settle(key, gen, data=data)
        return data

    def _parse(self, key: str, resp: TransportResponse) -> Tuple[Any, ...]:
        if not resp.ok:
            raise ResourceError(
                message_from_payload(resp.payload, resp.text, resp.status),
                status=resp.status,
                path=key,
            )
        if not isinstance(resp.payload, list):
            raise ResourceError(f"Expected a list from {key}", status=resp.status, path=key)

        parser = self.parsers.get(key)
        try:
            if parser is None:
                return tuple(MappingProxyType(dict(item)) for item in resp.payload)
            return tuple(parser(item) for item in resp.payload)
        except (KeyError, TypeError, ValueError) as e:
            raise ResourceError(f"Malformed item in {key}: {e}", status=resp.status, path=key) from e

    def _settle(
        self,
        key: str,
        gen: int,
        data: Optional[Tuple[Any, ...]] = None,
        error: Optional[ResourceError] = None,
    ) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                # clear() ran while this fetch was in flight
                return
            if entry.inflight_generation == gen:
                entry.inflight = None

            if gen < entry.data_generation:
                log.debug("discarding stale response for %s (gen=%s < %s)", key, gen, entry.data_generation)
                return

            if error is None:
                entry.data = data
                entry.data_generation = gen
                entry.error = None
                entry.updated_at = time.time()
            else:
                entry.error = error

            subscribers = list(entry.subscribers)
            snapshot = self._snapshot(key, entry)

        for callback in subscribers:
            try:
                callback(key, snapshot)
            except Exception:
                log.exception("Subscriber for %s raised", key)

    # ─────────────────────────────────────────────────────────
    # Invalidation & subscriptions
    # ─────────────────────────────────────────────────────────
    def invalidate(self, key: str) -> None:
        """
        Mark `key` stale so the next read goes to the network.

        A repeat invalidate with no write in between is a no-op, so two
        back-to-back invalidations cost at most one extra read. When the key
        has subscribers a background refetch is started right away.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return
            if not entry.fresh and entry.stale_write_seq == self._write_seq:
                log.debug("%s already stale, invalidate skipped", key)
            else:
                entry.generation += 1
                entry.stale_write_seq = self._write_seq
                log.debug("invalidated %s (gen=%s)", key, entry.generation)
            if entry.subscribers:
                self._ensure_fetch(key, entry)

    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            entry = self._entries.setdefault(key, _Entry())
            entry.subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                current = self._entries.get(key)
                if current is not None and callback in current.subscribers:
                    current.subscribers.remove(callback)

        return unsubscribe

    def clear(self) -> None:
        """Drop every entry, like a full page reload."""
        with self._lock:
            self._entries.clear()

    # ─────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────
    def write(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Issue a mutating request. Does not touch the cache.
        Returns the JSON object the server answered with (None for 204).
        """
        method = method.upper()
        if method not in WRITE_METHODS:
            raise ValueError(f"write() does not accept {method}")

        resp = self.transport.request(method, path, body)
        if not resp.ok:
            message = message_from_payload(resp.payload, resp.text, resp.status)
            log.warning("%s %s -> %s: %s", method, path, resp.status, message)
            raise ResourceError(message, status=resp.status, path=path)

        with self._lock:
            self._write_seq += 1
        log.info("%s %s -> %s", method, path, resp.status)
        return resp.payload if isinstance(resp.payload, dict) else None
