from __future__ import annotations

import logging
from typing import Any, Optional

from flask import current_app

from .client import CacheSnapshot, ResourceClient
from .errors import ResourceError
from .keys import BLOG_KEY, CONTACTS_KEY, DONATIONS_PATH, PROGRAMS_KEY
from .transport import HttpTransport, Transport, TransportResponse, WsgiTransport

log = logging.getLogger(__name__)

EXTENSION_KEY = "impactsite.resources"


def build_transport(app: Any) -> Transport:
    """Remote API when API_BASE_URL is set, else the bundled /api in-process."""
    base_url = (app.config.get("API_BASE_URL") or "").strip()
    if base_url:
        return HttpTransport(
            base_url,
            timeout=float(app.config.get("API_TIMEOUT", 10.0)),
            retries=int(app.config.get("API_RETRIES", 2)),
        )
    return WsgiTransport(app)


def init_resources(app: Any, transport: Optional[Transport] = None) -> ResourceClient:
    """Create the app's ResourceClient and register it on app.extensions."""
    from impactsite.extensions import get_executor
    from impactsite.schemas import ENTITY_PARSERS

    transport = transport or build_transport(app)
    client = ResourceClient(transport, parsers=ENTITY_PARSERS, executor=get_executor())
    app.extensions[EXTENSION_KEY] = client
    log.info("Resource client ready (%s)", type(transport).__name__)
    return client


def get_client() -> ResourceClient:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "BLOG_KEY",
    "CONTACTS_KEY",
    "DONATIONS_PATH",
    "PROGRAMS_KEY",
    "CacheSnapshot",
    "HttpTransport",
    "ResourceClient",
    "ResourceError",
    "Transport",
    "TransportResponse",
    "WsgiTransport",
    "build_transport",
    "get_client",
    "init_resources",
]
