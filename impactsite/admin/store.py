"""
Server-side home for CrudPage instances.

A browser session gets its own page per resource, so an open dialog survives
the POST/redirect/GET round trips. Oldest sessions are evicted first.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Tuple
from uuid import uuid4

from flask import current_app, session

from impactsite.resources import ResourceClient, get_client

from .crud import CrudPage
from .registry import AdminResource

EXTENSION_KEY = "impactsite.pages"
SESSION_KEY = "admin_page_id"


class PageStore:
    def __init__(self, max_pages: int = 512):
        self.max_pages = max_pages
        self._pages: "OrderedDict[Tuple[str, str], CrudPage]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str, resource: AdminResource, client: ResourceClient) -> CrudPage:
        key = (session_id, resource.name)
        with self._lock:
            page = self._pages.get(key)
            if page is None or page.client is not client:
                page = CrudPage(resource, client)
                self._pages[key] = page
            self._pages.move_to_end(key)
            while len(self._pages) > self.max_pages:
                self._pages.popitem(last=False)
            return page

    def clear(self) -> None:
        with self._lock:
            self._pages.clear()

    def __len__(self) -> int:
        return len(self._pages)


def init_page_store(app: Any) -> PageStore:
    store = PageStore(max_pages=int(app.config.get("ADMIN_MAX_PAGES", 512)))
    app.extensions[EXTENSION_KEY] = store
    return store


def page_session_id() -> str:
    sid = session.get(SESSION_KEY)
    if not sid:
        sid = uuid4().hex
        session[SESSION_KEY] = sid
    return sid


def get_page(resource: AdminResource) -> CrudPage:
    store: PageStore = current_app.extensions[EXTENSION_KEY]
    return store.get(page_session_id(), resource, get_client())
