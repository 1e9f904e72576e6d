"""
Admin dashboard: three independent collection reads rendered as count cards
and recent-item previews.

The reads start together and the page waits for them up to a deadline.
Each panel is built from its own future, so a slow collection shows a
loading placeholder and a failed one shows its own error while the others
render normally.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, wait
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from impactsite.resources import ResourceClient, ResourceError
from impactsite.resources.keys import BLOG_KEY, CONTACTS_KEY, PROGRAMS_KEY
from impactsite.schemas import unique_by_id

log = logging.getLogger(__name__)

RECENT_LIMIT = 5


@dataclass(frozen=True)
class PanelSpec:
    key: str
    label: str
    description: str
    recent_title: str
    empty_message: str
    resource: str
    recent_field: Optional[str] = None


@dataclass(frozen=True)
class Panel:
    spec: PanelSpec
    status: str  # loading | ready | error
    count: Optional[int] = None
    recent: Tuple[Any, ...] = ()
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def has_data(self) -> bool:
        return self.count is not None


PANELS: Tuple[PanelSpec, ...] = (
    PanelSpec(
        key=PROGRAMS_KEY,
        label="Programs",
        description="Active community programs",
        recent_title="Recent Programs",
        empty_message="No programs found yet.",
        resource="programs",
        recent_field="created_at",
    ),
    PanelSpec(
        key=BLOG_KEY,
        label="Blog Posts",
        description="Stories & insights published",
        recent_title="Latest Blog Posts",
        empty_message="No blog posts yet.",
        resource="blog",
        recent_field="published_at",
    ),
    PanelSpec(
        key=CONTACTS_KEY,
        label="Contact Messages",
        description="Enquiries from website",
        recent_title="Latest Contact Messages",
        empty_message="No contact messages yet.",
        resource="contacts",
        recent_field="created_at",
    ),
)


def most_recent(items: Sequence[Any], attr: Optional[str], limit: int = RECENT_LIMIT) -> Tuple[Any, ...]:
    """Newest first by `attr`; items without it keep server order after the dated ones."""
    if attr is None:
        return tuple(items[:limit])
    dated = [i for i in items if getattr(i, attr, None) is not None]
    undated = [i for i in items if getattr(i, attr, None) is None]
    dated.sort(key=lambda i: getattr(i, attr), reverse=True)
    return tuple((dated + undated)[:limit])


class Dashboard:
    def __init__(
        self,
        client: ResourceClient,
        panels: Sequence[PanelSpec] = PANELS,
        wait_seconds: float = 2.0,
        recent_limit: int = RECENT_LIMIT,
    ):
        self.client = client
        self.panels = tuple(panels)
        self.wait_seconds = wait_seconds
        self.recent_limit = recent_limit

    def load(self) -> Tuple[Panel, ...]:
        futures: Dict[str, Future] = {spec.key: self.client.read_async(spec.key) for spec in self.panels}
        wait(list(futures.values()), timeout=self.wait_seconds)
        return tuple(self._panel(spec, futures[spec.key]) for spec in self.panels)

    def _panel(self, spec: PanelSpec, fut: Future) -> Panel:
        if not fut.done():
            return self._from_cache(spec, "loading")
        err = fut.exception()
        if err is not None:
            message = err.message if isinstance(err, ResourceError) else str(err)
            log.warning("Dashboard panel %s failed: %s", spec.label, message)
            return self._from_cache(spec, "error", message)
        return self._build(spec, "ready", fut.result())

    def _from_cache(self, spec: PanelSpec, status: str, error: Optional[str] = None) -> Panel:
        """Loading and failed panels keep showing the last data that did load."""
        data = self.client.peek(spec.key).data
        if data is None:
            return Panel(spec, status, error=error)
        return self._build(spec, status, data, error)

    def _build(self, spec: PanelSpec, status: str, data: Sequence[Any], error: Optional[str] = None) -> Panel:
        items = unique_by_id(data)
        return Panel(
            spec,
            status,
            count=len(items),
            recent=most_recent(items, spec.recent_field, self.recent_limit),
            error=error,
        )


def any_loading(panels: Sequence[Panel]) -> bool:
    return any(p.is_loading for p in panels)
