"""
Generic admin CRUD page over one AdminResource.

A CrudPage is an explicit state machine:

    IDLE ──open_create──▶ CREATING ──submit──▶ SUBMITTING ──ok──▶ IDLE
    IDLE ──open_edit────▶ EDITING  ──submit──▶ SUBMITTING ──ok──▶ IDLE
                                               SUBMITTING ──fail─▶ CREATING / EDITING
    IDLE ──delete(confirmed)──▶ DELETING ──▶ IDLE

Invalid input never leaves CREATING/EDITING and never reaches the network.
Every successful mutation invalidates the resource's list key; rows are
never patched locally. Each dialog open/close bumps a ticket, and a submit
result whose ticket is no longer current only updates the cache, not the UI.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from impactsite.resources import ResourceClient, ResourceError
from impactsite.schemas import Identifier, find_by_id, unique_by_id

from .registry import AdminResource

log = logging.getLogger(__name__)


class PageState(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"
    SUBMITTING = "submitting"
    DELETING = "deleting"


class TransitionError(RuntimeError):
    """An action that is not allowed from the page's current state."""

    def __init__(self, action: str, state: PageState):
        super().__init__(f"Cannot {action} while {state.value}")
        self.action = action
        self.state = state


class UnsupportedAction(Exception):
    """The resource does not offer this capability (e.g. deleting blog posts)."""


class ItemNotFound(LookupError):
    pass


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    variant: str = "default"  # default | destructive


@dataclass(frozen=True)
class ListView:
    status: str  # loading | empty | ready | error
    items: Tuple[Any, ...] = ()
    error: Optional[str] = None

    @property
    def has_items(self) -> bool:
        return len(self.items) > 0


@dataclass(frozen=True)
class Dialog:
    mode: str  # create | edit
    ticket: int
    identifier: Optional[Identifier] = None
    values: Dict[str, Any] = field(default_factory=dict)
    initial: Dict[str, Any] = field(default_factory=dict)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.identifier is not None


@dataclass(frozen=True)
class SubmitOutcome:
    ok: bool
    applied: bool
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[str] = None
    entity: Optional[Dict[str, Any]] = None


def _differs(submitted: Any, initial: Any) -> bool:
    return ("" if submitted is None else str(submitted)) != ("" if initial is None else str(initial))


class CrudPage:
    def __init__(self, resource: AdminResource, client: ResourceClient):
        self.resource = resource
        self.client = client
        self._lock = threading.RLock()
        self._state = PageState.IDLE
        self._target: Optional[Identifier] = None
        self._dialog: Optional[Dialog] = None
        self._ticket = 0
        self._notifications: List[Notification] = []

    # ─────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────
    @property
    def state(self) -> PageState:
        return self._state

    @property
    def target(self) -> Optional[Identifier]:
        return self._target

    @property
    def dialog(self) -> Optional[Dialog]:
        return self._dialog

    @property
    def ticket(self) -> int:
        return self._ticket

    @property
    def is_busy(self) -> bool:
        return self._state in (PageState.SUBMITTING, PageState.DELETING)

    def drain_notifications(self) -> List[Notification]:
        with self._lock:
            out, self._notifications = self._notifications, []
        return out

    def _notify(self, title: str, message: str, variant: str = "default") -> None:
        self._notifications.append(Notification(title, message, variant))

    def _require(self, action: str, *allowed: PageState) -> None:
        if self._state not in allowed:
            raise TransitionError(action, self._state)

    def _require_capability(self, action: str) -> None:
        if not self.resource.supports(action):
            raise UnsupportedAction(f"{self.resource.title} cannot {action}")

    # ─────────────────────────────────────────────────────────
    # List
    # ─────────────────────────────────────────────────────────
    def list_view(self, timeout: Optional[float] = None) -> ListView:
        key = self.resource.list_key
        try:
            items = self.client.read(key, timeout=timeout)
        except FutureTimeout:
            snap = self.client.peek(key)
            return ListView("loading", unique_by_id(snap.data) if snap.data is not None else ())
        except ResourceError as e:
            snap = self.client.peek(key)
            kept = unique_by_id(snap.data) if snap.data is not None else ()
            return ListView("error", kept, e.message)

        items = unique_by_id(items)
        return ListView("ready" if items else "empty", items)

    def find(self, identifier: Identifier) -> Any:
        key = self.resource.list_key
        try:
            items = self.client.read(key)
        except ResourceError:
            snap = self.client.peek(key)
            if snap.data is None:
                raise
            items = snap.data
        item = find_by_id(items, identifier)
        if item is None:
            raise ItemNotFound(f"{self.resource.label} {identifier} not found")
        return item

    # ─────────────────────────────────────────────────────────
    # Dialog transitions
    # ─────────────────────────────────────────────────────────
    def open_create(self) -> Dialog:
        self._require_capability("create")
        with self._lock:
            self._require("open the create form", PageState.IDLE, PageState.CREATING, PageState.EDITING)
            self._ticket += 1
            blank = self.resource.schema.blank()
            self._dialog = Dialog("create", self._ticket, values=blank, initial=blank)
            self._state = PageState.CREATING
            self._target = None
            return self._dialog

    def open_edit(self, item: Any) -> Dialog:
        """Open the edit form for `item` (an entity, or an id looked up in the list)."""
        self._require_capability("update")
        if not hasattr(item, "id"):
            item = self.find(item)
        with self._lock:
            self._require("open the edit form", PageState.IDLE, PageState.CREATING, PageState.EDITING)
            self._ticket += 1
            initial = self.resource.schema.initial_from(item)
            self._dialog = Dialog("edit", self._ticket, identifier=item.id, values=dict(initial), initial=initial)
            self._state = PageState.EDITING
            self._target = item.id
            return self._dialog

    def close(self) -> None:
        with self._lock:
            if self._state is PageState.IDLE:
                return
            self._require("close the form", PageState.CREATING, PageState.EDITING, PageState.SUBMITTING)
            self._ticket += 1
            self._dialog = None
            self._state = PageState.IDLE
            self._target = None

    # ─────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────
    def submit(self, data: Dict[str, Any]) -> SubmitOutcome:
        schema = self.resource.schema
        with self._lock:
            if self._state is PageState.SUBMITTING:
                raise TransitionError("submit", self._state)
            self._require("submit", PageState.CREATING, PageState.EDITING)
            dialog = self._dialog
            values = dict(dialog.values)
            values.update({k: data[k] for k in schema.fields if k in data})

            result = schema.validate(values)
            if not result.valid:
                self._dialog = replace(dialog, values=values, field_errors=result.field_errors, error=None)
                return SubmitOutcome(False, True, field_errors=result.field_errors)

            if dialog.is_editing:
                action = "updated"
                # Compare raw input to the opened values; normalising would flag untouched fields.
                changed = {k: v for k, v in result.value.items() if _differs(values.get(k), dialog.initial.get(k))}
                if not changed:
                    self._ticket += 1
                    self._dialog = None
                    self._state = PageState.IDLE
                    self._target = None
                    self._notify("No changes", f"{self.resource.label} was not modified")
                    return SubmitOutcome(True, True)
                method, path, body = "PATCH", self.resource.path_for(dialog.identifier), schema.to_wire(changed)
            else:
                action = "created"
                method, path, body = "POST", self.resource.list_key, schema.to_wire(result.value)

            prior = self._state
            ticket = self._ticket
            self._state = PageState.SUBMITTING
            self._dialog = replace(dialog, values=values, field_errors={}, error=None)

        try:
            entity = self.client.write(method, path, body)
        except ResourceError as e:
            with self._lock:
                applied = self._ticket == ticket
                if applied:
                    self._state = prior
                    self._dialog = replace(self._dialog, error=e.message)
                self._notify("Error", e.message, "destructive")
            return SubmitOutcome(False, applied, error=e.message)
        except Exception:
            with self._lock:
                if self._ticket == ticket:
                    self._state = prior
            raise

        # The server changed even if the dialog moved on.
        self.client.invalidate(self.resource.list_key)
        with self._lock:
            applied = self._ticket == ticket
            if applied:
                self._ticket += 1
                self._dialog = None
                self._state = PageState.IDLE
                self._target = None
            else:
                log.debug("%s submit result for stale ticket %s ignored", self.resource.name, ticket)
            self._notify("Success", self.resource.message(action))
        return SubmitOutcome(True, applied, entity=entity)

    def delete(self, identifier: Identifier, confirmed: bool = False) -> bool:
        """Delete after explicit confirmation. Returns True when the row was removed."""
        self._require_capability("delete")
        if not confirmed:
            log.debug("delete %s %s declined", self.resource.name, identifier)
            return False

        with self._lock:
            self._require("delete", PageState.IDLE)
            self._state = PageState.DELETING
            self._target = identifier

        try:
            self.client.write("DELETE", self.resource.path_for(identifier))
        except ResourceError as e:
            with self._lock:
                self._state = PageState.IDLE
                self._target = None
                self._notify("Error", e.message, "destructive")
            return False
        except Exception:
            with self._lock:
                self._state = PageState.IDLE
                self._target = None
            raise

        self.client.invalidate(self.resource.list_key)
        with self._lock:
            self._state = PageState.IDLE
            self._target = None
            self._notify("Success", self.resource.message("deleted"))
        return True
