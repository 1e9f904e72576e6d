"""
Admin blueprint: dashboard plus one generic CRUD screen per AdminResource.

Dialog state lives in the session's CrudPage, so every action is a POST that
redirects back to the list (POST/redirect/GET). Notifications recorded by
the page are flashed on the way out.
"""

from __future__ import annotations

from typing import Any, Optional

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from impactsite.resources import ResourceError, get_client

from .crud import CrudPage, ItemNotFound, TransitionError, UnsupportedAction
from .dashboard import Dashboard, any_loading
from .registry import RESOURCES, AdminResource, get_resource
from .store import get_page

admin = Blueprint("admin", __name__, url_prefix="/admin")

# Export alias for the registrar
bp = admin
__all__ = ["bp", "admin"]

_FLASH_CATEGORY = {"default": "success", "destructive": "danger"}


# ── Helpers ─────────────────────────────────────────────────────────────────
def _resource_or_404(name: str, action: Optional[str] = None) -> AdminResource:
    resource = get_resource(name)
    if resource is None:
        abort(404)
    if action is not None and not resource.supports(action):
        abort(404)
    return resource


def _flush(page: CrudPage) -> None:
    for n in page.drain_notifications():
        flash(f"{n.title}: {n.message}", _FLASH_CATEGORY.get(n.variant, "info"))


def _back(resource: AdminResource):
    return redirect(url_for("admin.resource_list", name=resource.name))


@admin.app_context_processor
def _inject_admin_nav():
    return {"admin_resources": list(RESOURCES.values())}


# ── Dashboard ────────────────────────────────────────────────────────────────
@admin.route("/")
def dashboard():
    wait_seconds = float(current_app.config.get("DASHBOARD_WAIT_SECONDS", 2.0))
    panels = Dashboard(get_client(), wait_seconds=wait_seconds).load()
    refresh = any_loading(panels)
    return render_template(
        "admin/dashboard.html",
        panels=panels,
        refresh_seconds=current_app.config.get("DASHBOARD_REFRESH_SECONDS", 3) if refresh else None,
    )


# ── Resource list (+ open dialog) ────────────────────────────────────────────
@admin.route("/<name>")
def resource_list(name: str):
    resource = _resource_or_404(name)
    page = get_page(resource)
    view = page.list_view(timeout=float(current_app.config.get("LIST_WAIT_SECONDS", 3.0)))
    _flush(page)

    dialog = page.dialog
    form = resource.schema.form(dialog.values) if dialog is not None and resource.schema is not None else None
    return render_template(
        "admin/resource_list.html",
        resource=resource,
        page=page,
        view=view,
        dialog=dialog,
        form=form,
    )


@admin.route("/<name>/new", methods=["POST"])
def resource_new(name: str):
    resource = _resource_or_404(name, "create")
    page = get_page(resource)
    try:
        page.open_create()
    except TransitionError as e:
        flash(str(e), "warning")
    return _back(resource)


@admin.route("/<name>/<item_id>/edit", methods=["POST"])
def resource_edit(name: str, item_id: str):
    resource = _resource_or_404(name, "update")
    page = get_page(resource)
    try:
        page.open_edit(item_id)
    except ItemNotFound:
        flash(f"{resource.label} not found.", "warning")
    except ResourceError as e:
        flash(f"Error: {e.message}", "danger")
    except TransitionError as e:
        flash(str(e), "warning")
    return _back(resource)


@admin.route("/<name>/dialog/close", methods=["POST"])
def resource_close(name: str):
    resource = _resource_or_404(name)
    page = get_page(resource)
    try:
        page.close()
    except TransitionError as e:
        flash(str(e), "warning")
    return _back(resource)


@admin.route("/<name>/submit", methods=["POST"])
def resource_submit(name: str):
    resource = _resource_or_404(name)
    if not (resource.can_create or resource.can_update):
        abort(404)
    page = get_page(resource)

    ticket = request.form.get("ticket", type=int)
    if page.dialog is None or ticket != page.ticket:
        flash("This form is no longer active.", "warning")
        return _back(resource)

    try:
        page.submit(request.form.to_dict())
    except TransitionError as e:
        flash(str(e), "warning")
    except UnsupportedAction:
        abort(404)

    _flush(page)
    return _back(resource)


# ── Delete (confirmation step first) ─────────────────────────────────────────
@admin.route("/<name>/<item_id>/delete", methods=["GET", "POST"])
def resource_delete(name: str, item_id: str):
    resource = _resource_or_404(name, "delete")
    page = get_page(resource)

    if request.method == "GET":
        item: Any = None
        try:
            item = page.find(item_id)
        except ItemNotFound:
            flash(f"{resource.label} not found.", "warning")
            return _back(resource)
        except ResourceError as e:
            current_app.logger.warning("Delete prompt lookup failed: %s", e.message)
        return render_template("admin/confirm_delete.html", resource=resource, item=item, item_id=item_id)

    confirmed = request.form.get("confirm", "no").strip().lower() == "yes"
    try:
        page.delete(item_id, confirmed=confirmed)
    except TransitionError as e:
        flash(f"{e} Close the open form first.", "warning")
    _flush(page)
    return _back(resource)
