"""
Public pages: home, about, projects, program detail, blog and contact.

Collections come from the shared ResourceClient; a failed read falls back to
whatever the cache last held and otherwise renders a "failed to load" state.
Page-local UI state (selected post, lightbox image, donation form) lives in
the query string.
"""

from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from impactsite.content import (
    ABOUT,
    BLOG_CATEGORIES,
    GALLERY,
    PROJECTS,
    donation_program_for,
    extra_for,
    filter_by_category,
)
from impactsite.forms import DONATION_PROGRAM_CHOICES
from impactsite.resources import (
    BLOG_KEY,
    CONTACTS_KEY,
    DONATIONS_PATH,
    PROGRAMS_KEY,
    ResourceError,
    get_client,
)
from impactsite.schemas import CONTACT_SCHEMA, DONATION_SCHEMA, DonationIntent, find_by_id

log = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)
bp = main_bp

HOME_LATEST_POSTS = 3


# ── Helpers ─────────────────────────────────────────────────────────────────
def _load(key: str) -> Tuple[Optional[Tuple[Any, ...]], Optional[str]]:
    """(items, error). Items are the last-known-good data when the read fails."""
    client = get_client()
    try:
        return client.read(key, timeout=float(current_app.config.get("LIST_WAIT_SECONDS", 3.0))), None
    except ResourceError as e:
        log.warning("Public read of %s failed: %s", key, e.message)
        return client.peek(key).data, e.message
    except FutureTimeout:
        return client.peek(key).data, "Still loading. Please refresh in a moment."


def _newest_first(posts: Sequence[Any]) -> List[Any]:
    return sorted(posts, key=lambda p: p.published_at, reverse=True)


# ── Home / About ────────────────────────────────────────────────────────────
@main_bp.get("/")
def home():
    programs, programs_error = _load(PROGRAMS_KEY)
    posts, posts_error = _load(BLOG_KEY)
    latest = _newest_first(posts)[:HOME_LATEST_POSTS] if posts is not None else []
    return render_template(
        "main/home.html",
        programs=programs,
        programs_error=programs_error,
        posts=latest,
        posts_error=posts_error if posts is None else None,
    )


@main_bp.get("/about")
def about():
    return render_template("main/about.html", about=ABOUT)


# ── Projects (+ gallery lightbox) ───────────────────────────────────────────
@main_bp.get("/projects")
def projects():
    index = GALLERY.selected(request.args.get("image", type=int))
    return render_template(
        "main/projects.html",
        projects=PROJECTS,
        gallery=GALLERY,
        image_index=index,
        prev_index=GALLERY.prev(index) if index is not None else None,
        next_index=GALLERY.next(index) if index is not None else None,
    )


# ── Program detail (+ donation pledge) ──────────────────────────────────────
def _render_program(program_id: str, *, form_values: Optional[Dict[str, Any]] = None,
                    errors: Optional[Dict[str, List[str]]] = None, status: int = 200):
    programs, error = _load(PROGRAMS_KEY)
    program = find_by_id(programs, program_id) if programs is not None else None
    if program is None:
        if error is not None:
            log.info("Program %s unavailable: %s", program_id, error)
        return render_template("main/program_not_found.html"), 404

    donation_program = donation_program_for(program.title)
    show_donate = form_values is not None or request.args.get("donate") == "1"
    form = None
    if show_donate:
        form = DONATION_SCHEMA.form(form_values or {"program": donation_program})
    return (
        render_template(
            "main/program_detail.html",
            program=program,
            extra=extra_for(program.title),
            donation_program=donation_program,
            donation_choices=DONATION_PROGRAM_CHOICES,
            form=form,
            errors=errors or {},
        ),
        status,
    )


@main_bp.get("/programs/<program_id>")
def program_detail(program_id: str):
    return _render_program(program_id)


@main_bp.post("/programs/<program_id>/donate")
def program_donate(program_id: str):
    data = request.form.to_dict()
    result = DONATION_SCHEMA.validate(data)
    if not result.valid:
        return _render_program(program_id, form_values=data, errors=result.field_errors, status=400)

    try:
        recorded = get_client().write("POST", DONATIONS_PATH, result.value)
    except ResourceError as e:
        flash(e.message, "danger")
        return _render_program(program_id, form_values=data, status=e.status or 502)

    intent = DonationIntent.from_dict(recorded or result.value)
    flash(f"Thank you, {intent.name}! Your pledge of ${intent.amount:,.2f} has been recorded.", "success")
    return redirect(url_for("main.program_detail", program_id=program_id))


# ── Blog ────────────────────────────────────────────────────────────────────
@main_bp.get("/blog")
def blog():
    posts, error = _load(BLOG_KEY)
    ordered = _newest_first(posts) if posts is not None else []

    category = (request.args.get("category") or "All").strip() or "All"
    visible = filter_by_category(ordered, category)

    selected = None
    post_id = request.args.get("post")
    if post_id is not None:
        selected = find_by_id(ordered, post_id)

    return render_template(
        "main/blog.html",
        posts=visible,
        categories=BLOG_CATEGORIES,
        category=category,
        selected=selected,
        error=error if posts is None else None,
    )


# ── Contact ─────────────────────────────────────────────────────────────────
@main_bp.route("/contact", methods=["GET", "POST"])
def contact():
    if request.method == "GET":
        return render_template("main/contact.html", form=CONTACT_SCHEMA.form(), errors={})

    data = request.form.to_dict()
    result = CONTACT_SCHEMA.validate(data)
    if not result.valid:
        return render_template("main/contact.html", form=CONTACT_SCHEMA.form(data), errors=result.field_errors), 400

    client = get_client()
    try:
        client.write("POST", CONTACTS_KEY, result.value)
    except ResourceError as e:
        flash(e.message, "danger")
        return render_template("main/contact.html", form=CONTACT_SCHEMA.form(data), errors={}), e.status or 502

    client.invalidate(CONTACTS_KEY)
    flash("Thank you for reaching out! We'll get back to you soon.", "success")
    return redirect(url_for("main.contact"))
