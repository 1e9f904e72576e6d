# impactsite/routes/api.py
"""
Impact Site REST API (reference backend)
────────────────────────────────────────────────────────────
• Mounted at /api via the app factory
• RESTX docs at /api/docs
• Programs: list / create / partial update / delete
• Blog posts and contact messages: list (+ public contact create)
• Donation intents: create only
• Errors are {"message": ..., "errors": {field: [...]}} with 400 / 404
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, Response, current_app, request
from flask_restx import Api, Resource, fields
from sqlalchemy import select

from impactsite.extensions import csrf, db, safe_commit, send_email_async
from impactsite.models import BlogPost, ContactMessage, Donation, Program
from impactsite.schemas import CONTACT_SCHEMA, DONATION_SCHEMA, PROGRAM_SCHEMA, ValidationResult

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────
# Blueprint + RESTX API
# ─────────────────────────────────────────────────────────────
api_bp = Blueprint("api", __name__)
bp = api_bp  # registrar alias

api = Api(
    api_bp,
    version="1.0",
    title="Impact Site API",
    description="Programs, blog posts, contact messages and donation intents.",
    doc="/docs",
)

# CSRF-exempt for JSON API
csrf.exempt(api_bp)

# ─────────────────────────────────────────────────────────────
# Models (docs + marshalling)
# ─────────────────────────────────────────────────────────────
program_input = api.model(
    "ProgramInput",
    {
        "title": fields.String(required=True, example="Clean Water"),
        "category": fields.String(required=True, example="Health"),
        "description": fields.String(required=True),
        "image": fields.String(required=True, example="https://example.org/water.png"),
    },
)

program_model = api.inherit(
    "Program",
    program_input,
    {
        "id": fields.String(required=True, readonly=True),
        "createdAt": fields.String(readonly=True),
        "updatedAt": fields.String(readonly=True),
    },
)

blog_model = api.model(
    "BlogPost",
    {
        "id": fields.Integer(required=True),
        "title": fields.String(required=True),
        "category": fields.String(required=True),
        "excerpt": fields.String,
        "content": fields.String,
        "readTime": fields.Integer(min=1),
        "publishedAt": fields.String(description="ISO-8601"),
    },
)

contact_input = api.model(
    "ContactInput",
    {
        "name": fields.String(required=True),
        "email": fields.String(required=True),
        "subject": fields.String(required=True),
        "message": fields.String(required=True),
    },
)

contact_model = api.inherit(
    "ContactMessage",
    contact_input,
    {
        "id": fields.Integer(required=True, readonly=True),
        "createdAt": fields.String(readonly=True),
    },
)

donation_input = api.model(
    "DonationInput",
    {
        "program": fields.String(required=True, example="general"),
        "amount": fields.Float(required=True, example=50.0),
        "name": fields.String(required=True),
        "email": fields.String(required=True),
    },
)

donation_model = api.inherit(
    "Donation",
    donation_input,
    {
        "id": fields.Integer(readonly=True),
        "status": fields.String(readonly=True),
        "createdAt": fields.String(readonly=True),
    },
)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────
def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        api.abort(400, "Request body must be a JSON object.")
    return data


def _reject(result: ValidationResult) -> None:
    api.abort(400, result.summary() or "Invalid input.", errors=result.field_errors)


def _commit_or_500() -> None:
    if not safe_commit():
        api.abort(500, "Database error")


def _get_program_or_404(program_id: str) -> Program:
    program = db.session.get(Program, program_id)
    if program is None:
        api.abort(404, "Program not found")
    return program


def _notify_contact(msg: ContactMessage) -> None:
    to = (current_app.config.get("CONTACT_NOTIFY_TO") or "").strip()
    if not to:
        return
    send_email_async(
        current_app._get_current_object(),
        subject=f"[{current_app.config.get('BRAND_NAME', 'Website')}] {msg.subject}",
        recipients=[a.strip() for a in to.split(",") if a.strip()],
        body=f"From: {msg.name} <{msg.email}>\n\n{msg.message}",
        reply_to=msg.email,
    )


# ─────────────────────────────────────────────────────────────
# Programs
# ─────────────────────────────────────────────────────────────
@api.route("/programs")
class ProgramList(Resource):
    @api.doc(description="All programs in creation order", tags=["Programs"])
    @api.marshal_list_with(program_model)
    def get(self):
        rows = db.session.scalars(select(Program).order_by(Program.created_at, Program.id)).all()
        return [p.as_dict() for p in rows]

    @api.doc(description="Create a program", tags=["Programs"])
    @api.expect(program_input, validate=False)
    @api.response(201, "Created", program_model)
    @api.response(400, "Validation error")
    def post(self):
        result = PROGRAM_SCHEMA.validate(_json_body())
        if not result.valid:
            _reject(result)

        program = Program()
        program.apply(result.value)
        db.session.add(program)
        _commit_or_500()
        log.info("Program created id=%s title=%r", program.id, program.title)
        return program.as_dict(), 201


@api.route("/programs/<string:program_id>")
@api.param("program_id", "Program identifier")
class ProgramItem(Resource):
    @api.doc(description="One program", tags=["Programs"])
    @api.marshal_with(program_model)
    def get(self, program_id: str):
        return _get_program_or_404(program_id).as_dict()

    @api.doc(description="Partial update; only the fields sent are changed", tags=["Programs"])
    @api.expect(program_input, validate=False)
    @api.response(400, "Validation error")
    @api.response(404, "Program not found")
    def patch(self, program_id: str):
        program = _get_program_or_404(program_id)
        result = PROGRAM_SCHEMA.validate(_json_body(), partial=True)
        if not result.valid:
            _reject(result)

        program.apply(result.value)
        _commit_or_500()
        log.info("Program updated id=%s fields=%s", program.id, sorted(result.value))
        return program.as_dict(), 200

    @api.doc(description="Delete a program", tags=["Programs"])
    @api.response(204, "Deleted")
    @api.response(404, "Program not found")
    def delete(self, program_id: str):
        program = _get_program_or_404(program_id)
        db.session.delete(program)
        _commit_or_500()
        log.info("Program deleted id=%s", program_id)
        return Response(status=204)


# ─────────────────────────────────────────────────────────────
# Blog
# ─────────────────────────────────────────────────────────────
@api.route("/blog")
class BlogList(Resource):
    @api.doc(description="Published posts, newest first", tags=["Blog"])
    @api.marshal_list_with(blog_model)
    def get(self):
        rows = db.session.scalars(select(BlogPost).order_by(BlogPost.published_at.desc(), BlogPost.id.desc())).all()
        return [p.as_dict() for p in rows]


# ─────────────────────────────────────────────────────────────
# Contact messages
# ─────────────────────────────────────────────────────────────
@api.route("/contact-messages")
class ContactMessageList(Resource):
    @api.doc(description="Contact form submissions, newest first", tags=["Contact"])
    @api.marshal_list_with(contact_model)
    def get(self):
        rows = db.session.scalars(
            select(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        ).all()
        return [m.as_dict() for m in rows]

    @api.doc(description="Submit the public contact form", tags=["Contact"])
    @api.expect(contact_input, validate=False)
    @api.response(201, "Created", contact_model)
    @api.response(400, "Validation error")
    def post(self):
        result = CONTACT_SCHEMA.validate(_json_body())
        if not result.valid:
            _reject(result)

        msg = ContactMessage(**result.value)
        db.session.add(msg)
        _commit_or_500()
        log.info("Contact message received id=%s", msg.id)
        _notify_contact(msg)
        return msg.as_dict(), 201


# ─────────────────────────────────────────────────────────────
# Donation intents
# ─────────────────────────────────────────────────────────────
@api.route("/donations")
class DonationList(Resource):
    @api.doc(description="Record a donation pledge (no payment is taken)", tags=["Donations"])
    @api.expect(donation_input, validate=False)
    @api.response(201, "Created", donation_model)
    @api.response(400, "Validation error")
    def post(self):
        result = DONATION_SCHEMA.validate(_json_body())
        if not result.valid:
            _reject(result)

        value = result.value
        donation = Donation(program=value["program"], name=value["name"], email=value["email"])
        donation.set_amount_dollars(value["amount"])
        db.session.add(donation)
        _commit_or_500()
        log.info("Donation intent id=%s program=%s amount=%.2f", donation.id, donation.program, donation.amount_dollars)
        return donation.as_dict(), 201


__all__ = ["api_bp", "bp", "api"]
