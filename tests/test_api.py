from __future__ import annotations

from impactsite.extensions import db
from impactsite.models import Donation


def test_program_crud_over_http(client, make_program):
    created = make_program("Clean Water")
    assert isinstance(created["id"], str)
    assert created["title"] == "Clean Water"
    assert created["createdAt"].endswith("Z")

    listed = client.get("/api/programs").get_json()
    assert [p["title"] for p in listed] == ["Clean Water"]

    r = client.patch(f"/api/programs/{created['id']}", json={"title": "Clean Water for All"})
    assert r.status_code == 200
    updated = r.get_json()
    assert updated["title"] == "Clean Water for All"
    assert updated["category"] == created["category"]

    r = client.delete(f"/api/programs/{created['id']}")
    assert r.status_code == 204
    assert r.data == b""
    assert client.get("/api/programs").get_json() == []


def test_programs_list_in_creation_order(client, make_program):
    make_program("First")
    make_program("Second")
    assert [p["title"] for p in client.get("/api/programs").get_json()] == ["First", "Second"]


def test_create_program_validation_error_shape(client):
    r = client.post(
        "/api/programs",
        json={"title": "", "category": "Health", "description": "d", "image": "https://example.org/a.png"},
    )
    assert r.status_code == 400
    body = r.get_json()
    assert body["message"] == "Title is required."
    assert body["errors"] == {"title": ["Title is required."]}


def test_create_program_rejects_non_object_body(client):
    r = client.post("/api/programs", json=["not", "an", "object"])
    assert r.status_code == 400
    assert r.get_json()["message"] == "Request body must be a JSON object."


def test_patch_validates_only_sent_fields(client, make_program):
    created = make_program()
    r = client.patch(f"/api/programs/{created['id']}", json={"image": "ftp://nope"})
    assert r.status_code == 400
    assert r.get_json()["errors"] == {"image": ["Image must be an http(s) URL or a /static path."]}


def test_unknown_program_is_404_with_message(client):
    for method in ("get", "patch", "delete"):
        r = getattr(client, method)("/api/programs/does-not-exist", json={"title": "x"})
        assert r.status_code == 404
        assert r.get_json()["message"] == "Program not found"


def test_contact_messages_create_and_list_newest_first(client):
    for name in ("Ada", "Grace"):
        r = client.post(
            "/api/contact-messages",
            json={"name": name, "email": f"{name.lower()}@example.org", "subject": "Hi", "message": "Hello"},
        )
        assert r.status_code == 201

    names = [m["name"] for m in client.get("/api/contact-messages").get_json()]
    assert names == ["Grace", "Ada"]


def test_contact_message_requires_valid_email(client):
    r = client.post(
        "/api/contact-messages",
        json={"name": "Ada", "email": "nope", "subject": "Hi", "message": "Hello"},
    )
    assert r.status_code == 400
    assert r.get_json()["errors"]["email"] == ["Please enter a valid email address."]


def test_donation_intent_is_stored_in_cents(app, client):
    r = client.post(
        "/api/donations",
        json={"program": "education", "amount": 25.5, "name": "Ada", "email": "ada@example.org"},
    )
    assert r.status_code == 201
    body = r.get_json()
    assert body["amount"] == 25.5
    assert body["status"] == "pledged"

    with app.app_context():
        donation = db.session.get(Donation, body["id"])
        assert donation.amount_cents == 2550


def test_donation_below_minimum(client):
    r = client.post(
        "/api/donations",
        json={"program": "general", "amount": 2, "name": "Ada", "email": "ada@example.org"},
    )
    assert r.status_code == 400
    assert r.get_json()["errors"]["amount"] == ["Minimum donation is $5."]


def test_seed_command_is_idempotent(app, client):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed-content", "--messages", "2", "--seed", "7"])
    assert first.exit_code == 0, first.output
    assert "Content seeded!" in first.output

    second = runner.invoke(args=["seed-content", "--messages", "0"])
    assert second.exit_code == 0, second.output
    assert "Updating existing program" in second.output

    programs = client.get("/api/programs").get_json()
    assert len(programs) == 3

    posts = client.get("/api/blog").get_json()
    assert [p["publishedAt"] for p in posts] == [
        "2025-02-10T10:00:00Z",
        "2025-02-05T08:00:00Z",
        "2025-02-01T07:30:00Z",
    ]
    assert posts[0]["readTime"] == 5
    assert len(client.get("/api/contact-messages").get_json()) == 2


def test_health_endpoint_echoes_request_id(client):
    r = client.get("/healthz", headers={"X-Request-ID": "abc123"})
    assert r.status_code == 200
    assert r.get_json()["status"] == "ok"
    assert r.headers["X-Request-ID"] == "abc123"


def test_unknown_api_route_is_json_404(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == 404


def test_restx_404_help_suffix_is_disabled(app, client):
    assert app.config["RESTX_ERROR_404_HELP"] is False
    assert "ERROR_404_HELP" not in app.config

    message = client.get("/api/programs/missing").get_json()["message"]
    assert "You have requested this URI" not in message
