from __future__ import annotations

from impactsite.extensions import db
from impactsite.models import Donation
from impactsite.resources.keys import BLOG_KEY, PROGRAMS_KEY


def _seed(app):
    result = app.test_cli_runner().invoke(args=["seed-content", "--messages", "0"])
    assert result.exit_code == 0, result.output


def test_home_lists_programs_and_latest_posts(app, client):
    _seed(app)
    programs = client.get("/api/programs").get_json()

    html = client.get("/").get_data(as_text=True)

    for p in programs:
        assert f'/programs/{p["id"]}' in html
    assert "Community Health Initiatives" in html
    assert "February 10, 2025" in html


def test_home_shows_failure_when_programs_cannot_load(client, fake_backend):
    fake_backend.fail("GET", PROGRAMS_KEY, status=500, message="Backend down")

    html = client.get("/").get_data(as_text=True)

    assert "Programs failed to load. Backend down" in html


def test_program_detail_shows_extras(client, make_program):
    program = make_program("Youth Development & Education", category="Education")

    r = client.get(f"/programs/{program['id']}")
    html = r.get_data(as_text=True)

    assert r.status_code == 200
    assert "Youth Development &amp; Education" in html
    assert "Students Reached" in html
    assert 'id="donate"' not in html


def test_unknown_program_renders_not_found(client, make_program):
    make_program("Clean Water")

    r = client.get("/programs/nope")
    html = r.get_data(as_text=True)

    assert r.status_code == 404
    assert "Unable to load this program." in html
    assert "Back to Programs" in html


def test_donation_form_preselects_program(client, make_program):
    program = make_program("Community Health Initiatives")

    html = client.get(f"/programs/{program['id']}?donate=1").get_data(as_text=True)

    assert 'id="donate"' in html
    assert '<option selected value="healthcare">' in html


def test_donation_pledge_is_recorded(app, client, make_program):
    program = make_program("Clean Water")
    url = f"/programs/{program['id']}/donate"

    bad = client.post(url, data={"program": "general", "amount": "2", "name": "Ada", "email": "ada@example.org"})
    assert bad.status_code == 400
    assert "Minimum donation is $5." in bad.get_data(as_text=True)

    ok = client.post(
        url,
        data={"program": "general", "amount": "25", "name": "Ada", "email": "ada@example.org"},
        follow_redirects=True,
    )
    assert "Thank you, Ada! Your pledge of $25.00 has been recorded." in ok.get_data(as_text=True)

    with app.app_context():
        rows = db.session.scalars(db.select(Donation)).all()
        assert [(d.program, d.amount_cents) for d in rows] == [("general", 2500)]


def test_blog_post_detail_renders_paragraphs(app, client):
    _seed(app)
    newest = client.get("/api/blog").get_json()[0]

    html = client.get(f"/blog?post={newest['id']}").get_data(as_text=True)

    assert 'id="post-detail"' in html
    assert html.count('class="post-paragraph"') == 5
    assert f"#post-{newest['id']}" in html


def test_blog_category_filter(app, client):
    _seed(app)

    html = client.get("/blog?category=Health").get_data(as_text=True)

    assert "Health Camps Reached 4,200 Families Last Month" in html
    assert "Youth Leadership Program Expands Nationwide" not in html


def test_blog_failure_message(client, fake_backend):
    fake_backend.fail("GET", BLOG_KEY, status=502, message="Upstream timeout")

    html = client.get("/blog").get_data(as_text=True)

    assert "Stories failed to load. Upstream timeout" in html


def test_gallery_lightbox_wraps_around(client):
    first = client.get("/projects?image=0").get_data(as_text=True)
    assert 'class="lightbox-prev"' in first
    assert 'data-index="5"' in first
    assert 'data-index="1"' in first

    last = client.get("/projects?image=5").get_data(as_text=True)
    assert 'data-index="0"' in last

    closed = client.get("/projects?image=42").get_data(as_text=True)
    assert 'id="lightbox"' not in closed


def test_about_page(client):
    r = client.get("/about")
    assert r.status_code == 200


def test_contact_form_validation(client):
    r = client.post("/contact", data={"name": "", "email": "nope", "subject": "Hi", "message": "Hello"})
    html = r.get_data(as_text=True)

    assert r.status_code == 400
    assert "Please enter your name." in html
    assert "Please enter a valid email address." in html
    assert client.get("/api/contact-messages").get_json() == []


def test_contact_form_submission(client):
    r = client.post(
        "/contact",
        data={"name": "Ada", "email": "ada@example.org", "subject": "Volunteering", "message": "Count me in"},
        follow_redirects=True,
    )

    assert "Thank you for reaching out!" in r.get_data(as_text=True)
    messages = client.get("/api/contact-messages").get_json()
    assert [(m["name"], m["subject"]) for m in messages] == [("Ada", "Volunteering")]


def test_unknown_page_renders_404(client):
    r = client.get("/no/such/page")
    assert r.status_code == 404
    assert "404 - Page Not Found" in r.get_data(as_text=True)
    assert "Go Back Home" in r.get_data(as_text=True)
