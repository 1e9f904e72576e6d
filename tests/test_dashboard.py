from __future__ import annotations

from types import SimpleNamespace

from impactsite.admin.dashboard import Dashboard, any_loading, most_recent
from impactsite.resources.keys import BLOG_KEY, CONTACTS_KEY, PROGRAMS_KEY


def _by_label(panels):
    return {p.spec.label: p for p in panels}


def test_each_panel_succeeds_or_fails_on_its_own(memory_client, memory_api):
    memory_api.add_program("Clean Water")
    memory_api.add_program("Solar Schools")
    memory_api.add_contact("Ada")
    memory_api.fail("GET", BLOG_KEY, status=500, message="Blog store offline")

    panels = _by_label(Dashboard(memory_client, wait_seconds=2).load())

    assert panels["Programs"].status == "ready"
    assert panels["Programs"].count == 2
    assert panels["Contact Messages"].count == 1
    assert panels["Contact Messages"].recent[0].name == "Ada"
    assert panels["Blog Posts"].status == "error"
    assert panels["Blog Posts"].error == "Blog store offline"
    assert panels["Blog Posts"].count is None


def test_failed_refresh_keeps_last_known_counts(memory_client, memory_api):
    memory_api.add_program("Clean Water")
    memory_client.read(PROGRAMS_KEY, timeout=2)

    memory_api.fail("GET", PROGRAMS_KEY, status=503, message="Service unavailable")
    memory_client.invalidate(PROGRAMS_KEY)
    panel = _by_label(Dashboard(memory_client, wait_seconds=2).load())["Programs"]

    assert panel.status == "error"
    assert panel.error == "Service unavailable"
    assert panel.has_data
    assert panel.count == 1
    assert [p.title for p in panel.recent] == ["Clean Water"]


def test_slow_panel_shows_as_loading(memory_client, memory_api):
    hold = memory_api.hold("GET", CONTACTS_KEY)
    memory_api.add_program("Clean Water")

    panels = Dashboard(memory_client, wait_seconds=0.2).load()

    by_label = _by_label(panels)
    assert by_label["Contact Messages"].status == "loading"
    assert by_label["Programs"].status == "ready"
    assert any_loading(panels)

    hold.release()
    later = Dashboard(memory_client, wait_seconds=2).load()
    assert not any_loading(later)
    assert memory_api.count("GET", CONTACTS_KEY) == 1


def test_recent_posts_are_newest_first(memory_client, memory_api):
    memory_api.add_post("Older", "2025-02-01T07:30:00Z")
    memory_api.add_post("Newest", "2025-02-10T10:00:00Z")
    memory_api.add_post("Middle", "2025-02-05T08:00:00Z")

    panel = _by_label(Dashboard(memory_client, wait_seconds=2, recent_limit=2).load())["Blog Posts"]

    assert panel.count == 3
    assert [p.title for p in panel.recent] == ["Newest", "Middle"]


def test_most_recent_puts_undated_items_last():
    items = [
        SimpleNamespace(id=1, created_at=None),
        SimpleNamespace(id=2, created_at="2025-01-02"),
        SimpleNamespace(id=3, created_at="2025-01-03"),
    ]
    assert [i.id for i in most_recent(items, "created_at")] == [3, 2, 1]
    assert [i.id for i in most_recent(items, None, limit=2)] == [1, 2]
