from __future__ import annotations

import threading

import pytest

from impactsite.admin.crud import CrudPage, ItemNotFound, PageState, TransitionError, UnsupportedAction
from impactsite.admin.registry import RESOURCES
from impactsite.resources.keys import PROGRAMS_KEY

CLEAN_WATER = {
    "title": "Clean Water",
    "category": "Health",
    "image": "https://example.org/water.png",
    "description": "Wells and filters for rural schools.",
}


@pytest.fixture
def page(memory_client) -> CrudPage:
    return CrudPage(RESOURCES["programs"], memory_client)


def _titles(view):
    return [item.title for item in view.items]


def _submit_in_background(page, data):
    out = {}
    t = threading.Thread(target=lambda: out.setdefault("outcome", page.submit(data)))
    t.start()
    return t, out


def test_empty_list_view(page):
    view = page.list_view(timeout=2)
    assert view.status == "empty"
    assert view.items == ()


def test_create_program_end_to_end(page, memory_api):
    assert page.list_view(timeout=2).status == "empty"

    dialog = page.open_create()
    assert page.state is PageState.CREATING
    assert dialog.values == {"title": "", "category": "", "image": "", "description": ""}

    outcome = page.submit(CLEAN_WATER)

    assert outcome.ok and outcome.applied
    assert page.state is PageState.IDLE
    assert page.dialog is None
    assert [(n.title, n.message) for n in page.drain_notifications()] == [
        ("Success", "Program created successfully")
    ]
    assert memory_api.bodies("POST") == [CLEAN_WATER]

    view = page.list_view(timeout=2)
    assert view.status == "ready"
    assert _titles(view) == ["Clean Water"]


def test_invalid_input_never_reaches_the_network(page, memory_api):
    page.open_create()

    outcome = page.submit({**CLEAN_WATER, "title": "   "})

    assert not outcome.ok
    assert outcome.field_errors["title"] == ["Title is required."]
    assert page.state is PageState.CREATING
    assert page.dialog.values["category"] == "Health"
    assert memory_api.count("POST") == 0
    assert page.drain_notifications() == []


def test_edit_sends_only_changed_fields(page, memory_api):
    row = memory_api.add_program("Clean Water", category="Health")
    page.list_view(timeout=2)

    dialog = page.open_edit(row["id"])
    assert page.state is PageState.EDITING
    assert page.target == row["id"]
    assert dialog.values["title"] == "Clean Water"

    outcome = page.submit({**dialog.values, "title": "Clean Water for All"})

    assert outcome.ok
    assert memory_api.bodies("PATCH") == [{"title": "Clean Water for All"}]
    assert [n.message for n in page.drain_notifications()] == ["Program updated successfully"]
    assert _titles(page.list_view(timeout=2)) == ["Clean Water for All"]


def test_edit_leaves_untouched_padded_fields_alone(page, memory_api):
    row = memory_api.add_program("Clean Water", description="Wells ")
    dialog = page.open_edit(row["id"])
    assert dialog.values["description"] == "Wells "

    outcome = page.submit({**dialog.values, "title": "Clean Water 2"})

    assert outcome.ok
    assert memory_api.bodies("PATCH") == [{"title": "Clean Water 2"}]


def test_edit_without_changes_closes_without_a_request(page, memory_api):
    row = memory_api.add_program("Clean Water")
    dialog = page.open_edit(row["id"])

    outcome = page.submit(dict(dialog.values))

    assert outcome.ok
    assert page.state is PageState.IDLE
    assert memory_api.count("PATCH") == 0
    assert [n.title for n in page.drain_notifications()] == ["No changes"]


def test_open_edit_for_unknown_id(page, memory_api):
    memory_api.add_program("Clean Water")
    with pytest.raises(ItemNotFound):
        page.open_edit("missing")
    assert page.state is PageState.IDLE


def test_server_error_keeps_dialog_open(page, memory_api):
    memory_api.fail("POST", PROGRAMS_KEY, status=500, message="Database unavailable")
    page.open_create()

    outcome = page.submit(CLEAN_WATER)

    assert not outcome.ok and outcome.applied
    assert outcome.error == "Database unavailable"
    assert page.state is PageState.CREATING
    assert page.dialog.error == "Database unavailable"
    assert page.dialog.values["title"] == "Clean Water"
    notes = page.drain_notifications()
    assert [(n.title, n.variant) for n in notes] == [("Error", "destructive")]


def test_close_discards_the_dialog(page):
    page.open_create()
    ticket = page.ticket

    page.close()

    assert page.state is PageState.IDLE
    assert page.dialog is None
    assert page.ticket == ticket + 1
    page.close()  # already idle
    assert page.ticket == ticket + 1


def test_delete_requires_confirmation(page, memory_api):
    row = memory_api.add_program("Clean Water")

    assert page.delete(row["id"]) is False
    assert memory_api.count("DELETE") == 0
    assert page.state is PageState.IDLE


def test_confirmed_delete_removes_the_row(page, memory_api):
    row = memory_api.add_program("Clean Water")
    memory_api.add_program("Solar Schools")
    assert _titles(page.list_view(timeout=2)) == ["Clean Water", "Solar Schools"]

    assert page.delete(row["id"], confirmed=True) is True

    assert page.state is PageState.IDLE
    assert [n.message for n in page.drain_notifications()] == ["Program deleted successfully"]
    assert _titles(page.list_view(timeout=2)) == ["Solar Schools"]


def test_failed_delete_reports_an_error(page, memory_api):
    memory_api.add_program("Clean Water")
    notes_before = page.drain_notifications()

    assert page.delete("missing", confirmed=True) is False

    assert notes_before == []
    notes = page.drain_notifications()
    assert [(n.title, n.message) for n in notes] == [("Error", "Program not found")]
    assert page.state is PageState.IDLE


def test_second_submit_while_submitting_is_rejected(page, memory_api):
    hold = memory_api.hold("POST", PROGRAMS_KEY)
    page.open_create()

    worker, out = _submit_in_background(page, CLEAN_WATER)
    assert hold.started.wait(2)
    assert page.state is PageState.SUBMITTING
    assert page.is_busy

    with pytest.raises(TransitionError):
        page.submit(CLEAN_WATER)
    with pytest.raises(TransitionError):
        page.delete("p1", confirmed=True)
    with pytest.raises(TransitionError):
        page.open_create()

    hold.release()
    worker.join(2)
    assert out["outcome"].ok
    assert memory_api.count("POST") == 1
    assert page.state is PageState.IDLE


def test_result_for_a_closed_dialog_only_refreshes_the_list(page, memory_api):
    hold = memory_api.hold("POST", PROGRAMS_KEY)
    assert page.list_view(timeout=2).status == "empty"
    page.open_create()

    worker, out = _submit_in_background(page, CLEAN_WATER)
    assert hold.started.wait(2)
    page.close()
    page.open_create()
    fresh_ticket = page.ticket

    hold.release()
    worker.join(2)

    assert out["outcome"].ok
    assert out["outcome"].applied is False
    assert page.state is PageState.CREATING
    assert page.ticket == fresh_ticket
    assert page.dialog.values["title"] == ""
    assert _titles(page.list_view(timeout=2)) == ["Clean Water"]


def test_list_error_keeps_previous_rows(page, memory_api):
    memory_api.add_program("Clean Water")
    page.list_view(timeout=2)

    memory_api.fail("GET", PROGRAMS_KEY, status=503, message="Backend is restarting")
    page.client.invalidate(PROGRAMS_KEY)
    view = page.list_view(timeout=2)

    assert view.status == "error"
    assert view.error == "Backend is restarting"
    assert _titles(view) == ["Clean Water"]


def test_duplicate_ids_render_once(page, memory_api):
    row = memory_api.add_program("Clean Water")
    memory_api.programs.append(dict(row, title="Clean Water (dup)"))

    assert _titles(page.list_view(timeout=2)) == ["Clean Water"]


def test_read_only_resource_rejects_mutations(memory_client):
    blog = CrudPage(RESOURCES["blog"], memory_client)
    with pytest.raises(UnsupportedAction):
        blog.open_create()
    with pytest.raises(UnsupportedAction):
        blog.delete(1, confirmed=True)
