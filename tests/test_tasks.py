"""Task creation, listing and the project calendar."""

from datetime import datetime

import pytest

from tests.conftest import backend_failure


@pytest.fixture
def board(client, alice):
    _, headers = alice
    project = client.post("/api/v1/projects", json={"name": "Launch Plan"}, headers=headers).json()
    workboard = client.post(
        f"/api/v1/projects/{project['id']}/workboards", json={"name": "Sprint 1"}, headers=headers
    ).json()
    return project, workboard


def _tasks_url(workboard_id):
    return f"/api/v1/workboards/{workboard_id}/tasks"


def test_create_and_list_task(client, alice, board):
    _, headers = alice
    _, workboard = board
    response = client.post(_tasks_url(workboard["id"]), json={
        "title": "Write press release",
        "description": "Draft for review",
        "due_date": "2026-03-01T09:00:00+00:00",
    }, headers=headers)
    assert response.status_code == 201
    task = response.json()
    assert task["workboard_id"] == workboard["id"]
    assert task["description"] == "Draft for review"

    listed = client.get(_tasks_url(workboard["id"]), headers=headers).json()
    assert [t["id"] for t in listed] == [task["id"]]


def test_missing_due_date_defaults_to_now(client, fake_supabase, alice, board):
    _, headers = alice
    _, workboard = board
    response = client.post(_tasks_url(workboard["id"]), json={"title": "Call vendor"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["due_date"] is not None
    assert datetime.fromisoformat(fake_supabase.tables["tasks"][0]["due_date"]).tzinfo is not None


@pytest.mark.parametrize("title", ["", "   "])
def test_blank_title_rejected_without_insert(client, fake_supabase, alice, board, title):
    _, headers = alice
    _, workboard = board
    response = client.post(_tasks_url(workboard["id"]), json={"title": title}, headers=headers)
    assert response.status_code == 422
    assert "Task title is required." in response.text
    assert fake_supabase.count("tasks", "insert") == 0


def test_tasks_listed_by_due_date(client, alice, board):
    _, headers = alice
    _, workboard = board
    for title, due in (("Later", "2026-05-01T00:00:00+00:00"), ("Sooner", "2026-02-01T00:00:00+00:00")):
        client.post(_tasks_url(workboard["id"]), json={"title": title, "due_date": due}, headers=headers)
    listed = client.get(_tasks_url(workboard["id"]), headers=headers).json()
    assert [t["title"] for t in listed] == ["Sooner", "Later"]


def test_task_on_unknown_workboard_is_404(client, alice):
    _, headers = alice
    response = client.post(_tasks_url("missing"), json={"title": "Orphan"}, headers=headers)
    assert response.status_code == 404


def test_non_member_cannot_touch_tasks(client, fake_supabase, board, bob):
    _, bob_headers = bob
    _, workboard = board
    assert client.post(_tasks_url(workboard["id"]), json={"title": "x"}, headers=bob_headers).status_code == 403
    assert client.get(_tasks_url(workboard["id"]), headers=bob_headers).status_code == 403
    assert fake_supabase.tables["tasks"] == []


def test_backend_error_on_create_surfaces_message(client, fake_supabase, alice, board):
    _, headers = alice
    _, workboard = board
    fake_supabase.fail_next("tasks", "insert", backend_failure('null value in column "due_date" violates not-null constraint', "23502"))
    response = client.post(_tasks_url(workboard["id"]), json={"title": "x"}, headers=headers)
    assert response.status_code == 400
    assert "not-null constraint" in response.json()["detail"]


class TestCalendar:
    def _seed(self, client, headers, project):
        boards = []
        for name in ("Design", "Build"):
            boards.append(client.post(
                f"/api/v1/projects/{project['id']}/workboards", json={"name": name}, headers=headers
            ).json())
        for board, title, due in (
            (boards[0], "Wireframes", "2026-02-10T00:00:00+00:00"),
            (boards[1], "API", "2026-03-15T00:00:00+00:00"),
            (boards[0], "Review", "2026-04-20T00:00:00+00:00"),
        ):
            client.post(_tasks_url(board["id"]), json={"title": title, "due_date": due}, headers=headers)

    def test_calendar_spans_all_workboards(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Site"}, headers=headers).json()
        self._seed(client, headers, project)
        response = client.get(f"/api/v1/projects/{project['id']}/calendar", headers=headers)
        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Wireframes", "API", "Review"]

    def test_calendar_window(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Site"}, headers=headers).json()
        self._seed(client, headers, project)
        response = client.get(
            f"/api/v1/projects/{project['id']}/calendar",
            params={"start": "2026-03-01T00:00:00+00:00", "end": "2026-03-31T00:00:00+00:00"},
            headers=headers,
        )
        assert [t["title"] for t in response.json()] == ["API"]

    def test_calendar_rejects_inverted_window(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Site"}, headers=headers).json()
        response = client.get(
            f"/api/v1/projects/{project['id']}/calendar",
            params={"start": "2026-04-01T00:00:00+00:00", "end": "2026-03-01T00:00:00+00:00"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_calendar_accepts_naive_and_aware_bounds(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Site"}, headers=headers).json()
        self._seed(client, headers, project)
        response = client.get(
            f"/api/v1/projects/{project['id']}/calendar",
            params={"start": "2026-03-01T00:00:00Z", "end": "2026-03-31T00:00:00"},
            headers=headers,
        )
        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["API"]

    def test_naive_start_after_aware_end_is_rejected(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Site"}, headers=headers).json()
        response = client.get(
            f"/api/v1/projects/{project['id']}/calendar",
            params={"start": "2026-04-01T00:00:00", "end": "2026-03-01T00:00:00+00:00"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_calendar_of_project_without_workboards_is_empty(self, client, alice):
        _, headers = alice
        project = client.post("/api/v1/projects", json={"name": "Empty"}, headers=headers).json()
        response = client.get(f"/api/v1/projects/{project['id']}/calendar", headers=headers)
        assert response.json() == []


def test_tasks_sorted_by_instant_across_offsets(client, fake_supabase, alice, board):
    _, headers = alice
    _, workboard = board
    # 10:00+02:00 is 08:00 UTC, earlier than 09:00 UTC even though it sorts later as text.
    for title, due in (("Standup", "2026-03-01T09:00:00+00:00"), ("Breakfast", "2026-03-01T10:00:00+02:00")):
        fake_supabase.table("tasks").insert({"workboard_id": workboard["id"], "title": title, "due_date": due}).execute()
    listed = client.get(_tasks_url(workboard["id"]), headers=headers).json()
    assert [t["title"] for t in listed] == ["Breakfast", "Standup"]


def test_due_date_with_offset_is_stored_in_utc(client, fake_supabase, alice, board):
    _, headers = alice
    _, workboard = board
    client.post(_tasks_url(workboard["id"]), json={"title": "Call", "due_date": "2026-03-01T10:00:00+02:00"}, headers=headers)
    assert fake_supabase.tables["tasks"][0]["due_date"] == "2026-03-01T08:00:00+00:00"
