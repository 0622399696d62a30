import httpx
import pytest
from fastapi.testclient import TestClient

from app.client.api import ApiError, TasksApi
from app.client.task_view import EMPTY_TITLE_MESSAGE, TaskView


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def view(client: TestClient, clock: FakeClock):
    v = TaskView(client, clock=clock)
    assert v.load()
    return v


def _failing_client(status_code: int, body=None) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body or {"message": "nope"})

    return httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")


def test_load_mirrors_server(client: TestClient, clock: FakeClock):
    client.post("/tasks", json={"title": "from server", "isDone": True})

    v = TaskView(client, clock=clock)
    assert v.tasks == []
    assert v.load()
    assert v.loaded
    assert [(t["title"], t["isDone"]) for t in v.tasks] == [("from server", True)]


def test_create_merges_response_without_refetch(view: TaskView, client: TestClient):
    created = view.create("  Buy milk  ")
    assert created == {"id": 1, "title": "Buy milk", "isDone": False, "userId": 1}
    assert view.tasks == [created]
    assert view.banner.kind == "success"

    # a task created elsewhere is not picked up until the next load
    client.post("/tasks", json={"title": "elsewhere", "isDone": False})
    assert [t["title"] for t in view.tasks] == ["Buy milk"]


def test_create_blank_title_is_rejected_locally(view: TaskView, client: TestClient):
    assert view.create("   ") is None
    assert view.banner.kind == "error"
    assert view.banner.message == EMPTY_TITLE_MESSAGE
    assert client.get("/tasks").json() == []


def test_create_shows_server_validation_message(view: TaskView):
    assert view.create("x" * 201) is None
    assert view.tasks == []
    assert view.banner.message == "Task title must be between 1 and 200 characters"


def test_toggle_replaces_task_from_response(view: TaskView):
    created = view.create("Toggle me")

    updated = view.toggle(created["id"])
    assert updated["isDone"] is True
    assert view.find(created["id"])["isDone"] is True
    assert view.banner.message == "Task marked as done!"

    view.toggle(created["id"])
    assert view.find(created["id"])["isDone"] is False
    assert view.banner.message == "Task marked as undone!"


def test_delete_removes_locally(view: TaskView, client: TestClient):
    a = view.create("a")
    b = view.create("b")

    assert view.delete(a["id"])
    assert view.tasks == [b]
    assert [t["id"] for t in client.get("/tasks").json()] == [b["id"]]


def test_delete_missing_task_leaves_list_unchanged(view: TaskView, client: TestClient):
    a = view.create("a")
    client.delete(f"/tasks/{a['id']}")

    assert not view.delete(a["id"])
    assert view.tasks == [a]
    assert view.banner.kind == "error"
    assert "no longer exists" in view.banner.message


def test_inline_edit_enter_commits(view: TaskView):
    task = view.create("Old title")
    view.start_edit(task["id"])
    assert view.edit_buffer == "Old title"

    view.set_edit_buffer("New title")
    view.handle_key("Enter")

    assert view.editing_id is None
    assert view.find(task["id"])["title"] == "New title"
    assert view.find(task["id"])["isDone"] is False


def test_inline_edit_escape_cancels(view: TaskView, client: TestClient):
    task = view.create("Keep")
    view.start_edit(task["id"])
    view.set_edit_buffer("Discarded")
    view.handle_key("Escape")

    assert view.editing_id is None
    assert view.edit_buffer == ""
    assert view.find(task["id"])["title"] == "Keep"
    assert client.get("/tasks").json()[0]["title"] == "Keep"


def test_inline_edit_guards_empty_title(view: TaskView, client: TestClient):
    task = view.create("Keep")
    view.start_edit(task["id"])
    view.set_edit_buffer("  ")

    assert view.save_edit() is None
    assert view.editing_id == task["id"]
    assert view.banner.message == EMPTY_TITLE_MESSAGE
    assert client.get("/tasks").json()[0]["title"] == "Keep"


def test_keys_ignored_when_not_editing(view: TaskView):
    task = view.create("Idle")
    view.handle_key("Enter")
    view.handle_key("Escape")
    assert view.find(task["id"]) == task


def test_banner_auto_dismisses(view: TaskView, clock: FakeClock):
    view.create("")
    assert view.banner is not None
    clock.now += view.error_seconds - 0.1
    assert view.banner is not None
    clock.now += 0.2
    assert view.banner is None

    view.create("ok")
    assert view.banner.kind == "success"
    clock.now += view.success_seconds
    assert view.banner is None


def test_dismiss_banner(view: TaskView):
    view.create("")
    view.dismiss_banner()
    assert view.banner is None


def test_summary_counts(view: TaskView):
    a = view.create("a")
    view.create("b")
    view.toggle(a["id"])
    assert view.summary() == (2, 1)


def test_server_error_keeps_state(clock: FakeClock):
    v = TaskView(_failing_client(500), clock=clock)
    v.tasks = [{"id": 1, "title": "local", "isDone": False, "userId": 1}]

    assert v.toggle(1) is None
    assert v.tasks == [{"id": 1, "title": "local", "isDone": False, "userId": 1}]
    assert v.banner.message == "Failed to update task. Please try again."

    assert not v.load()
    assert v.banner.message == "Failed to load tasks. Please try again."
    assert v.tasks[0]["title"] == "local"


def test_unreachable_server(clock: FakeClock):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    v = TaskView(client, clock=clock)

    assert v.create("anything") is None
    assert v.tasks == []
    assert v.banner.message == "Could not reach the server. Please try again."


def test_api_error_carries_status_and_detail():
    api = TasksApi(_failing_client(409, {"message": "Conflict with existing data"}))
    with pytest.raises(ApiError) as exc_info:
        api.create_task("x")
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == {"message": "Conflict with existing data"}
