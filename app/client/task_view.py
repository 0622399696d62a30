"""Client-side state for the task list screen.

The view keeps its own copy of the server's task collection. Each action makes
one HTTP call and, when it succeeds, folds the server's response into that copy
instead of fetching the whole list again. A failed call leaves the list as it
was and raises a short-lived error banner.
"""
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from app.client.api import ApiError, TasksApi

logger = logging.getLogger(__name__)

SUCCESS_SECONDS = 3.0
ERROR_SECONDS = 5.0

FAILURE_MESSAGES = {
    "load": "Failed to load tasks. Please try again.",
    "create": "Failed to create task. Please try again.",
    "update": "Failed to update task. Please try again.",
    "delete": "Failed to delete task. Please try again.",
}
EMPTY_TITLE_MESSAGE = "Task title cannot be empty"


@dataclass
class Banner:
    kind: str  # "error" or "success"
    message: str
    expires_at: float


def failure_message(action: str, err: ApiError) -> str:
    if err.status_code is None:
        return "Could not reach the server. Please try again."
    if err.status_code == 400:
        errors = err.detail.get("errors") if isinstance(err.detail, dict) else None
        if errors:
            first = next(iter(errors.values()))
            if first:
                return first[0]
        return "The task was rejected as invalid."
    if err.status_code == 404:
        return "That task no longer exists. Refresh to see the latest list."
    return FAILURE_MESSAGES[action]


class TaskView:
    def __init__(
        self,
        client: httpx.Client,
        clock: Callable[[], float] = time.monotonic,
        success_seconds: float = SUCCESS_SECONDS,
        error_seconds: float = ERROR_SECONDS,
    ):
        self.api = TasksApi(client)
        self.clock = clock
        self.success_seconds = success_seconds
        self.error_seconds = error_seconds
        self.tasks: list[dict] = []
        self.loaded = False
        self.editing_id: int | None = None
        self.edit_buffer = ""
        self._banner: Banner | None = None

    # banners

    @property
    def banner(self) -> Banner | None:
        if self._banner is not None and self.clock() >= self._banner.expires_at:
            self._banner = None
        return self._banner

    def dismiss_banner(self) -> None:
        self._banner = None

    def _show(self, kind: str, message: str) -> None:
        seconds = self.error_seconds if kind == "error" else self.success_seconds
        self._banner = Banner(kind, message, self.clock() + seconds)

    def _fail(self, action: str, err: ApiError) -> None:
        logger.warning("Task %s failed: %s", action, err)
        self._show("error", failure_message(action, err))

    # queries

    def find(self, task_id: int) -> dict | None:
        return next((t for t in self.tasks if t["id"] == task_id), None)

    def summary(self) -> tuple[int, int]:
        return len(self.tasks), sum(1 for t in self.tasks if t["isDone"])

    # actions

    def load(self) -> bool:
        """Fetch the full collection; done once when the view is mounted."""
        try:
            tasks = self.api.list_tasks()
        except ApiError as e:
            self._fail("load", e)
            return False
        self.tasks = tasks
        self.loaded = True
        return True

    def create(self, title: str) -> dict | None:
        title = title.strip()
        if not title:
            self._show("error", EMPTY_TITLE_MESSAGE)
            return None
        try:
            created = self.api.create_task(title, False)
        except ApiError as e:
            self._fail("create", e)
            return None
        self.tasks = [*self.tasks, created]
        self._show("success", "Task created successfully!")
        return created

    def toggle(self, task_id: int) -> dict | None:
        task = self.find(task_id)
        if task is None:
            return None
        try:
            updated = self.api.update_task(task_id, task["title"], not task["isDone"])
        except ApiError as e:
            self._fail("update", e)
            return None
        self._replace(updated)
        self._show("success", f"Task marked as {'done' if updated['isDone'] else 'undone'}!")
        return updated

    def delete(self, task_id: int) -> bool:
        try:
            self.api.delete_task(task_id)
        except ApiError as e:
            self._fail("delete", e)
            return False
        self.tasks = [t for t in self.tasks if t["id"] != task_id]
        if self.editing_id == task_id:
            self.cancel_edit()
        self._show("success", "Task deleted successfully!")
        return True

    # inline editing

    def start_edit(self, task_id: int) -> None:
        task = self.find(task_id)
        if task is None:
            return
        self.editing_id = task_id
        self.edit_buffer = task["title"]

    def set_edit_buffer(self, text: str) -> None:
        self.edit_buffer = text

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.edit_buffer = ""

    def save_edit(self) -> dict | None:
        if self.editing_id is None:
            return None
        task = self.find(self.editing_id)
        if task is None:
            self.cancel_edit()
            return None
        title = self.edit_buffer.strip()
        if not title:
            self._show("error", EMPTY_TITLE_MESSAGE)
            return None
        try:
            updated = self.api.update_task(task["id"], title, task["isDone"])
        except ApiError as e:
            # keep the buffer open so the edit can be retried
            self._fail("update", e)
            return None
        self._replace(updated)
        self.cancel_edit()
        self._show("success", "Task updated successfully!")
        return updated

    def handle_key(self, key: str) -> None:
        if self.editing_id is None:
            return
        if key == "Enter":
            self.save_edit()
        elif key == "Escape":
            self.cancel_edit()

    def _replace(self, updated: dict) -> None:
        self.tasks = [updated if t["id"] == updated["id"] else t for t in self.tasks]
