"""HTTP calls for the /tasks resource, as used by the task view."""
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed call: non-2xx response, or no response at all (status_code None)."""

    def __init__(self, status_code: int | None, detail: Any = None):
        super().__init__(f"API call failed ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail


class TasksApi:
    def __init__(self, client: httpx.Client):
        self.client = client

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            r = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(None, str(e)) from e
        if r.is_error:
            try:
                detail = r.json()
            except ValueError:
                detail = r.text
            logger.error("%s %s returned %s: %s", method, url, r.status_code, detail)
            raise ApiError(r.status_code, detail)
        return r

    def list_tasks(self) -> list[dict]:
        return self._send("GET", "/tasks").json()

    def create_task(self, title: str, is_done: bool = False) -> dict:
        return self._send("POST", "/tasks", json={"title": title, "isDone": is_done}).json()

    def update_task(self, task_id: int, title: str, is_done: bool) -> dict:
        return self._send(
            "PUT", f"/tasks/{task_id}", json={"title": title, "isDone": is_done}
        ).json()

    def delete_task(self, task_id: int) -> None:
        self._send("DELETE", f"/tasks/{task_id}")
