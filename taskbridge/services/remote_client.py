import logging

import requests
from pydantic import ValidationError

from taskbridge.config import get_settings
from taskbridge.exceptions import RemoteUnavailableError, ServiceError, TaskNotFoundError
from taskbridge.http_client import get_session
from taskbridge.models.tasks import RemoteTask, RemoteTaskPayload

logger = logging.getLogger(__name__)


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP Error: {resp.status_code}"


def _parse_task(item) -> RemoteTask:
    try:
        return RemoteTask.model_validate(item)
    except ValidationError as e:
        raise ServiceError(f"Malformed task record from task service: {e}") from e


def _handle_response(resp: requests.Response) -> dict:
    if resp.status_code == 404:
        raise TaskNotFoundError(_error_message(resp), resp.status_code)
    if resp.status_code >= 400:
        raise ServiceError(_error_message(resp), resp.status_code)
    if resp.status_code == 204 or not resp.content:
        return {}
    try:
        body = resp.json()
    except ValueError as e:
        raise RemoteUnavailableError(f"Invalid JSON from task service: {e}") from e
    return body if isinstance(body, dict) else {}


class RemoteTaskClient:
    """HTTP client for the remote task service.

    Every method raises RemoteUnavailableError on transport failure and
    ServiceError (or TaskNotFoundError) when the service rejects the request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.remote_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        return self._session or get_session()

    def _request(self, method: str, path: str, body: dict | None = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Task service request failed: %s %s: %s", method, url, e)
            raise RemoteUnavailableError(f"Task service unreachable: {e}") from e
        return _handle_response(resp)

    def is_available(self) -> bool:
        """Any 2xx answer to a task list request counts as "service up"."""
        try:
            resp = self.session.get(f"{self.base_url}/tasks", timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Task service not available: %s", e)
            return False
        return resp.ok

    def list_tasks(self) -> list[RemoteTask]:
        data = self._request("GET", "/tasks")
        tasks = data.get("tasks") or []
        if not isinstance(tasks, list):
            raise ServiceError("Task service returned a malformed task list.")
        return [_parse_task(t) for t in tasks]

    def get_task(self, task_id: int) -> RemoteTask:
        data = self._request("GET", f"/tasks/{task_id}")
        if "task" not in data:
            raise TaskNotFoundError(f"Task {task_id} not found.", 404)
        return _parse_task(data["task"])

    def create_task(self, payload: RemoteTaskPayload) -> RemoteTask:
        data = self._request("POST", "/tasks", payload.model_dump())
        if "task" not in data:
            raise ServiceError("Task service returned no task for create.")
        return _parse_task(data["task"])

    def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> RemoteTask:
        """Send a partial update. Only provided fields are included."""
        body: dict = {}
        if title is not None:
            body["title"] = title
        if description is not None:
            body["description"] = description
        if status is not None:
            body["status"] = status
        data = self._request("PUT", f"/tasks/{task_id}", body)
        if not data.get("task"):
            raise ServiceError("Task service returned no task for update.")
        return _parse_task(data["task"])

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}")
