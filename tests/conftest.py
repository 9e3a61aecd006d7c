import json

import pytest
import requests
from unittest.mock import MagicMock

from taskbridge.models.tasks import RemoteTask
from taskbridge.services.local_store import LocalStore, LocalTaskStore
from taskbridge.services.remote_client import RemoteTaskClient
from taskbridge.services.synchronizer import TaskSynchronizer

BASE_URL = "http://tasks.test/api"


# --- Canned service records ---

REMOTE_TASK = {
    "id": 7,
    "title": "X",
    "description": "",
    "status": "pending",
    "created_at": "2025-01-01T00:00:00Z",
    "updated_at": "2025-01-01T00:00:00Z",
}

REMOTE_TASK_COMPLETED = {
    "id": 8,
    "title": "Write report",
    "description": "Quarterly numbers",
    "status": "completed",
    "created_at": "2025-01-02T09:30:00Z",
    "updated_at": "2025-01-03T10:00:00Z",
}

REMOTE_TASK_LIST = {"tasks": [REMOTE_TASK, REMOTE_TASK_COMPLETED]}


def make_response(status_code: int, body=None) -> requests.Response:
    """Build a real requests.Response with a JSON (or raw bytes) body."""
    resp = requests.Response()
    resp.status_code = status_code
    if body is None:
        resp._content = b""
    elif isinstance(body, bytes):
        resp._content = body
    else:
        resp._content = json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    resp.url = BASE_URL
    return resp


@pytest.fixture
def mock_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def remote_client(mock_session):
    return RemoteTaskClient(base_url=BASE_URL, timeout=1.0, session=mock_session)


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def local_store(storage_path):
    return LocalTaskStore(LocalStore(storage_path))


@pytest.fixture
def mock_remote():
    """RemoteTaskClient stand-in; defaults to a reachable service with two tasks."""
    remote = MagicMock(spec=RemoteTaskClient)
    remote.base_url = BASE_URL
    remote.is_available.return_value = True
    remote.list_tasks.return_value = [RemoteTask.model_validate(t) for t in REMOTE_TASK_LIST["tasks"]]
    remote.update_task.return_value = RemoteTask.model_validate(REMOTE_TASK)
    return remote


@pytest.fixture
def remote_sync(mock_remote, local_store):
    sync = TaskSynchronizer(mock_remote, local_store, confirm=lambda prompt: True)
    sync.initialize()
    return sync


@pytest.fixture
def fallback_sync(mock_remote, local_store):
    mock_remote.is_available.return_value = False
    sync = TaskSynchronizer(mock_remote, local_store, confirm=lambda prompt: True)
    sync.initialize()
    return sync
