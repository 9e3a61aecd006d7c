"""Backing stores the synchronizer writes through.

Exactly one backend is active per synchronizer; it is picked once when the
synchronizer initializes.
"""

import time
from datetime import datetime, timezone
from typing import Literal, Protocol

from taskbridge.models.tasks import Task
from taskbridge.services.conversion import convert_local_task, convert_remote_task
from taskbridge.services.local_store import LocalTaskStore
from taskbridge.services.remote_client import RemoteTaskClient

BackendMode = Literal["remote", "fallback"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TaskBackend(Protocol):
    mode: BackendMode
    data_source: str
    create_message: str

    def load(self) -> list[Task]: ...

    def create(self, title: str, description: str, tasks: list[Task]) -> Task:
        """Durably create a task. ``tasks`` is the current list, without it."""
        ...

    def update(
        self,
        task: Task,
        tasks: list[Task],
        *,
        title: str | None = None,
        status: str | None = None,
    ) -> None:
        """Confirm a change already applied to ``task`` in memory."""
        ...

    def delete(self, task: Task, tasks: list[Task]) -> None: ...

    def last_saved(self) -> str | None: ...


class RemoteTaskBackend:
    mode: BackendMode = "remote"
    data_source = "Remote service"
    create_message = "Task created successfully"

    def __init__(self, client: RemoteTaskClient):
        self.client = client

    def load(self) -> list[Task]:
        return [convert_remote_task(t) for t in self.client.list_tasks()]

    def create(self, title: str, description: str, tasks: list[Task]) -> Task:
        draft = Task(id=0, text=title, description=description)
        remote = self.client.create_task(convert_local_task(draft))
        return convert_remote_task(remote)

    def update(
        self,
        task: Task,
        tasks: list[Task],
        *,
        title: str | None = None,
        status: str | None = None,
    ) -> None:
        remote = self.client.update_task(task.id, title=title, status=status)
        if remote.updated_at:
            task.updated_at = remote.updated_at

    def delete(self, task: Task, tasks: list[Task]) -> None:
        self.client.delete_task(task.id)

    def last_saved(self) -> str | None:
        return None


class LocalTaskBackend:
    mode: BackendMode = "fallback"
    data_source = "Local storage"
    create_message = "Task saved locally"

    def __init__(self, store: LocalTaskStore):
        self.store = store

    def load(self) -> list[Task]:
        return self.store.load_tasks()

    @staticmethod
    def _next_id(tasks: list[Task]) -> int:
        # Epoch milliseconds, bumped past existing ids so rapid creates stay unique.
        candidate = int(time.time() * 1000)
        highest = max((t.id for t in tasks), default=0)
        return max(candidate, highest + 1)

    def create(self, title: str, description: str, tasks: list[Task]) -> Task:
        now = _now()
        task = Task(
            id=self._next_id(tasks),
            text=title,
            description=description,
            completed=False,
            status="pending",
            created_at=now,
            updated_at=now,
        )
        self.store.save_tasks([*tasks, task])
        return task

    def update(
        self,
        task: Task,
        tasks: list[Task],
        *,
        title: str | None = None,
        status: str | None = None,
    ) -> None:
        task.updated_at = _now()
        self.store.save_tasks(tasks)

    def delete(self, task: Task, tasks: list[Task]) -> None:
        self.store.save_tasks([t for t in tasks if t.id != task.id])

    def last_saved(self) -> str | None:
        return self.store.last_saved()
