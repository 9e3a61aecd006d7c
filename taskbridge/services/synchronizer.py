import logging
from collections.abc import Callable

from taskbridge.exceptions import TaskbridgeError
from taskbridge.models.common import Notification, NotificationLevel, StorageInfo, TaskStats
from taskbridge.models.tasks import Task, TaskFilter
from taskbridge.services.backends import LocalTaskBackend, RemoteTaskBackend, TaskBackend
from taskbridge.services.local_store import LocalTaskStore
from taskbridge.services.mutations import OptimisticMutation
from taskbridge.services.remote_client import RemoteTaskClient

logger = logging.getLogger(__name__)

Confirmer = Callable[[str], bool]
Notifier = Callable[[Notification], None]

DELETE_PROMPT = "Are you sure you want to delete this task?"
EMPTY_TITLE_MESSAGE = "Please enter a task!"

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _deny(prompt: str) -> bool:
    return False


class TaskSynchronizer:
    """Owns the in-memory task list and writes every edit through one backend.

    ``initialize()`` probes the remote service and picks the remote backend
    when it answers, the local store otherwise. Backend failures never escape:
    they become error notifications and optimistic changes are rolled back.
    """

    def __init__(
        self,
        remote: RemoteTaskClient,
        local: LocalTaskStore,
        confirm: Confirmer = _deny,
        notify: Notifier | None = None,
    ):
        self.remote = remote
        self.local = local
        self.confirm = confirm
        self._notify_hook = notify
        self.notifications: list[Notification] = []
        self.backend: TaskBackend | None = None
        self._tasks: list[Task] = []

    # --- Notifications ---

    def _notify(self, level: NotificationLevel, message: str) -> None:
        notification = Notification(level=level, message=message)
        logger.log(_LOG_LEVELS[level], "%s", message)
        self.notifications.append(notification)
        if self._notify_hook is not None:
            self._notify_hook(notification)

    def drain_notifications(self) -> list[Notification]:
        """Return and clear the notifications issued since the last drain."""
        drained, self.notifications = self.notifications, []
        return drained

    # --- Mode selection ---

    @property
    def mode(self) -> str | None:
        return self.backend.mode if self.backend else None

    def _require_backend(self) -> TaskBackend:
        if self.backend is None:
            raise RuntimeError("TaskSynchronizer.initialize() has not been called")
        return self.backend

    def initialize(self) -> None:
        if self.remote.is_available():
            logger.info("Task service connected at %s", self.remote.base_url)
            self.backend = RemoteTaskBackend(self.remote)
            try:
                self._tasks = self.backend.load()
            except TaskbridgeError as e:
                self._tasks = []
                self._notify("error", f"Failed to load tasks: {e}")
        else:
            logger.warning("Task service not available, using local storage")
            self.backend = LocalTaskBackend(self.local)
            try:
                self._tasks = self.backend.load()
            except TaskbridgeError as e:
                self._tasks = []
                self._notify("error", f"Failed to load saved tasks: {e}")
        logger.info("Loaded %d tasks in %s mode", len(self._tasks), self.backend.mode)

    def reload(self) -> None:
        self.initialize()

    # --- Reads ---

    def get(self, task_id: int) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def list(self, filter: TaskFilter = "all") -> list[Task]:
        if filter == "all":
            return list(self._tasks)
        if filter == "active":
            return [t for t in self._tasks if not t.completed]
        if filter == "completed":
            return [t for t in self._tasks if t.completed]
        raise ValueError(f"Unknown filter: {filter!r}")

    def stats(self) -> TaskStats:
        return TaskStats(
            total=len(self._tasks),
            completed=sum(1 for t in self._tasks if t.completed),
        )

    def storage_info(self) -> StorageInfo:
        backend = self._require_backend()
        connected = backend.mode == "remote"
        return StorageInfo(
            mode=backend.mode,
            data_source=backend.data_source,
            status="Connected" if connected else "Using local storage",
            tasks_in_memory=len(self._tasks),
            last_saved=backend.last_saved(),
        )

    # --- Mutations ---

    def create(self, title: str, description: str = "") -> Task | None:
        backend = self._require_backend()
        title = (title or "").strip()
        if not title:
            self._notify("warning", EMPTY_TITLE_MESSAGE)
            return None

        try:
            task = backend.create(title, description, self._tasks)
        except TaskbridgeError as e:
            self._notify("error", f"Failed to create task: {e}")
            return None

        self._tasks.append(task)
        self._notify("success" if backend.mode == "remote" else "info", backend.create_message)
        return task

    def toggle(self, task_id: int) -> Task | None:
        backend = self._require_backend()
        task = self.get(task_id)
        if task is None:
            return None

        mutation = OptimisticMutation(task, lambda t: t.set_completed(not t.completed))
        try:
            backend.update(task, self._tasks, status=task.status)
        except TaskbridgeError as e:
            mutation.rollback()
            self._notify("error", f"Failed to update task: {e}")
            return task
        mutation.confirm()
        return task

    def edit(self, task_id: int, new_title: str | None) -> Task | None:
        backend = self._require_backend()
        if new_title is None:
            return None
        new_title = new_title.strip()
        if not new_title:
            self._notify("warning", EMPTY_TITLE_MESSAGE)
            return None
        task = self.get(task_id)
        if task is None:
            return None

        def set_title(t: Task) -> None:
            t.text = new_title

        mutation = OptimisticMutation(task, set_title)
        try:
            backend.update(task, self._tasks, title=new_title)
        except TaskbridgeError as e:
            mutation.rollback()
            self._notify("error", f"Failed to update task: {e}")
            return task
        mutation.confirm()
        self._notify("success", "Task updated")
        return task

    def delete(self, task_id: int, confirm: Confirmer | None = None) -> bool:
        """Delete a task once the confirmation gate agrees.

        ``confirm`` overrides the gate given at construction for this call.
        """
        backend = self._require_backend()
        task = self.get(task_id)
        if task is None:
            return False
        gate = confirm or self.confirm
        if not gate(DELETE_PROMPT):
            return False

        try:
            backend.delete(task, self._tasks)
        except TaskbridgeError as e:
            self._notify("error", f"Failed to delete task: {e}")
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._notify("success", "Task deleted")
        return True
