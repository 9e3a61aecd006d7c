import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from taskbridge.exceptions import StorageError
from taskbridge.models.tasks import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
LAST_SAVED_KEY = "lastSaved"

_task_list = TypeAdapter(list[Task])


class LocalStore:
    """Synchronous string key/value store backed by a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        except ValueError:
            logger.warning("Local store %s is corrupt; treating as empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: dict[str, str]) -> None:
        data = self._read_all()
        data.update(items)
        self._write_all(data)


class LocalTaskStore:
    """Task list persistence on top of a LocalStore."""

    def __init__(self, store: LocalStore):
        self.store = store

    def load_tasks(self) -> list[Task]:
        raw = self.store.get(TASKS_KEY)
        if not raw:
            return []
        try:
            tasks = _task_list.validate_json(raw)
        except ValidationError:
            logger.warning("Saved task list is corrupt; starting empty")
            return []
        for task in tasks:
            # Keep status paired with the completion flag on load.
            task.set_completed(task.completed)
        return tasks

    def save_tasks(self, tasks: list[Task]) -> str:
        saved_at = datetime.now(timezone.utc).isoformat()
        self.store.set_many({
            TASKS_KEY: _task_list.dump_json(tasks, by_alias=True).decode("utf-8"),
            LAST_SAVED_KEY: saved_at,
        })
        logger.debug("Saved %d tasks to %s", len(tasks), self.store.path)
        return saved_at

    def last_saved(self) -> str | None:
        try:
            return self.store.get(LAST_SAVED_KEY)
        except StorageError:
            return None
