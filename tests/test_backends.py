from taskbridge.models.tasks import RemoteTask, Task
from taskbridge.services.backends import LocalTaskBackend, RemoteTaskBackend
from conftest import REMOTE_TASK


class TestLocalTaskBackend:
    def test_create_uses_epoch_millis(self, local_store, mocker):
        mocker.patch("taskbridge.services.backends.time.time", return_value=1_700_000_000.123)
        task = LocalTaskBackend(local_store).create("Buy milk", "", [])
        assert task.id == 1_700_000_000_123
        assert task.completed is False
        assert task.status == "pending"
        assert task.created_at is not None

    def test_create_bumps_past_existing_ids(self, local_store, mocker):
        mocker.patch("taskbridge.services.backends.time.time", return_value=1.0)
        existing = [Task(id=5000, text="A")]
        task = LocalTaskBackend(local_store).create("B", "", existing)
        assert task.id == 5001

    def test_create_persists_list_with_new_task(self, local_store):
        existing = [Task(id=1, text="A")]
        task = LocalTaskBackend(local_store).create("B", "notes", existing)
        saved = local_store.load_tasks()
        assert [t.id for t in saved] == [1, task.id]
        assert saved[1].description == "notes"
        assert len(existing) == 1

    def test_update_touches_timestamp_and_saves(self, local_store):
        task = Task(id=1, text="A", updated_at="t0")
        task.set_completed(True)
        LocalTaskBackend(local_store).update(task, [task], status="completed")
        assert task.updated_at != "t0"
        assert local_store.load_tasks()[0].completed is True

    def test_delete_saves_remaining(self, local_store):
        a, b = Task(id=1, text="A"), Task(id=2, text="B")
        LocalTaskBackend(local_store).delete(a, [a, b])
        assert [t.id for t in local_store.load_tasks()] == [2]

    def test_last_saved(self, local_store):
        backend = LocalTaskBackend(local_store)
        assert backend.last_saved() is None
        backend.delete(Task(id=1, text="A"), [])
        assert backend.last_saved() is not None


class TestRemoteTaskBackend:
    def test_load_converts_records(self, mock_remote):
        tasks = RemoteTaskBackend(mock_remote).load()
        assert [t.id for t in tasks] == [7, 8]
        assert tasks[1].completed is True

    def test_create_converts_response(self, mock_remote):
        mock_remote.create_task.return_value = RemoteTask.model_validate(REMOTE_TASK)
        task = RemoteTaskBackend(mock_remote).create("X", "", [])
        assert (task.id, task.text, task.completed) == (7, "X", False)
        payload = mock_remote.create_task.call_args.args[0]
        assert payload.title == "X"
        assert payload.status == "pending"

    def test_update_adopts_server_timestamp(self, mock_remote):
        mock_remote.update_task.return_value = RemoteTask.model_validate(
            {**REMOTE_TASK, "status": "completed", "updated_at": "2025-02-01T00:00:00Z"}
        )
        task = Task(id=7, text="X", updated_at="2025-01-01T00:00:00Z")
        RemoteTaskBackend(mock_remote).update(task, [task], status="completed")
        assert task.updated_at == "2025-02-01T00:00:00Z"
        mock_remote.update_task.assert_called_once_with(7, title=None, status="completed")

    def test_delete_calls_service(self, mock_remote):
        task = Task(id=7, text="X")
        RemoteTaskBackend(mock_remote).delete(task, [task])
        mock_remote.delete_task.assert_called_once_with(7)
