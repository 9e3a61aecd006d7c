import threading

from fastapi import APIRouter, Depends, Request

from taskbridge.models.common import MutationResponse, StatusResponse, TaskListResponse
from taskbridge.models.tasks import CreateTaskRequest, EditTaskRequest, Task, TaskFilter
from taskbridge.services.synchronizer import TaskSynchronizer

router = APIRouter(prefix="/api", tags=["tasks"])

# Sync endpoints run in a thread pool; mutations must not interleave.
_lock = threading.Lock()


def get_synchronizer(request: Request) -> TaskSynchronizer:
    return request.app.state.synchronizer


def _respond(sync: TaskSynchronizer, task: Task | None) -> MutationResponse:
    return MutationResponse(task=task, notifications=sync.drain_notifications())


@router.get("/tasks")
def list_tasks(filter: TaskFilter = "all", sync: TaskSynchronizer = Depends(get_synchronizer)) -> TaskListResponse:
    with _lock:
        tasks = sync.list(filter)
    return TaskListResponse(tasks=tasks, result_count=len(tasks))


@router.post("/tasks")
def create_task(request: CreateTaskRequest, sync: TaskSynchronizer = Depends(get_synchronizer)) -> MutationResponse:
    with _lock:
        task = sync.create(request.title, request.description)
        return _respond(sync, task)


@router.post("/tasks/{task_id}/toggle")
def toggle_task(task_id: int, sync: TaskSynchronizer = Depends(get_synchronizer)) -> MutationResponse:
    with _lock:
        task = sync.toggle(task_id)
        return _respond(sync, task)


@router.patch("/tasks/{task_id}")
def edit_task(
    task_id: int, request: EditTaskRequest, sync: TaskSynchronizer = Depends(get_synchronizer),
) -> MutationResponse:
    with _lock:
        task = sync.edit(task_id, request.title)
        return _respond(sync, task)


@router.delete("/tasks/{task_id}")
def delete_task(
    task_id: int, confirm: bool = False, sync: TaskSynchronizer = Depends(get_synchronizer),
) -> MutationResponse:
    with _lock:
        sync.delete(task_id, confirm=lambda prompt: confirm)
        return _respond(sync, None)


@router.get("/status")
def status(sync: TaskSynchronizer = Depends(get_synchronizer)) -> StatusResponse:
    with _lock:
        return StatusResponse(stats=sync.stats(), storage=sync.storage_info())


@router.post("/reload")
def reload(sync: TaskSynchronizer = Depends(get_synchronizer)) -> MutationResponse:
    with _lock:
        sync.reload()
        return _respond(sync, None)
