"""Field mapping between remote task records and in-memory tasks."""

from taskbridge.models.tasks import RemoteTask, RemoteTaskPayload, Task


def convert_remote_task(remote: RemoteTask | dict) -> Task:
    """Convert a remote record into the local task shape.

    Timestamps are carried over untouched; ``completed`` is derived from
    ``status`` so the two always agree.
    """
    if isinstance(remote, dict):
        remote = RemoteTask.model_validate(remote)
    completed = remote.status == "completed"
    return Task(
        id=remote.id,
        text=remote.title,
        description=remote.description or "",
        completed=completed,
        status="completed" if completed else "pending",
        created_at=remote.created_at,
        updated_at=remote.updated_at,
    )


def convert_local_task(task: Task) -> RemoteTaskPayload:
    """Convert a local task into the body the remote service accepts.

    The id and timestamps are dropped; the service assigns them.
    """
    return RemoteTaskPayload(
        title=task.text,
        description=task.description or "",
        status="completed" if task.completed else "pending",
    )
