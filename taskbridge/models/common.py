from typing import Literal

from pydantic import BaseModel

from taskbridge.models.tasks import Task

NotificationLevel = Literal["success", "info", "warning", "error"]


class ErrorResponse(BaseModel):
    error_code: str
    message: str


class Notification(BaseModel):
    level: NotificationLevel
    message: str


class TaskListResponse(BaseModel):
    tasks: list[Task]
    result_count: int


class MutationResponse(BaseModel):
    task: Task | None = None
    notifications: list[Notification]


class TaskStats(BaseModel):
    total: int
    completed: int


class StorageInfo(BaseModel):
    mode: Literal["remote", "fallback"]
    data_source: str
    status: str
    tasks_in_memory: int
    last_saved: str | None = None


class StatusResponse(BaseModel):
    stats: TaskStats
    storage: StorageInfo
