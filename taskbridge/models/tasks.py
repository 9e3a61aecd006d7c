from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["pending", "completed"]
TaskFilter = Literal["all", "active", "completed"]


class Task(BaseModel):
    """A task as held in memory and in the local store.

    Serialized with ``by_alias=True`` the timestamps are written as
    ``createdAt`` / ``updatedAt``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str
    description: str = ""
    completed: bool = False
    status: TaskStatus = "pending"
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    def set_completed(self, completed: bool) -> None:
        self.completed = completed
        self.status = "completed" if completed else "pending"


class RemoteTask(BaseModel):
    id: int
    title: str
    description: str | None = None
    status: str = "pending"
    created_at: str | None = None
    updated_at: str | None = None


class RemoteTaskPayload(BaseModel):
    """Body sent to the remote service when creating a task."""

    title: str
    description: str = ""
    status: TaskStatus = "pending"


class CreateTaskRequest(BaseModel):
    title: str
    description: str = ""


class EditTaskRequest(BaseModel):
    title: str | None = None
