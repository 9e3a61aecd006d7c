"""Optimistic in-memory mutations with exact rollback."""

from collections.abc import Callable
from enum import Enum

from taskbridge.exceptions import MutationStateError
from taskbridge.models.tasks import Task


class MutationState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


class OptimisticMutation:
    """A tentative change to one task.

    Creating the mutation snapshots the task and applies ``change`` right
    away. It then settles exactly once: ``confirm()`` keeps the change,
    ``rollback()`` restores every field from the snapshot.
    """

    def __init__(self, task: Task, change: Callable[[Task], None]):
        self.task = task
        self._snapshot = task.model_copy()
        self.state = MutationState.PENDING
        change(task)

    def _settle(self, state: MutationState) -> None:
        if self.state is not MutationState.PENDING:
            raise MutationStateError(
                f"Mutation of task {self.task.id} already {self.state.value}"
            )
        self.state = state

    def confirm(self) -> None:
        self._settle(MutationState.CONFIRMED)

    def rollback(self) -> None:
        self._settle(MutationState.ROLLED_BACK)
        for name in Task.model_fields:
            setattr(self.task, name, getattr(self._snapshot, name))
