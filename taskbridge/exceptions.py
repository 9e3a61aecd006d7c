class TaskbridgeError(Exception):
    """Base class for every error raised by taskbridge."""


class RemoteUnavailableError(TaskbridgeError):
    """Raised when the remote task service cannot be reached."""


class ServiceError(TaskbridgeError):
    """Raised when the remote task service answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TaskNotFoundError(ServiceError):
    """Raised when the remote task service does not know the requested task."""


class StorageError(TaskbridgeError):
    """Raised when the local store cannot be read or written."""


class MutationStateError(TaskbridgeError):
    """Raised when an optimistic mutation is settled twice."""
