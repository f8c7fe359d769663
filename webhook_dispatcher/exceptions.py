class DispatcherError(Exception):
    """Base class for webhook dispatcher errors."""


class ValidationError(DispatcherError):
    """Malformed input; nothing was persisted."""


class NotFoundError(DispatcherError):
    """No record matches the given id."""


class StorageError(DispatcherError):
    """The database could not be reached or the write failed."""


class DeliveryFailure(DispatcherError):
    """A single delivery attempt failed at the transport level.

    Raised inside the delivery worker only; the dispatcher always converts it
    into a ``failed`` delivery log entry.
    """

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
