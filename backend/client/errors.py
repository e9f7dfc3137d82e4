class ClientError(Exception):
    """Base class for everything the client layer raises."""


class NetworkError(ClientError):
    """The service could not be reached or did not answer in time."""


class RemoteError(ClientError):
    def __init__(self, status_code: int, detail=None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


class NotFoundError(RemoteError):
    pass


class AuthRequiredError(ClientError):
    """The operation needs a logged-in session."""


class StepValidationError(ClientError):
    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class DraftClosedError(ClientError):
    """The draft was already submitted or deleted."""


class OperationCancelled(ClientError):
    pass


class MediaFileError(ClientError):
    """A queued media file could not be read from disk."""
