"""Exception hierarchy for taskdeck."""


class TaskdeckError(Exception):
    """Base class for taskdeck errors."""


class ApiError(TaskdeckError):
    """A request to the backend failed.

    ``status`` is the HTTP status, or None when the request never got a
    response (connection refused, timeout, DNS failure).
    """

    def __init__(self, message: str, status: int | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class AuthExpiredError(ApiError):
    """The backend rejected our token (HTTP 401). The session is gone."""

    def __init__(self, message: str = "session expired, please log in again") -> None:
        super().__init__(message, status=401, code=401)


class ValidationError(TaskdeckError):
    """Form input failed validation.

    ``errors`` maps field name to a human-readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors
