from __future__ import annotations


class ReferralError(Exception):
    """Base for errors that map onto an HTTP status and a client-safe message."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReferralError):
    """Malformed or missing client input. Rejected outright, nothing persisted."""

    status_code = 400


class NotFoundError(ReferralError):
    status_code = 404


class StorageError(ReferralError):
    """Any persistence fault.

    ``message`` is the fixed text returned to clients; the backend error is
    chained as ``__cause__`` and only ever logged.
    """

    status_code = 500

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
