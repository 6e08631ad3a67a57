from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a human identifier does not resolve to a known entity."""

    def __init__(self, which: str, human_id: str | None = None):
        self.which = which
        self.human_id = human_id
        message = f"{which} not found" if human_id is None else f"{which} not found: {human_id}"
        super().__init__(message)


class DuplicateEntryError(DomainError):
    """Raised by the event store when (employee, clock_in) already exists."""


class StoreCommitError(DomainError):
    """Raised when the store fails to commit a single entry."""


class TransientTransportError(DomainError):
    """No usable response reached the client; the batch may be retried."""


class QueueStorageError(DomainError):
    """The local queue could not persist an event (storage exhausted)."""


class SubmissionRejectedError(DomainError):
    """The server answered a direct clock write with a 4xx status."""

    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)
