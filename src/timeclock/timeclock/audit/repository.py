from __future__ import annotations

from typing import Protocol

from .model import AuditLogEntry


class AuditLog(Protocol):
    """Append-only sink. Callers treat it as fire-and-forget."""

    def append(self, record: AuditLogEntry) -> None:
        raise NotImplementedError
