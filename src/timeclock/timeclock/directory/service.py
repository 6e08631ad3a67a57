from __future__ import annotations

from typing import Optional, Sequence, Tuple
from uuid import UUID

from ..core.exceptions import NotFoundError
from .model import Employee, Terminal
from .repository import EntityDirectory


class DirectoryService:
    def __init__(self, directory: EntityDirectory):
        self._directory = directory

    def resolve_refs(self, employee_code: str, terminal_code: Optional[str] = None) -> Tuple[UUID, Optional[UUID]]:
        """Map human codes to canonical references.

        Raises NotFoundError("employee") or NotFoundError("terminal").
        """
        employee_ref = self._directory.resolve_employee(employee_code)
        if employee_ref is None:
            raise NotFoundError("employee", employee_code)

        terminal_ref = None
        if terminal_code:
            terminal_ref = self._directory.resolve_terminal(terminal_code)
            if terminal_ref is None:
                raise NotFoundError("terminal", terminal_code)

        return employee_ref, terminal_ref

    def list_employees(self) -> Sequence[Employee]:
        return self._directory.list_active_employees()

    def list_terminals(self) -> Sequence[Terminal]:
        return self._directory.list_active_terminals()
