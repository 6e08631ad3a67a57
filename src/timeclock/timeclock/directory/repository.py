from __future__ import annotations

from typing import Optional, Protocol, Sequence
from uuid import UUID

from .model import Employee, Terminal


class EntityDirectory(Protocol):
    """Giao diện tra cứu mã hiển thị -> khoá chuẩn.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    Only active rows resolve.
    """

    def resolve_employee(self, employee_code: str) -> Optional[UUID]:
        raise NotImplementedError

    def resolve_terminal(self, terminal_code: str) -> Optional[UUID]:
        raise NotImplementedError

    def list_active_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active_terminals(self) -> Sequence[Terminal]:
        raise NotImplementedError
