from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    `employee_code` là mã hiển thị (mã thẻ), `id` là khoá chuẩn của hệ thống.
    """

    id: UUID
    employee_code: str
    full_name: str
    department: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "employeeCode": self.employee_code,
            "fullName": self.full_name,
            "department": self.department,
        }


@dataclass(frozen=True)
class Terminal:
    """Thực thể miền (domain): Máy chấm công."""

    id: UUID
    terminal_code: str
    name: str
    location: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "terminalCode": self.terminal_code,
            "name": self.name,
            "location": self.location,
        }
