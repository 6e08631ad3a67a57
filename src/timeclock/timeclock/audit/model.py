from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import UUID

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLogEntry:
    """Bản ghi nhật ký kiểm toán (chỉ ghi thêm, không sửa/xoá)."""

    employee_ref: UUID
    action: AuditAction
    record_id: UUID
    table_name: str = "clock_entries"
    new_data: Dict[str, Any] = field(default_factory=dict)
    audit_id: Optional[int] = None
