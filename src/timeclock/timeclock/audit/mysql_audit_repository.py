from __future__ import annotations

import json

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import AuditLogEntry
from .repository import AuditLog


class MySQLAuditLog(AuditLog):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, record: AuditLogEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(employee_id, action, table_name, record_id, new_data)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    str(record.employee_ref),
                    record.action.value,
                    record.table_name,
                    str(record.record_id),
                    json.dumps(record.new_data, default=str),
                ),
            )
