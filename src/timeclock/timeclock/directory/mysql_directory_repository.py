from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, Terminal
from .repository import EntityDirectory


class MySQLEntityDirectory(EntityDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve_employee(self, employee_code: str) -> Optional[UUID]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM employees WHERE employee_code=%s AND is_active=1",
                (employee_code,),
            )
            row = fetchone(cur)
            return UUID(row["id"]) if row else None

    def resolve_terminal(self, terminal_code: str) -> Optional[UUID]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM terminals WHERE terminal_code=%s AND is_active=1",
                (terminal_code,),
            )
            row = fetchone(cur)
            return UUID(row["id"]) if row else None

    def list_active_employees(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_code, full_name, department, is_active
                FROM employees
                WHERE is_active=1
                ORDER BY full_name
                """
            )
            return [
                Employee(
                    id=UUID(r["id"]),
                    employee_code=r["employee_code"],
                    full_name=r["full_name"],
                    department=r.get("department"),
                    is_active=bool(r.get("is_active", True)),
                )
                for r in fetchall(cur)
            ]

    def list_active_terminals(self) -> Sequence[Terminal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, terminal_code, name, location, is_active
                FROM terminals
                WHERE is_active=1
                ORDER BY name
                """
            )
            return [
                Terminal(
                    id=UUID(r["id"]),
                    terminal_code=r["terminal_code"],
                    name=r["name"],
                    location=r.get("location"),
                    is_active=bool(r.get("is_active", True)),
                )
                for r in fetchall(cur)
            ]
