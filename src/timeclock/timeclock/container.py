from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_audit_repository import MySQLAuditLog
from .core.constants import DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_directory_repository import MySQLEntityDirectory
from .directory.service import DirectoryService
from .entries.mysql_entry_repository import MySQLEventStore
from .entries.service import ClockService
from .reconciliation.service import ReconciliationService
from .reconciliation.skew import ClockSkewPolicy


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    directory_repo: MySQLEntityDirectory
    entries_repo: MySQLEventStore
    audit_repo: MySQLAuditLog

    directory_service: DirectoryService
    clock_service: ClockService
    reconciliation_service: ReconciliationService


def build_container(
    *,
    db_config: dict,
    skew_threshold_minutes: float = DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    directory_repo = MySQLEntityDirectory(conn)
    entries_repo = MySQLEventStore(conn)
    audit_repo = MySQLAuditLog(conn)

    directory_service = DirectoryService(directory_repo)
    clock_service = ClockService(directory_service, entries_repo, audit_repo)
    reconciliation_service = ReconciliationService(
        directory_service,
        entries_repo,
        audit_repo,
        skew_policy=ClockSkewPolicy(threshold_minutes=float(skew_threshold_minutes)),
    )

    return Container(
        conn=conn,
        directory_repo=directory_repo,
        entries_repo=entries_repo,
        audit_repo=audit_repo,
        directory_service=directory_service,
        clock_service=clock_service,
        reconciliation_service=reconciliation_service,
    )
