from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from .attendance.capture import SessionCameraLease
from .attendance.flow import AttendanceFlow
from .attendance.ledger import AttendanceLedger
from .attendance.mysql_time_log_repository import MySQLTimeLogRepository
from .attendance.registry import FlowRegistry
from .attendance.repository import TimeLogRepository
from .attendance.service import AttendanceLogService
from .audits.mysql_audit_repository import MySQLAuditRepository
from .audits.repository import AuditRepository
from .audits.service import AuditService
from .common.datetime_utils import now_utc
from .database.connection import DBConfig, DatabaseConnection
from .storage.evidence import EvidenceStorage, LocalEvidenceStorage
from .stores.mysql_store_repository import MySQLStoreRepository
from .stores.repository import StoreRepository
from .stores.service import StoreService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .verification.client import VisionClient
from .verification.service import VerificationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    stores_repo: StoreRepository
    time_logs_repo: TimeLogRepository
    audits_repo: AuditRepository

    vision_client: VisionClient
    evidence: EvidenceStorage
    ledger: AttendanceLedger
    flows: FlowRegistry

    auth_service: AuthService
    user_service: UserService
    store_service: StoreService
    verification_service: VerificationService
    attendance_log_service: AttendanceLogService
    audit_service: AuditService


def assemble_container(
    *,
    users_repo: UserRepository,
    stores_repo: StoreRepository,
    time_logs_repo: TimeLogRepository,
    audits_repo: AuditRepository,
    vision_client: VisionClient,
    evidence: EvidenceStorage,
    avatar_hosts: Iterable[str] = (),
    clock: Callable[[], datetime] = now_utc,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    ledger = AttendanceLedger(time_logs_repo)
    verification_service = VerificationService(vision_client, avatar_hosts=avatar_hosts)

    def new_flow() -> AttendanceFlow:
        return AttendanceFlow(
            users=users_repo,
            stores=stores_repo,
            ledger=ledger,
            verifier=verification_service,
            evidence=evidence,
            camera=SessionCameraLease(),
            clock=clock,
        )

    return Container(
        conn=conn,
        users_repo=users_repo,
        stores_repo=stores_repo,
        time_logs_repo=time_logs_repo,
        audits_repo=audits_repo,
        vision_client=vision_client,
        evidence=evidence,
        ledger=ledger,
        flows=FlowRegistry(new_flow),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, stores_repo),
        store_service=StoreService(stores_repo, clock=clock),
        verification_service=verification_service,
        attendance_log_service=AttendanceLogService(ledger),
        audit_service=AuditService(audits_repo, stores_repo, vision_client, evidence, clock=clock),
    )


def build_container(
    *,
    db_config: dict,
    ai_api_key: str,
    ai_base_url: str,
    ai_model: str,
    ai_timeout_seconds: float,
    evidence_dir: str,
    evidence_public_url: str,
    avatar_hosts: Iterable[str] = (),
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        stores_repo=MySQLStoreRepository(conn),
        time_logs_repo=MySQLTimeLogRepository(conn),
        audits_repo=MySQLAuditRepository(conn),
        vision_client=VisionClient(
            api_key=ai_api_key,
            base_url=ai_base_url,
            model=ai_model,
            timeout_seconds=ai_timeout_seconds,
        ),
        evidence=LocalEvidenceStorage(evidence_dir, evidence_public_url),
        avatar_hosts=avatar_hosts,
        conn=conn,
    )
