from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.mysql_academics_repository import MySQLAcademicsRepository
from .academics.repository import AcademicsRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import DashboardService
from .attendance.sheet_service import AttendanceSheetService
from .core.constants import DEFAULT_OTP_TTL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import ProfileService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .verification.mailer import FlaskMailVerificationSender, VerificationSender
from .verification.mysql_verification_repository import MySQLVerificationTokenRepository
from .verification.repository import VerificationTokenRepository
from .verification.service import VerificationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    tokens_repo: VerificationTokenRepository
    academics_repo: AcademicsRepository
    profiles_repo: ProfileRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    verification_service: VerificationService
    profile_service: ProfileService
    dashboard_service: DashboardService
    sheet_service: AttendanceSheetService


def build_services(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    tokens_repo: VerificationTokenRepository,
    academics_repo: AcademicsRepository,
    profiles_repo: ProfileRepository,
    attendance_repo: AttendanceRepository,
    sender: VerificationSender,
    otp_ttl_minutes: int = DEFAULT_OTP_TTL_MINUTES,
    **verification_options,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    verification_service = VerificationService(
        users_repo,
        tokens_repo,
        sender,
        ttl_minutes=otp_ttl_minutes,
        **verification_options,
    )
    return Container(
        conn=conn,
        users_repo=users_repo,
        tokens_repo=tokens_repo,
        academics_repo=academics_repo,
        profiles_repo=profiles_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo, verification_service),
        verification_service=verification_service,
        profile_service=ProfileService(users_repo, profiles_repo, academics_repo),
        dashboard_service=DashboardService(attendance_repo, profiles_repo, academics_repo, users_repo),
        sheet_service=AttendanceSheetService(attendance_repo, academics_repo, profiles_repo, users_repo),
    )


def build_container(*, db_config: dict, otp_ttl_minutes: int = DEFAULT_OTP_TTL_MINUTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        tokens_repo=MySQLVerificationTokenRepository(conn),
        academics_repo=MySQLAcademicsRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        sender=FlaskMailVerificationSender(),
        otp_ttl_minutes=otp_ttl_minutes,
    )
