from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.passwords import PasswordHasher
from .auth.service import SessionAuthenticator
from .auth.tokens import TokenService
from .core.constants import DEFAULT_PASSWORD_CHECK_TIMEOUT, DEFAULT_TOKEN_TTL_HOURS, LATE_CUTOFF_HOUR
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    """Everything a request handler needs, built once per app."""

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    devices_repo: DeviceRepository

    token_service: TokenService
    password_hasher: PasswordHasher
    session_authenticator: SessionAuthenticator

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    device_service: DeviceService
    report_service: ReportService


def assemble_container(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    devices_repo: DeviceRepository,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    password_check_timeout: float = DEFAULT_PASSWORD_CHECK_TIMEOUT,
    late_cutoff_hour: int = LATE_CUTOFF_HOUR,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""
    token_service = TokenService(jwt_secret, algorithm=jwt_algorithm, ttl=timedelta(hours=token_ttl_hours))
    password_hasher = PasswordHasher(timeout=password_check_timeout)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        devices_repo=devices_repo,
        token_service=token_service,
        password_hasher=password_hasher,
        session_authenticator=SessionAuthenticator(token_service, users_repo),
        auth_service=AuthService(users_repo, password_hasher, token_service),
        user_service=UserService(users_repo, password_hasher),
        attendance_service=AttendanceService(attendance_repo),
        device_service=DeviceService(devices_repo),
        report_service=ReportService(attendance_repo, users_repo, late_cutoff_hour=late_cutoff_hour),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    password_check_timeout: float = DEFAULT_PASSWORD_CHECK_TIMEOUT,
    connect_timeout: int = 5,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connect_timeout=int(connect_timeout),
    )
    conn = DatabaseConnection(config)

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        devices_repo=MySQLDeviceRepository(conn),
        jwt_secret=jwt_secret,
        jwt_algorithm=jwt_algorithm,
        token_ttl_hours=token_ttl_hours,
        password_check_timeout=password_check_timeout,
    )
