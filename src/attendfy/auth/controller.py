from __future__ import annotations

from flask import Blueprint, Flask, jsonify
from flask_limiter import Limiter

from ..common.http import json_body
from ..common.validators import FieldValidator
from ..core.constants import DEFAULT_LOGIN_RATE_LIMIT, MIN_ADMIN_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.permissions import ADMIN_OR_HIGHER, SUPER_ADMIN_ONLY
from ..container import Container
from ..users.service import NewAccount
from .guards import Guards, current_user

LOGIN_LIMIT_MESSAGE = "Too many login attempts, please try again later"


def parse_new_account(
    data: dict,
    *,
    min_password: int = MIN_PASSWORD_LENGTH,
    employee_id_optional: bool = False,
) -> NewAccount:
    v = FieldValidator(data)
    email = v.email("email")
    password = v.password("password", min_len=min_password)
    first_name = v.string("firstName")
    last_name = v.string("lastName")
    department = v.string("department")
    employee_id = v.string("employeeId", optional=employee_id_optional)
    assigned_admin_id = v.integer("assignedAdmin")
    device_id = v.string("deviceId", optional=True)
    v.raise_if_errors()

    return NewAccount(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        department=department,
        employee_id=employee_id,
        assigned_admin_id=assigned_admin_id,
        device_id=device_id,
    )


def register(app: Flask, container: Container, limiter: Limiter) -> None:
    bp = Blueprint("auth", __name__, url_prefix="/api/auth")
    guards = Guards(container.session_authenticator)
    login_limit = app.config.get("LOGIN_RATE_LIMIT") or DEFAULT_LOGIN_RATE_LIMIT

    def _created(user):
        token = container.auth_service.issue_token(user)
        return jsonify({"token": token, "user": user.to_public_dict()}), 201

    @bp.route("/login", methods=["POST"], endpoint="login")
    @limiter.limit(login_limit, error_message=LOGIN_LIMIT_MESSAGE)
    def login():
        v = FieldValidator(json_body())
        email = v.email("email")
        password = v.password("password", min_len=1)
        v.raise_if_errors()

        result = container.auth_service.login(email, password)

        response = jsonify({"success": True, "token": result.token, "user": result.user.to_public_dict()})
        response.headers["Cache-Control"] = "no-store"
        response.headers["Pragma"] = "no-cache"
        return response

    @bp.route("/register", methods=["POST"], endpoint="register")
    @guards.roles_required(ADMIN_OR_HIGHER)
    def register_user():
        data = json_body()
        v = FieldValidator(data)
        role = v.choice("role", Role) or Role.EMPLOYEE
        v.raise_if_errors()

        account = parse_new_account(data)
        user = container.user_service.register_with_role(current_user(), account, role)
        return _created(user)

    @bp.route("/register-admin", methods=["POST"], endpoint="register_admin")
    @guards.roles_required(SUPER_ADMIN_ONLY)
    def register_admin():
        account = parse_new_account(json_body(), min_password=MIN_ADMIN_PASSWORD_LENGTH, employee_id_optional=True)
        user = container.user_service.register_admin(current_user(), account)
        return _created(user)

    @bp.route("/register-employee", methods=["POST"], endpoint="register_employee")
    @guards.roles_required(ADMIN_OR_HIGHER)
    def register_employee():
        account = parse_new_account(json_body())
        user = container.user_service.register_employee(current_user(), account)
        return _created(user)

    @bp.route("/register-public", methods=["POST"], endpoint="register_public")
    def register_public():
        data = json_body()
        account = parse_new_account(data)
        if account.assigned_admin_id is None:
            v = FieldValidator(data)
            v.integer("assignedAdmin", optional=False)
            v.raise_if_errors()
        user = container.user_service.register_public(account)
        return _created(user)

    @bp.route("/me", methods=["GET"], endpoint="me")
    @guards.auth_required
    def me():
        return jsonify(current_user().to_public_dict())

    app.register_blueprint(bp)
