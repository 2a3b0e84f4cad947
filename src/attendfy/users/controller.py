from __future__ import annotations

from flask import Blueprint, Flask, jsonify, request

from ..auth.guards import Guards, current_user
from ..common.http import json_body
from ..common.validators import FieldValidator, parse_query_bool, parse_query_int
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.permissions import ADMIN_OR_HIGHER
from ..container import Container


def _parse_changes(data: dict) -> dict:
    """Map an update body onto User field names. Password is never taken here."""
    v = FieldValidator(data)
    changes: dict = {}

    if v.has("email"):
        changes["email"] = v.email("email")
    for body_key, field in (
        ("firstName", "first_name"),
        ("lastName", "last_name"),
        ("department", "department"),
        ("employeeId", "employee_id"),
    ):
        if v.has(body_key):
            changes[field] = v.string(body_key)
    if v.has("role"):
        changes["role"] = v.choice("role", Role, optional=False)
    if v.has("isActive"):
        changes["is_active"] = v.boolean("isActive")
    if v.has("assignedAdmin"):
        changes["assigned_admin_id"] = v.integer("assignedAdmin")
    if v.has("deviceId"):
        changes["device_id"] = v.string("deviceId", optional=True)

    v.raise_if_errors()
    return changes


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("users", __name__, url_prefix="/api/users")
    guards = Guards(container.session_authenticator)
    svc = container.user_service

    @bp.route("/", methods=["GET"], endpoint="list", strict_slashes=False)
    @guards.roles_required(ADMIN_OR_HIGHER)
    def list_users():
        args = request.args
        role = None
        if args.get("role"):
            try:
                role = Role(args["role"])
            except ValueError:
                raise ValidationError(
                    "Validation failed",
                    errors=[{"field": "role", "message": "role must be one of: " + ", ".join(r.value for r in Role)}],
                )
        assigned_admin = parse_query_int(args, "assignedAdmin")

        users = svc.list_users(
            current_user(),
            department=args.get("department") or None,
            role=role,
            is_active=parse_query_bool(args, "isActive"),
            assigned_admin_id=assigned_admin,
        )
        return jsonify([u.to_public_dict() for u in users])

    @bp.route("/stats/overview", methods=["GET"], endpoint="stats_overview")
    @guards.roles_required(ADMIN_OR_HIGHER)
    def stats_overview():
        return jsonify(svc.stats_overview(current_user()))

    @bp.route("/<int:user_id>", methods=["GET"], endpoint="get")
    @guards.self_or_admin("user_id")
    def get_user(user_id: int):
        return jsonify(svc.get_user(current_user(), user_id).to_public_dict())

    @bp.route("/<int:user_id>", methods=["PUT"], endpoint="update")
    @guards.self_or_admin("user_id")
    def update_user(user_id: int):
        changes = _parse_changes(json_body())
        user = svc.update_user(current_user(), user_id, changes)
        return jsonify(user.to_public_dict())

    @bp.route("/<int:user_id>", methods=["DELETE"], endpoint="delete")
    @guards.roles_required(ADMIN_OR_HIGHER)
    def delete_user(user_id: int):
        svc.delete_user(current_user(), user_id)
        return jsonify({"message": "User deleted successfully"})

    @bp.route("/<int:user_id>/deactivate", methods=["PUT"], endpoint="deactivate")
    @guards.self_or_admin("user_id")
    def deactivate_user(user_id: int):
        svc.deactivate_user(current_user(), user_id)
        return jsonify({"message": "User deactivated successfully"})

    @bp.route("/<int:user_id>/change-password", methods=["PUT"], endpoint="change_password")
    @guards.self_or_admin("user_id")
    def change_password(user_id: int):
        v = FieldValidator(json_body())
        current = v.password("currentPassword", min_len=1)
        new = v.password("newPassword", min_len=MIN_PASSWORD_LENGTH)
        v.raise_if_errors()

        svc.change_password(current_user(), user_id, current_password=current, new_password=new)
        return jsonify({"message": "Password updated successfully"})

    app.register_blueprint(bp)
