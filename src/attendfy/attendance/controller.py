from __future__ import annotations

from flask import Blueprint, Flask, jsonify, request

from ..auth.guards import Guards, current_user
from ..common.http import json_body
from ..common.validators import FieldValidator, parse_query_date, parse_query_int
from ..core.enums import AttendanceStatus, WorkShift
from ..core.permissions import HR_OR_HIGHER
from ..container import Container
from .service import RecordChanges


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")
    guards = Guards(container.session_authenticator)
    svc = container.attendance_service

    @bp.route("/check-in", methods=["POST"], endpoint="check_in")
    @guards.auth_required
    def check_in():
        v = FieldValidator(json_body())
        coordinates = v.coordinates("coordinates")
        shift = v.choice("shift", WorkShift)
        v.raise_if_errors()

        record = svc.check_in(current_user(), coordinates=coordinates, shift=shift)
        return jsonify(record.to_dict())

    @bp.route("/check-out", methods=["POST"], endpoint="check_out")
    @guards.auth_required
    def check_out():
        v = FieldValidator(json_body())
        coordinates = v.coordinates("coordinates")
        v.raise_if_errors()

        record = svc.check_out(current_user(), coordinates=coordinates)
        return jsonify(record.to_dict())

    @bp.route("/", methods=["GET"], endpoint="list", strict_slashes=False)
    @guards.auth_required
    def list_records():
        args = request.args
        rows = svc.list_records(
            current_user(),
            start_date=parse_query_date(args, "startDate"),
            end_date=parse_query_date(args, "endDate"),
            user_id=parse_query_int(args, "userId"),
        )
        return jsonify([r.to_dict() for r in rows])

    @bp.route("/<int:attendance_id>", methods=["PUT"], endpoint="update")
    @guards.roles_required(HR_OR_HIGHER)
    def update_record(attendance_id: int):
        v = FieldValidator(json_body())
        changes = RecordChanges(
            work_date=v.iso_date("date"),
            shift=v.choice("shift", WorkShift),
            status=v.choice("status", AttendanceStatus),
            notes=v.string("notes", optional=True, min_len=0),
            notes_given=v.has("notes"),
        )
        v.raise_if_errors()

        record = svc.edit_record(current_user(), attendance_id, changes)
        return jsonify(record.to_dict())

    @bp.route("/summary", methods=["GET"], endpoint="summary")
    @guards.auth_required
    def summary():
        args = request.args
        result = container.report_service.summary(
            current_user(),
            start_date=parse_query_date(args, "startDate"),
            end_date=parse_query_date(args, "endDate"),
            department=args.get("department") or None,
        )
        return jsonify(result)

    app.register_blueprint(bp)
