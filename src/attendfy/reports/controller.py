from __future__ import annotations

from flask import Blueprint, Flask, jsonify, request

from ..auth.guards import Guards, current_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")
    guards = Guards(container.session_authenticator)
    svc = container.report_service

    def _department():
        return request.args.get("department") or None

    @bp.route("/stats", methods=["GET"], endpoint="stats")
    @guards.auth_required
    def stats():
        return jsonify(svc.dashboard_stats(current_user(), department=_department()).to_dict())

    @bp.route("/weekly-attendance", methods=["GET"], endpoint="weekly_attendance")
    @guards.auth_required
    def weekly_attendance():
        return jsonify(svc.weekly_attendance(current_user(), department=_department()))

    @bp.route("/recent-activity", methods=["GET"], endpoint="recent_activity")
    @guards.auth_required
    def recent_activity():
        return jsonify(svc.recent_activity(current_user(), department=_department()))

    app.register_blueprint(bp)
