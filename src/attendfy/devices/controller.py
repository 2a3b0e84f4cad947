from __future__ import annotations

from flask import Blueprint, Flask, jsonify

from ..auth.guards import Guards, current_user
from ..common.http import json_body
from ..common.validators import FieldValidator
from ..core.permissions import ADMIN_OR_HIGHER
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("devices", __name__, url_prefix="/api/devices")
    guards = Guards(container.session_authenticator)
    svc = container.device_service

    @bp.route("/", methods=["GET"], endpoint="list", strict_slashes=False)
    @guards.auth_required
    def list_devices():
        return jsonify([d.to_dict() for d in svc.list_active()])

    @bp.route("/", methods=["POST"], endpoint="create", strict_slashes=False)
    @guards.roles_required(ADMIN_OR_HIGHER)
    def create_device():
        v = FieldValidator(json_body())
        device_id = v.string("deviceId")
        name = v.string("name")
        location = v.string("location")
        v.raise_if_errors()

        device = svc.register_device(current_user(), device_id=device_id, name=name, location=location)
        return jsonify(device.to_dict()), 201

    @bp.route("/<int:device_pk>", methods=["PATCH"], endpoint="update")
    @guards.roles_required(ADMIN_OR_HIGHER)
    def update_device(device_pk: int):
        v = FieldValidator(json_body())
        is_active = v.boolean("isActive")
        v.raise_if_errors()

        device = svc.set_active(current_user(), device_pk, is_active=is_active)
        return jsonify(device.to_dict())

    app.register_blueprint(bp)
