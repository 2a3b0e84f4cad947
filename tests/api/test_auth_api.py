from __future__ import annotations

from attendfy.core.enums import Role
from tests.fakes import PASSWORD


def test_login_success_sets_no_cache_headers(client, make_user):
    user = make_user(email="amy@example.com")

    resp = client.post("/api/auth/login", json={"email": "amy@example.com", "password": PASSWORD})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["id"] == user.user_id
    assert "password_hash" not in body["user"] and "password" not in body["user"]
    assert resp.headers["Cache-Control"] == "no-store"
    assert resp.headers["Pragma"] == "no-cache"


def test_login_failure_is_uniform(client, make_user):
    make_user(email="amy@example.com")

    unknown = client.post("/api/auth/login", json={"email": "who@example.com", "password": PASSWORD})
    wrong = client.post("/api/auth/login", json={"email": "amy@example.com", "password": "bad-password"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {"message": "Invalid credentials"}


def test_login_validation_errors(client):
    resp = client.post("/api/auth/login", json={"email": "not-an-email"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["message"] == "Validation failed"
    assert {e["field"] for e in body["errors"]} == {"email", "password"}


def test_login_is_rate_limited(client):
    for _ in range(5):
        assert client.post("/api/auth/login", json={"email": "x@example.com", "password": "nope"}).status_code == 401

    resp = client.post("/api/auth/login", json={"email": "x@example.com", "password": "nope"})

    assert resp.status_code == 429
    assert resp.get_json() == {"message": "Too many login attempts, please try again later"}


def test_me_requires_token(client, make_user, auth_header):
    user = make_user()

    assert client.get("/api/auth/me").get_json() == {"message": "No authentication token, access denied"}
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401

    resp = client.get("/api/auth/me", headers=auth_header(user))
    assert resp.status_code == 200
    assert resp.get_json()["email"] == user.email


def test_deactivated_account_token_is_rejected(client, make_user, auth_header):
    user = make_user(is_active=False)

    resp = client.get("/api/auth/me", headers=auth_header(user))

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "User account is deactivated"}


def test_register_employee_assigns_caller(client, make_user, auth_header):
    admin = make_user(Role.ADMIN)

    resp = client.post(
        "/api/auth/register-employee",
        headers=auth_header(admin),
        json={
            "email": "new@example.com",
            "password": "secret123",
            "firstName": "New",
            "lastName": "Hire",
            "department": "Ops",
            "employeeId": "E900",
            "deviceId": "GATE-1",
        },
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["token"]
    assert body["user"]["role"] == "employee"
    assert body["user"]["assignedAdmin"] == admin.user_id
    assert body["user"]["deviceId"] == "GATE-1"


def test_register_employee_forbidden_for_hr(client, make_user, auth_header):
    resp = client.post("/api/auth/register-employee", headers=auth_header(make_user(Role.HR_MANAGER)), json={})

    assert resp.status_code == 403
    assert "Admin or higher required" in resp.get_json()["message"]


def test_register_admin_requires_long_password(client, make_user, auth_header):
    root = make_user(Role.SUPER_ADMIN)
    payload = {
        "email": "boss@example.com",
        "password": "short7!",
        "firstName": "Big",
        "lastName": "Boss",
        "department": "Management",
    }

    short = client.post("/api/auth/register-admin", headers=auth_header(root), json=payload)
    assert short.status_code == 400
    assert short.get_json()["errors"] == [{"field": "password", "message": "password must be at least 8 characters"}]

    payload["password"] = "longenough"
    ok = client.post("/api/auth/register-admin", headers=auth_header(root), json=payload)
    assert ok.status_code == 201
    assert ok.get_json()["user"]["role"] == "admin"
    assert ok.get_json()["user"]["employeeId"].startswith("ADM")


def test_register_public_requires_assigned_admin(client, make_user):
    admin = make_user(Role.ADMIN)
    payload = {
        "email": "self@example.com",
        "password": "secret123",
        "firstName": "Self",
        "lastName": "Starter",
        "department": "Ops",
        "employeeId": "E777",
    }

    missing = client.post("/api/auth/register-public", json=payload)
    assert missing.status_code == 400
    assert missing.get_json()["errors"][0]["field"] == "assignedAdmin"

    payload["assignedAdmin"] = admin.user_id
    ok = client.post("/api/auth/register-public", json=payload)
    assert ok.status_code == 201
    assert ok.get_json()["user"]["assignedAdmin"] == admin.user_id


def test_register_with_explicit_role(client, make_user, auth_header):
    admin = make_user(Role.ADMIN)

    resp = client.post(
        "/api/auth/register",
        headers=auth_header(admin),
        json={
            "email": "sup@example.com",
            "password": "secret123",
            "firstName": "Sue",
            "lastName": "Pervisor",
            "department": "Ops",
            "employeeId": "S1",
            "role": "supervisor",
        },
    )

    assert resp.status_code == 201
    assert resp.get_json()["user"]["role"] == "supervisor"


def test_unknown_route_renders_json(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert "message" in resp.get_json()
