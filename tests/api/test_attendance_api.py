from __future__ import annotations

from datetime import date, datetime

from attendfy.core.enums import AttendanceStatus, Role


def test_checkin_then_checkout_flow(client, make_user, auth_header):
    user = make_user()
    headers = auth_header(user)

    first = client.post("/api/attendance/check-in", headers=headers, json={"coordinates": [3.5, 4.25], "shift": "evening"})
    again = client.post("/api/attendance/check-in", headers=headers, json={})
    out = client.post("/api/attendance/check-out", headers=headers)
    out_again = client.post("/api/attendance/check-out", headers=headers)

    assert first.status_code == 200
    body = first.get_json()
    assert body["status"] == "present"
    assert body["shift"] == "evening"
    assert body["checkIn"]["location"] == {"type": "Point", "coordinates": [3.5, 4.25]}
    assert body["checkOut"] is None

    assert again.status_code == 400
    assert again.get_json() == {"message": "Already checked in today"}
    assert out.status_code == 200
    assert out.get_json()["checkOut"]["location"]["coordinates"] == [0.0, 0.0]
    assert out_again.get_json() == {"message": "Already checked out today"}


def test_checkout_without_checkin(client, make_user, auth_header):
    resp = client.post("/api/attendance/check-out", headers=auth_header(make_user()))

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "No check-in found for today"}


def test_checkin_validates_body(client, make_user, auth_header):
    resp = client.post(
        "/api/attendance/check-in",
        headers=auth_header(make_user()),
        json={"coordinates": ["a", 1], "shift": "graveyard"},
    )

    assert resp.status_code == 400
    assert {e["field"] for e in resp.get_json()["errors"]} == {"coordinates", "shift"}


def test_checkin_requires_auth(client):
    assert client.post("/api/attendance/check-in").status_code == 401


def test_list_is_scoped_for_employees(client, attendance_repo, make_user, auth_header):
    me = make_user(first_name="Me")
    other = make_user()
    hr = make_user(Role.HR_MANAGER)
    attendance_repo.add(user_id=me.user_id, work_date=date(2024, 3, 4), status=AttendanceStatus.PRESENT,
                        check_in_time=datetime(2024, 3, 4, 8, 0))
    attendance_repo.add(user_id=other.user_id, work_date=date(2024, 3, 4), status=AttendanceStatus.PRESENT,
                        check_in_time=datetime(2024, 3, 4, 8, 0))

    mine = client.get(f"/api/attendance?userId={other.user_id}", headers=auth_header(me)).get_json()
    everyone = client.get("/api/attendance", headers=auth_header(hr)).get_json()
    ranged = client.get("/api/attendance?startDate=2024-03-05", headers=auth_header(hr)).get_json()

    assert [r["user"]["id"] for r in mine] == [me.user_id]
    assert mine[0]["user"]["firstName"] == "Me"
    assert len(everyone) == 2
    assert ranged == []


def test_list_rejects_bad_date(client, make_user, auth_header):
    resp = client.get("/api/attendance?startDate=yesterday", headers=auth_header(make_user()))

    assert resp.status_code == 400


def test_list_rejects_malformed_user_id(client, make_user, auth_header):
    resp = client.get("/api/attendance?userId=7x", headers=auth_header(make_user(Role.HR_MANAGER)))

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [{"field": "userId", "message": "userId must be an integer id"}]


def test_hr_edit_record(client, attendance_repo, make_user, auth_header):
    employee = make_user()
    hr = make_user(Role.HR_MANAGER, first_name="Helen", last_name="R")
    rec = attendance_repo.add(user_id=employee.user_id, work_date=date(2024, 3, 4), status=AttendanceStatus.ABSENT)

    resp = client.put(
        f"/api/attendance/{rec.attendance_id}",
        headers=auth_header(hr),
        json={"status": "leave", "shift": "night", "notes": "Approved leave", "date": "2024-03-05T00:00:00.000Z"},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "leave"
    assert body["shift"] == "night"
    assert body["date"] == "2024-03-05"
    assert body["notes"] == "Approved leave"
    assert body["approvedBy"] == hr.user_id

    listed = client.get("/api/attendance", headers=auth_header(hr)).get_json()
    assert listed[0]["approvedBy"] == {"id": hr.user_id, "firstName": "Helen", "lastName": "R"}


def test_edit_validation_and_access(client, attendance_repo, make_user, auth_header):
    employee = make_user()
    rec = attendance_repo.add(user_id=employee.user_id, work_date=date(2024, 3, 4))
    hr = make_user(Role.HR_MANAGER)

    forbidden = client.put(f"/api/attendance/{rec.attendance_id}", headers=auth_header(employee), json={})
    invalid = client.put(f"/api/attendance/{rec.attendance_id}", headers=auth_header(hr), json={"status": "sleeping"})
    missing = client.put("/api/attendance/999", headers=auth_header(hr), json={})

    assert forbidden.status_code == 403
    assert invalid.status_code == 400
    assert missing.status_code == 404
    assert missing.get_json() == {"message": "Attendance record not found"}


def test_summary_endpoint(client, attendance_repo, make_user, auth_header):
    admin = make_user(Role.ADMIN)
    employee = make_user(department="Ops")
    attendance_repo.add(user_id=employee.user_id, work_date=date(2024, 3, 4), status=AttendanceStatus.PRESENT)

    resp = client.get("/api/attendance/summary?department=Ops&startDate=2024-03-01", headers=auth_header(admin))

    assert resp.get_json() == [{"status": "present", "count": 1, "users": [employee.user_id]}]
