from __future__ import annotations

from datetime import datetime

from attendfy.core.enums import AttendanceStatus, Role


def test_stats_with_no_employees_is_not_nan(client, make_user, auth_header):
    resp = client.get("/api/dashboard/stats", headers=auth_header(make_user(Role.ADMIN)))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["totalEmployees"] == 0
    assert body["presentPercentage"] == body["latePercentage"] == body["absentPercentage"] == "0%"


def test_weekly_attendance_shape(client, make_user, auth_header):
    resp = client.get("/api/dashboard/weekly-attendance", headers=auth_header(make_user()))

    week = resp.get_json()
    assert len(week) == 7
    assert set(week[0]) == {"day", "date", "present", "late"}
    assert week[-1]["date"] == datetime.now().date().isoformat()


def test_recent_activity_for_employee_is_own(client, attendance_repo, make_user, auth_header):
    me = make_user(first_name="Ada", last_name="King")
    other = make_user(first_name="Bob", last_name="Ray")
    now = datetime.now()
    for u in (me, other):
        attendance_repo.add(user_id=u.user_id, work_date=now.date(), status=AttendanceStatus.PRESENT, check_in_time=now)

    resp = client.get("/api/dashboard/recent-activity", headers=auth_header(me))

    assert [a["avatar"] for a in resp.get_json()] == ["AK"]


def test_dashboard_requires_auth(client):
    assert client.get("/api/dashboard/stats").status_code == 401
