import pytest
from flask import Flask

from src.participation_tracker.participation_tracker.common import datetime_utils
from src.participation_tracker.participation_tracker.container import Container
from src.participation_tracker.participation_tracker.main import register_all


@pytest.fixture
def app(
    students_repo,
    class_years_repo,
    smallgroups_repo,
    student_service,
    class_year_service,
    smallgroup_service,
    attendance_service,
    fixed_now,
    monkeypatch,
):
    monkeypatch.setattr(datetime_utils, "now_local", lambda: fixed_now)

    app = Flask(__name__)
    app.secret_key = "test-secret"
    app.config["TESTING"] = True
    container = Container(
        conn=None,
        students_repo=students_repo,
        class_years_repo=class_years_repo,
        smallgroups_repo=smallgroups_repo,
        student_service=student_service,
        class_year_service=class_year_service,
        smallgroup_service=smallgroup_service,
        attendance_service=attendance_service,
    )
    register_all(app, container)
    return app


def _login(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


@pytest.fixture
def client(app):
    return app.test_client()


def test_requires_login(client):
    res = client.get("/api/users/me/attendance")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_user_reads_own_attendance(client):
    _login(client, 3, "user")

    res = client.get("/api/users/me/attendance")

    assert res.status_code == 200
    data = res.get_json()
    assert data["semester"] == "spring2024"
    assert data["totalDates"] == ["2024-01-10", "2024-01-17"]
    assert data["smallgroup"] == "Observatory"


def test_user_cannot_read_someone_else(client):
    _login(client, 3, "user")

    assert client.get("/api/users/4/attendance").status_code == 403
    assert client.get("/api/users/4/presence").status_code == 403


def test_mentor_sets_and_reads_presence(client):
    _login(client, 1, "mentor")

    res = client.put("/api/users/3/presence", json={"status": "present"})
    assert res.status_code == 200
    assert res.get_json()["presence"] == "present"

    res = client.get("/api/users/3/presence")
    assert res.get_json()["presence"] == "present"

    res = client.put("/api/users/3/presenceSmall", json={"status": "unverified"})
    assert res.get_json()["presenceSmall"] == "unverifiedSmall"


def test_user_cannot_set_presence(client):
    _login(client, 3, "user")

    assert client.put("/api/users/3/presence", json={"status": "present"}).status_code == 403


def test_invalid_status_is_bad_request(client):
    _login(client, 1, "mentor")

    assert client.put("/api/users/3/presence", json={"status": "late"}).status_code == 400
    assert client.put("/api/users/3/presence", json={}).status_code == 400


def test_unknown_student_is_not_found(client):
    _login(client, 1, "admin")

    assert client.get("/api/users/99/presence").status_code == 404


def test_submit_daycode(client):
    _login(client, 3, "user")

    res = client.post("/api/users/me/attend", json={"dayCode": "ABC12"})

    assert res.status_code == 200
    assert res.get_json()["presence"] == "unverified"
    assert client.post("/api/users/me/attend", json={"dayCode": "wrong"}).status_code == 400


def test_list_presence_for_mentors(client):
    _login(client, 1, "mentor")

    res = client.get("/api/users/presence?kind=bonus")

    assert res.status_code == 200
    assert {row["presence"] for row in res.get_json()["students"]} == {"absentBonus"}
    assert client.get("/api/users/presence?kind=weekly").status_code == 400


def test_classyear_daycode_hidden_from_users(client):
    _login(client, 3, "user")

    data = client.get("/api/classyear").get_json()

    assert data["semester"] == "spring2024"
    assert "daycodes" not in data


def test_admin_creates_class_year(client):
    _login(client, 1, "admin")

    res = client.post(
        "/api/classyear",
        json={"semester": "fall2024", "dates": ["2024-09-04"], "bonusDates": [], "current": True},
    )

    assert res.status_code == 201
    assert client.get("/api/classyear").get_json()["semester"] == "fall2024"
    assert client.post("/api/classyear", json={"semester": "x", "dates": ["04/09/2024"]}).status_code == 400


def test_smallgroup_membership_flow(client, students_repo):
    _login(client, 1, "mentor")

    res = client.post("/api/smallgroup", json={"name": "Rocketry"})
    assert res.status_code == 201
    smallgroup_id = res.get_json()["smallgroup_id"]

    assert client.put(f"/api/smallgroup/{smallgroup_id}/member", json={"memberId": 4}).status_code == 200
    assert students_repo.get_by_id(4).smallgroup_id == smallgroup_id

    members = client.get(f"/api/smallgroup/{smallgroup_id}/members").get_json()["members"]
    assert members == [{"student_id": 4, "name": "Grace"}]

    assert client.delete(f"/api/smallgroup/{smallgroup_id}/member/4").status_code == 200
    assert client.delete(f"/api/smallgroup/{smallgroup_id}/member/4").status_code == 400


def test_member_reads_own_group_members(client):
    _login(client, 3, "user")

    assert client.get("/api/smallgroup/7/members").status_code == 200
    _login(client, 4, "user")
    assert client.get("/api/smallgroup/7/members").status_code == 403


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nothing-here")

    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Not found"}
