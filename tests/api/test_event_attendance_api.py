import io

import pytest

ADMIN_PASSWORD = "test-admin"


def _create_coordinator(client, username="meera", registration_no="C1", **extra):
    payload = {
        "adminPassword": ADMIN_PASSWORD,
        "name": username.title(),
        "username": username,
        "password": "pw",
        "registrationNo": registration_no,
    }
    payload.update(extra)
    return client.post("/api/event-attendance/coordinators", json=payload)


def _login(client, username="meera", password="pw"):
    return client.post("/api/event-attendance/auth", json={"username": username, "password": password})


def _upload(client, data, **form):
    form["file"] = (io.BytesIO(data), "volunteers.xlsx")
    return client.post("/api/event-attendance/volunteers/bulk", data=form, content_type="multipart/form-data")


@pytest.fixture
def coordinator(client):
    res = _create_coordinator(client)
    assert res.status_code == 200, res.get_json()
    assert _login(client).status_code == 200
    return res.get_json()["coordinator"]


def test_create_coordinator(client):
    res = _create_coordinator(client)
    body = res.get_json()

    assert body["success"] is True
    assert set(body["coordinator"]) == {"id", "name", "username", "registrationNo"}

    assert _create_coordinator(client, adminPassword="wrong", username="x", registration_no="C9").status_code == 401
    res = _create_coordinator(client, registration_no="C2")
    assert res.status_code == 400
    assert res.get_json()["error"] == "Username already exists"
    res = _create_coordinator(client, username="other")
    assert res.get_json()["error"] == "Registration number already exists"


def test_login_and_logout(client):
    _create_coordinator(client)

    assert _login(client, password="bad").status_code == 401
    assert client.post("/api/event-attendance/auth", json={"username": "meera"}).status_code == 400

    res = _login(client)
    assert res.get_json()["coordinator"]["username"] == "meera"
    assert client.get("/api/event-attendance/volunteers").status_code == 200

    client.post("/api/event-attendance/logout")
    assert client.get("/api/event-attendance/volunteers").status_code == 401


def test_endpoints_require_coordinator(client):
    for method, url in [
        ("get", "/api/event-attendance/volunteers"),
        ("post", "/api/event-attendance/volunteers/bulk"),
        ("get", "/api/event-attendance/sessions"),
        ("post", "/api/event-attendance/sessions"),
        ("get", "/api/event-attendance/sessions/1"),
        ("patch", "/api/event-attendance/sessions/1"),
    ]:
        assert getattr(client, method)(url).status_code == 401


def test_coordinator_id_must_match_session(client, coordinator):
    other = coordinator["id"] + 1

    assert client.get(f"/api/event-attendance/volunteers?coordinatorId={other}").status_code == 403
    assert client.get(f"/api/event-attendance/volunteers?coordinatorId={coordinator['id']}").status_code == 200
    assert client.get("/api/event-attendance/sessions?coordinatorId=abc").status_code == 400


def test_volunteer_upload_copies_uid_and_blocks_other_coordinators(client, make_xlsx):
    client.post("/api/attendance/auth", json={"password": ADMIN_PASSWORD})
    person = client.post("/api/attendance/people", json={"name": "Asha", "registration_no": "R1"}).get_json()["person"]

    _create_coordinator(client)
    _create_coordinator(client, username="ravi", registration_no="C2")
    rows = [
        {"Name": "Asha", "Registration Number": "R1", "Contact Number": "111"},
        {"Name": "Ben", "Registration Number": "R2", "Contact Number": "222"},
    ]

    _login(client)
    res = _upload(client, make_xlsx({"Sheet1": rows}))
    body = res.get_json()
    assert res.status_code == 200
    assert [(v["name"], v["uid"]) for v in body["added"]] == [("Asha", person["uid"]), ("Ben", None)]

    res = _upload(client, make_xlsx({"Sheet1": rows}))
    assert res.get_json()["skipped"] == 2

    _login(client, username="ravi")
    body = _upload(client, make_xlsx({"Sheet1": rows[1:]})).get_json()
    assert body["added"] == []
    assert body["errors"][0]["reason"].startswith('Volunteer "Ben" (R2) already exists for coordinator "Meera".')

    listed = client.get("/api/event-attendance/volunteers").get_json()["volunteers"]
    assert listed == []


def test_sessions_flow(client, coordinator, make_xlsx):
    _upload(
        client,
        make_xlsx(
            {
                "Sheet1": [
                    {"name": "Asha", "registration_no": "R1", "contact_no": "111"},
                    {"name": "Ben", "registration_no": "R2", "contact_no": "222"},
                ]
            }
        ),
    )
    volunteers = client.get("/api/event-attendance/volunteers").get_json()["volunteers"]
    ids = {v["name"]: v["id"] for v in volunteers}

    res = client.post("/api/event-attendance/sessions", json={})
    assert res.status_code == 200
    session = res.get_json()["session"]
    assert session["coordinatorId"] == coordinator["id"]
    assert [r["isPresent"] for r in session["attendanceRecords"]] == [False, False]
    assert session["sessionDateTime"].endswith("+05:30")

    res = client.patch(f"/api/event-attendance/sessions/{session['id']}", json={"volunteerIds": [ids["Ben"]]})
    records = {r["volunteer"]["name"]: r for r in res.get_json()["session"]["attendanceRecords"]}
    assert records["Ben"]["isPresent"] is True
    assert records["Ben"]["markedAt"] is not None
    assert records["Asha"]["isPresent"] is False
    assert records["Asha"]["markedAt"] is None

    bad = client.patch(f"/api/event-attendance/sessions/{session['id']}", json={"volunteerIds": "all"})
    assert bad.status_code == 400

    detail = client.get(f"/api/event-attendance/sessions/{session['id']}").get_json()["session"]
    assert detail["coordinator"]["username"] == "meera"

    client.post("/api/event-attendance/sessions", json={})
    listed = client.get("/api/event-attendance/sessions").get_json()
    assert listed["success"] is True
    assert len(listed["sessions"]) == 2
    assert listed["sessions"][0]["id"] > listed["sessions"][1]["id"]

    assert client.get("/api/event-attendance/sessions/999").status_code == 404


def test_session_of_other_coordinator_is_hidden(client, coordinator):
    session_id = client.post("/api/event-attendance/sessions", json={}).get_json()["session"]["id"]

    _create_coordinator(client, username="ravi", registration_no="C2")
    _login(client, username="ravi")

    assert client.get(f"/api/event-attendance/sessions/{session_id}").status_code == 404
    res = client.patch(f"/api/event-attendance/sessions/{session_id}", json={"volunteerIds": []})
    assert res.status_code == 404


def test_event_pages(client, coordinator):
    assert client.get("/event-attendance").status_code == 302
    res = client.get("/event-attendance/dashboard")
    assert res.status_code == 200
    assert b"Meera" in res.data

    client.post("/api/event-attendance/logout")
    assert client.get("/event-attendance").status_code == 200
    assert client.get("/event-attendance/dashboard").status_code == 302
