import io

from openpyxl import load_workbook
from sqlalchemy import event

from src.rollcall.rollcall.core.constants import XLSX_MIMETYPE
from src.rollcall.rollcall.database.extensions import db
from src.rollcall.rollcall.database.tables import AttendanceRow


def _add(client, name, reg, contact=None):
    res = client.post("/api/attendance/people", json={"name": name, "registration_no": reg, "contact_no": contact})
    assert res.status_code == 201, res.get_json()
    return res.get_json()["person"]


def test_api_requires_admin_session(client):
    for method, url in [
        ("get", "/api/attendance/people"),
        ("get", "/api/attendance/records?date=2025-09-01"),
        ("post", "/api/attendance/records/bulk"),
        ("get", "/api/attendance/summary"),
        ("get", "/api/attendance/export"),
    ]:
        res = getattr(client, method)(url)
        assert res.status_code == 401
        assert res.get_json() == {"error": "Authentication required"}


def test_auth_rejects_wrong_password_and_logout_clears(client):
    assert client.post("/api/attendance/auth", json={"password": "nope"}).status_code == 401
    assert client.post("/api/attendance/auth", data="x").status_code == 400

    assert client.post("/api/attendance/auth", json={"password": "test-admin"}).status_code == 200
    assert client.get("/api/attendance/people").status_code == 200

    client.post("/api/attendance/logout")
    assert client.get("/api/attendance/people").status_code == 401


def test_people_crud(admin_client):
    person = _add(admin_client, "Asha", "R1", "111")
    assert person["uid"] == f"UID-{person['id']}"

    dup = admin_client.post("/api/attendance/people", json={"name": "Other", "registration_no": "R1"})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "duplicate"
    assert dup.get_json()["existing"]["id"] == person["id"]

    res = admin_client.patch("/api/attendance/people", json={"id": person["id"], "name": "Asha K", "contact_no": ""})
    assert res.get_json()["person"]["contact_no"] is None

    assert admin_client.patch("/api/attendance/people", json={"id": 999, "name": "X"}).status_code == 404
    assert admin_client.delete("/api/attendance/people").status_code == 400
    assert admin_client.delete(f"/api/attendance/people?id={person['id']}").get_json() == {"success": True}
    assert admin_client.get("/api/attendance/people").get_json() == {"people": []}


def test_people_search_sort_and_cutoff(admin_client):
    a = _add(admin_client, "Zed", "R1")
    b = _add(admin_client, "Amy", "R2", "98765")
    admin_client.post("/api/attendance/records/bulk", json={"person_ids": [a["id"], b["id"]], "date": "2025-09-01"})
    admin_client.post("/api/attendance/records", json={"person_id": a["id"], "date": "2025-09-05"})

    people = admin_client.get("/api/attendance/people?sortBy=name").get_json()["people"]
    assert [p["name"] for p in people] == ["Amy", "Zed"]

    people = admin_client.get("/api/attendance/people?sortBy=attendance&sortOrder=desc").get_json()["people"]
    assert [(p["name"], p["attendance_count"]) for p in people] == [("Zed", 2), ("Amy", 1)]

    people = admin_client.get("/api/attendance/people?sortBy=attendance&cutoffDate=2025-09-02").get_json()["people"]
    assert {p["name"]: p["attendance_count"] for p in people} == {"Zed": 1, "Amy": 1}

    people = admin_client.get("/api/attendance/people?search=8765").get_json()["people"]
    assert [p["name"] for p in people] == ["Amy"]

    assert admin_client.get("/api/attendance/people?sortBy=height").status_code == 400


def test_records_mark_duplicate_future_and_unmark(admin_client):
    p = _add(admin_client, "Asha", "R1")

    res = admin_client.post("/api/attendance/records", json={"person_id": p["id"], "date": "2025-09-01"})
    assert res.status_code == 201
    attendance_id = res.get_json()["attendance"]["id"]

    res = admin_client.post("/api/attendance/records", json={"person_id": p["id"], "date": "2025-09-01"})
    assert res.status_code == 409
    assert res.get_json()["error"] == "Attendance already marked for this person on this date"

    res = admin_client.post("/api/attendance/records", json={"person_id": p["id"], "date": "2999-01-01"})
    assert res.status_code == 400

    res = admin_client.post("/api/attendance/records", json={"person_id": 999, "date": "2025-09-01"})
    assert res.status_code == 404

    rows = admin_client.get("/api/attendance/records?date=2025-09-01").get_json()["attendance"]
    assert [(r["attendance_id"], r["name"]) for r in rows] == [(attendance_id, "Asha")]
    assert admin_client.get("/api/attendance/records").status_code == 400

    assert admin_client.delete(f"/api/attendance/records?id={attendance_id}").get_json() == {"success": True}
    assert admin_client.get("/api/attendance/records?date=2025-09-01").get_json() == {"attendance": []}
    assert admin_client.get(f"/api/attendance/people/{p['id']}/dates").get_json() == {"dates": []}


def test_bulk_marking(admin_client):
    a = _add(admin_client, "Asha", "R1")
    b = _add(admin_client, "Ben", "R2")
    admin_client.post("/api/attendance/records", json={"person_id": b["id"], "date": "2025-09-01"})

    res = admin_client.post(
        "/api/attendance/records/bulk",
        json={"person_ids": [a["id"], a["id"], b["id"]], "date": "2025-09-01"},
    )
    body = res.get_json()

    assert res.status_code == 200
    assert [m["person_id"] for m in body["added"]] == [a["id"]]
    assert body["duplicates"] == [{"person_id": b["id"], "date": "2025-09-01"}]
    assert admin_client.get("/api/attendance/summary").get_json() == {"counts": {"2025-09-01": 2}}

    assert admin_client.post("/api/attendance/records/bulk", json={"person_ids": 5, "date": "2025-09-01"}).status_code == 400


def test_bulk_marking_rolls_back_on_failure(app, admin_client):
    a = _add(admin_client, "Asha", "R1")
    b = _add(admin_client, "Ben", "R2")

    def break_second_row(mapper, connection, target):
        if target.person_id == b["id"]:
            target.date = None

    event.listen(AttendanceRow, "before_insert", break_second_row)
    try:
        res = admin_client.post(
            "/api/attendance/records/bulk",
            json={"person_ids": [a["id"], b["id"]], "date": "2025-09-01"},
        )
    finally:
        event.remove(AttendanceRow, "before_insert", break_second_row)

    assert res.status_code == 500
    assert "error" in res.get_json()
    with app.app_context():
        assert db.session.query(AttendanceRow).count() == 0
    assert admin_client.get("/api/attendance/records?date=2025-09-01").get_json() == {"attendance": []}


def test_deleting_person_removes_attendance(admin_client):
    p = _add(admin_client, "Asha", "R1")
    admin_client.post("/api/attendance/records", json={"person_id": p["id"], "date": "2025-09-01"})

    admin_client.delete(f"/api/attendance/people?id={p['id']}")

    assert admin_client.get("/api/attendance/records?date=2025-09-01").get_json() == {"attendance": []}


def test_person_dates_newest_first(admin_client):
    p = _add(admin_client, "Asha", "R1")
    for d in ["2025-09-01", "2025-09-03", "2025-09-02"]:
        admin_client.post("/api/attendance/records", json={"person_id": p["id"], "date": d})

    res = admin_client.get(f"/api/attendance/people/{p['id']}/dates")
    assert res.get_json() == {"dates": ["2025-09-03", "2025-09-02", "2025-09-01"]}
    assert admin_client.get("/api/attendance/people/abc/dates").status_code == 400


def test_bulk_people_upload(admin_client, make_xlsx):
    _add(admin_client, "Asha", "R1", "111")
    data = make_xlsx(
        {
            "People": [
                {"Name": "Asha", "Registration No.": "R1", "Contact No.": "111"},
                {"Name": "Ben", "Registration No.": "R2", "Contact No.": "222"},
            ]
        }
    )

    res = admin_client.post(
        "/api/attendance/people/bulk",
        data={"file": (io.BytesIO(data), "people.xlsx"), "worksheet": "People"},
        content_type="multipart/form-data",
    )
    body = res.get_json()

    assert res.status_code == 200
    assert [p["name"] for p in body["added"]] == ["Ben"]
    assert body["added"][0]["uid"] == f"UID-{body['added'][0]['id']}"
    assert body["skipped"] == 1

    res = admin_client.post("/api/attendance/people/bulk", data={}, content_type="multipart/form-data")
    assert res.status_code == 400
    assert res.get_json() == {"error": "No file provided"}


def test_export(admin_client):
    a = _add(admin_client, "Zed", "R1")
    _add(admin_client, "Amy", "R2")
    admin_client.post("/api/attendance/records", json={"person_id": a["id"], "date": "2025-09-01"})
    admin_client.post("/api/attendance/records", json={"person_id": a["id"], "date": "2025-09-02"})

    res = admin_client.get("/api/attendance/export")

    assert res.status_code == 200
    assert res.mimetype == XLSX_MIMETYPE
    assert "attendance_report_" in res.headers["Content-Disposition"]
    sheet = load_workbook(io.BytesIO(res.data))["Attendance Report"]
    assert [(row[1], row[4]) for row in sheet.iter_rows(min_row=2, values_only=True)] == [("Amy", 0), ("Zed", 2)]


def test_pages(client, admin_client):
    assert client.get("/").status_code == 200
    res = admin_client.get("/attendance")
    assert res.status_code == 200
    assert b"month-picker" in res.data
    assert admin_client.get("/attendance/day/2025-09-01").status_code == 200
    assert admin_client.get("/attendance/day/2025-01-01").status_code == 404
    assert admin_client.get("/attendance/day/garbage").status_code == 404


def test_calendar_page_people_management(admin_client):
    page = admin_client.get("/attendance").data.decode()

    assert 'id="cutoff-date"' in page
    assert 'params.set("cutoffDate"' in page
    assert 'id="duplicate-rows"' in page
    assert 'method: "PATCH"' in page
    assert "/api/attendance/people/${p.id}/dates" in page
    assert 'accept=".xlsx,.xls,.csv"' in page
    assert 'accept=".xlsx,.xls,.csv"' in admin_client.get("/").data.decode()


def test_day_page_requires_login(client):
    res = client.get("/attendance/day/2025-09-01")
    assert res.status_code == 302
    assert b"password" in client.get("/attendance").data
