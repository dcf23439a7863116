import io

import pytest


@pytest.fixture
def center(client, user_headers):
    resp = client.post("/api/v1/centers", json={
        "name": "St. Mary's Clinic", "area": "Central", "state": "Kano",
        "lga": "Nassarawa", "latitude": 12.0, "longitude": 8.5,
    }, headers=user_headers)
    assert resp.status_code == 201
    return resp.get_json()


def test_health(client):
    assert client.get("/api/v1/health").get_json() == {"status": "ok"}


def test_writes_require_user_header(client):
    resp = client.post("/api/v1/centers", json={"name": "X"})
    assert resp.status_code == 400
    assert "X-User-Id" in resp.get_json()["error"]


def test_center_crud(client, user_headers, center):
    cid = center["id"]
    assert client.get(f"/api/v1/centers/{cid}").get_json()["name"] == "St. Mary's Clinic"
    assert client.get("/api/v1/centers").get_json()["total"] == 1
    assert client.get("/api/v1/centers/states").get_json() == ["Kano"]
    assert client.get("/api/v1/centers/map").get_json()[0]["id"] == cid

    resp = client.put(f"/api/v1/centers/{cid}", json={"contact_phone": "0803"}, headers=user_headers)
    assert resp.get_json()["contact_phone"] == "0803"

    resp = client.post(f"/api/v1/centers/{cid}/treatment",
                       json={"is_treatment_area": True}, headers=user_headers)
    assert resp.get_json()["is_treatment_area"] is True

    assert client.delete(f"/api/v1/centers/{cid}", headers=user_headers).status_code == 200
    assert client.get(f"/api/v1/centers/{cid}").status_code == 404


def test_invalid_center_lists_messages(client, user_headers):
    resp = client.post("/api/v1/centers", json={"name": "Only a name"}, headers=user_headers)
    assert resp.status_code == 400
    assert "area is required" in resp.get_json()["messages"]


def test_import_multipart_upload(client, user_headers, center, make_csv):
    raw = make_csv("st marys clinic,March,2024,100,80,15,5")
    resp = client.post(
        "/api/v1/import",
        data={"file": (io.BytesIO(raw), "march.csv")},
        headers=user_headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["persisted"] == {"success": True, "saved_count": 1, "errors": []}

    reports = client.get(f"/api/v1/reports?center_id={center['id']}").get_json()
    assert reports["total"] == 1
    assert reports["reports"][0]["total_doses"] == 20
    assert reports["reports"][0]["created_by"] == "user-42"


def test_import_raw_body_dry_run(client, user_headers, center, make_csv):
    raw = make_csv("St. Mary's Clinic,3,2024,100,80,15,5")
    resp = client.post("/api/v1/import?dry_run=1", data=raw, headers=user_headers,
                       content_type="text/csv")
    assert resp.status_code == 200
    assert resp.get_json()["persisted"] is None
    assert client.get("/api/v1/reports").get_json()["total"] == 0


def test_import_with_unmatched_center_is_blocked(client, user_headers, center, make_csv):
    raw = make_csv(
        "St. Mary's Clinic,5,2024,10,5,3,2",
        "Unknown Clinic,5,2024,10,5,3,2",
    )
    resp = client.post("/api/v1/import", data=raw, headers=user_headers, content_type="text/csv")
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["unmatched_centers"] == ["Unknown Clinic"]
    assert body["errors"] == [{"row": 2, "message": 'PHC not found: "Unknown Clinic"'}]
    assert body["persisted"] is None


def test_import_unreadable_file(client, user_headers, make_csv):
    raw = make_csv("A,1,2024", header="PHC Name,Month,Year")
    resp = client.post("/api/v1/import", data=raw, headers=user_headers, content_type="text/csv")
    assert resp.status_code == 400
    assert resp.get_json()["error"].startswith("Missing required columns")


def test_report_form_and_bulk_entry(client, user_headers, center):
    cid = center["id"]
    resp = client.post("/api/v1/reports", json={
        "center_id": cid, "report_month": "2024-06", "fixed_doses": 4, "outreach_doses": 6,
    }, headers=user_headers)
    assert resp.status_code == 201
    assert resp.get_json()["total_doses"] == 10

    resp = client.post("/api/v1/reports/bulk", json={
        "report_month": "2024-07",
        "entries": [{"center_id": cid, "fixed_doses": 1}, {"center_id": "ghost"}],
    }, headers=user_headers)
    assert resp.status_code == 422
    assert resp.get_json()["unmatched_centers"] == ["ghost"]

    resp = client.post("/api/v1/reports/bulk", json={
        "report_month": "2024-07", "entries": [{"center_id": cid, "fixed_doses": 1}],
    }, headers=user_headers)
    assert resp.status_code == 200
    assert resp.get_json()["persisted"]["saved_count"] == 1

    assert client.get("/api/v1/reports/latest").get_json() == {cid: "2024-07-01"}


def test_dashboard_endpoints(client, user_headers, center):
    client.post("/api/v1/reports", json={
        "center_id": center["id"], "report_month": "2024-06", "fixed_doses": 4,
    }, headers=user_headers)

    summary = client.get("/api/v1/dashboard/summary?month=2024-06").get_json()
    assert summary["total_vaccinations"] == 4
    assert summary["control_vaccinations"] == 4

    series = client.get("/api/v1/dashboard/monthly?months=2&end=2024-06").get_json()
    assert [p["total_doses"] for p in series] == [0, 4]

    assert client.get("/api/v1/dashboard/summary?month=June").status_code == 400


def test_failed_save_batch_is_not_a_success(client, user_headers, center, make_csv, monkeypatch):
    from db.store import SqlReportStore
    from import_engine.errors import StoreError

    def broken_upsert(self, records):
        raise StoreError("connection reset")

    monkeypatch.setattr(SqlReportStore, "upsert_reports", broken_upsert)

    raw = make_csv("St. Mary's Clinic,8,2024,10,5,3,2")
    resp = client.post("/api/v1/import", data=raw, headers=user_headers, content_type="text/csv")
    assert resp.status_code == 500
    persisted = resp.get_json()["persisted"]
    assert persisted["success"] is False
    assert persisted["saved_count"] == 0
    assert "batch 1" in persisted["errors"][0]

    resp = client.post("/api/v1/reports/bulk", json={
        "report_month": "2024-08", "entries": [{"center_id": center["id"]}],
    }, headers=user_headers)
    assert resp.status_code == 500
    assert resp.get_json()["persisted"]["success"] is False
