"""End-to-end tests for the HTTP API."""

import csv
import io

API = "/api/v1"


def _create_farm(client, name="North Field"):
    response = client.post(f"{API}/farms", json={"name": name, "location": "Hill", "total_area": 12, "unit": "acres"})
    assert response.status_code == 201
    return response.json()


def _create_crop(client, farm_id, **overrides):
    body = {"farm_id": farm_id, "crop_name": "Corn", "variety": "Sweet", "planting_date": "2024-04-01"}
    body.update(overrides)
    response = client.post(f"{API}/crops", json=body)
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "FarmTrack API"
    assert client.get(f"{API}/health").json()["status"] == "healthy"


def test_farm_crud(client):
    farm = _create_farm(client)
    assert farm["id"] == 1
    assert client.get(f"{API}/farms").json()[0]["name"] == "North Field"

    updated = client.put(f"{API}/farms/1", json={"name": "South Field", "unit": "hectares"}).json()
    assert updated["name"] == "South Field"
    assert updated["unit"] == "hectares"

    assert client.delete(f"{API}/farms/1").status_code == 204
    assert client.get(f"{API}/farms/1").status_code == 404


def test_farm_validation(client):
    assert client.post(f"{API}/farms", json={"name": "", "total_area": 1}).status_code == 422
    assert client.post(f"{API}/farms", json={"name": "X", "total_area": -1}).status_code == 422
    assert client.post(f"{API}/farms", json={"name": "X", "unit": "furlongs"}).status_code == 422


def test_crop_views_include_farm_name_and_countdown(client):
    farm = _create_farm(client)
    crop = _create_crop(client, farm["id"], expected_harvest_date="2020-01-01")
    assert crop["farm_name"] == "North Field"
    assert crop["days_to_harvest"] == "Past due"

    _create_crop(client, farm["id"], crop_name="Wheat", status="harvested")
    listed = client.get(f"{API}/crops", params={"status": "harvested"}).json()
    assert [c["crop_name"] for c in listed] == ["Wheat"]


def test_crop_requires_existing_farm(client):
    response = client.post(f"{API}/crops", json={"farm_id": 5, "crop_name": "Corn", "planting_date": "2024-04-01"})
    assert response.status_code == 404


def test_crop_shows_unknown_farm_after_farm_deleted(client):
    farm = _create_farm(client)
    crop = _create_crop(client, farm["id"])
    client.delete(f"{API}/farms/{farm['id']}")
    assert client.get(f"{API}/crops/{crop['id']}").json()["farm_name"] == "Unknown Farm"


def test_task_lifecycle_and_toggle(client):
    task = client.post(f"{API}/tasks", json={"title": "Irrigate", "due_date": "2024-06-15", "priority": "high"}).json()
    assert task["completed"] is False
    assert task["completed_at"] is None

    toggled = client.post(f"{API}/tasks/{task['id']}/toggle").json()
    assert toggled["completed"] is True
    assert toggled["completed_at"]

    reopened = client.patch(f"{API}/tasks/{task['id']}", json={"completed": False}).json()
    assert reopened["completed_at"] is None

    assert client.delete(f"{API}/tasks/{task['id']}").status_code == 204
    assert client.post(f"{API}/tasks/{task['id']}/toggle").status_code == 404


def test_task_patch_rejects_null_for_required_fields(client):
    task = client.post(f"{API}/tasks", json={"title": "Irrigate", "due_date": "2024-06-15"}).json()
    client.post(f"{API}/tasks/{task['id']}/toggle")

    for field in ("title", "priority", "due_date", "completed"):
        response = client.patch(f"{API}/tasks/{task['id']}", json={field: None})
        assert response.status_code == 422, field

    assert client.patch(f"{API}/tasks/{task['id']}", json={"title": ""}).status_code == 422

    current = client.get(f"{API}/tasks/{task['id']}").json()
    assert current["title"] == "Irrigate"
    assert current["completed"] is True

    cleared = client.patch(f"{API}/tasks/{task['id']}", json={"description": None, "farm_id": None}).json()
    assert cleared["description"] is None
    assert cleared["completed"] is True


def test_task_buckets_endpoint(client):
    for title, due in [("a", "2024-06-15"), ("b", "2024-06-10"), ("c", "2024-06-20")]:
        client.post(f"{API}/tasks", json={"title": title, "due_date": due})
    done = client.post(f"{API}/tasks", json={"title": "d", "due_date": "2024-06-10"}).json()
    client.post(f"{API}/tasks/{done['id']}/toggle")

    body = client.get(f"{API}/tasks/buckets", params={"on": "2024-06-15"}).json()
    assert body["reference_date"] == "2024-06-15"
    assert [t["title"] for t in body["today"]] == ["a"]
    assert [t["title"] for t in body["overdue"]] == ["b"]
    assert [t["title"] for t in body["upcoming"]] == ["c"]
    assert [t["title"] for t in body["completed"]] == ["d"]
    assert body["counts"] == {"today": 1, "overdue": 1, "upcoming": 1, "completed": 1, "invalid": 0}


def test_task_buckets_surface_malformed_stored_dates(client, db):
    from app.models import Task

    db.add(Task(title="legacy", due_date="15/06/2024", priority="low", completed=False))
    db.commit()
    body = client.get(f"{API}/tasks/buckets", params={"on": "2024-06-15"}).json()
    assert [t["title"] for t in body["invalid"]] == ["legacy"]


def test_income_total_is_recomputed(client):
    income = client.post(f"{API}/income", json={
        "date": "2024-06-01", "crop_id": 1, "quantity": 10, "price_per_unit": 5, "total_amount": 12345,
    }).json()
    assert income["total_amount"] == 50

    updated = client.put(f"{API}/income/{income['id']}", json={
        "date": "2024-06-01", "crop_id": 1, "quantity": 2, "price_per_unit": 5,
    }).json()
    assert updated["total_amount"] == 10


def test_expense_validation(client):
    response = client.post(f"{API}/expenses", json={"date": "2024-02-30", "category": "Fuel", "amount": 5})
    assert response.status_code == 422
    response = client.post(f"{API}/expenses", json={"date": "2024-02-01", "category": "Fuel", "amount": -5})
    assert response.status_code == 422


def test_financial_summary(client):
    farm = _create_farm(client)
    crop = _create_crop(client, farm["id"])
    client.post(f"{API}/expenses", json={"date": "2024-06-01", "category": "Seeds", "amount": 100, "farm_id": farm["id"]})
    client.post(f"{API}/expenses", json={"date": "2024-06-02", "category": "Fuel", "amount": 50})
    client.post(f"{API}/income", json={"date": "2024-06-03", "crop_id": crop["id"], "quantity": 10, "price_per_unit": 5})

    summary = client.get(f"{API}/financial/summary").json()
    assert summary["total_expenses"] == 150
    assert summary["total_income"] == 50
    assert summary["net_profit"] == -100
    assert [b["name"] for b in summary["by_farm"]] == ["North Field", "General"]
    assert summary["by_crop"][0]["name"] == "Corn - Sweet"
    assert summary["anomalies"]["count"] == 0


def test_financial_trend(client):
    client.post(f"{API}/expenses", json={"date": "2024-06-01", "category": "Seeds", "amount": 100})
    body = client.get(f"{API}/financial/trend", params={"on": "2024-06-15", "months": 2}).json()
    assert [p["month"] for p in body["points"]] == ["2024-05", "2024-06"]
    assert body["points"][1]["expenses"] == 100


def test_csv_export(client):
    farm = _create_farm(client)
    crop = _create_crop(client, farm["id"])
    client.post(f"{API}/expenses", json={
        "date": "2024-01-01", "category": "Seeds", "description": 'Corn "premium" seed', "amount": 200,
    })
    client.post(f"{API}/income", json={"date": "2024-02-01", "crop_id": crop["id"], "quantity": 4, "price_per_unit": 2.5})

    response = client.get(f"{API}/financial/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "farmtrack-finances-" in response.headers["content-disposition"]

    lines = response.text.split("\n")
    assert lines[0] == "Type,Date,Category,Description,Amount,Farm,Crop"
    assert lines[1] == '"Expense","2024-01-01","Seeds","Corn ""premium"" seed","200","",""'
    assert lines[2] == '"Income","2024-02-01","Harvest","4 units @ $2.5/unit","10","North Field","Corn"'
    assert len(list(csv.reader(io.StringIO(response.text)))) == 3


def test_empty_export_is_header_only(client):
    assert client.get(f"{API}/financial/export").text == "Type,Date,Category,Description,Amount,Farm,Crop"


def test_dashboard(client):
    _create_farm(client)
    client.post(f"{API}/tasks", json={"title": "today", "due_date": "2024-06-15"})
    client.post(f"{API}/tasks", json={"title": "late", "due_date": "2024-06-01"})
    client.post(f"{API}/expenses", json={"date": "2024-06-01", "category": "Fuel", "amount": 10})

    body = client.get(f"{API}/dashboard", params={"on": "2024-06-15"}).json()
    assert body["stats"]["farm_count"] == 1
    assert body["stats"]["tasks_due_today"] == 1
    assert body["stats"]["overdue_tasks"] == 1
    assert body["stats"]["profit_status"] == "Loss"
    assert [t["title"] for t in body["today_tasks"]] == ["today"]
