from datetime import timedelta

import pytest

from utils.dates import local_now


@pytest.fixture
def checkup(client, cow):
    response = client.post("/api/health", json={
        "cattleId": cow["id"],
        "recordType": "VACCINATION",
        "vaccinationType": "FMD",
        "description": "FMD booster",
        "scheduledDate": (local_now() + timedelta(days=2)).isoformat(),
        "veterinarian": "Dr. Michael Chen",
        "cost": 120,
    })
    assert response.status_code == 201, response.text
    return response.json()


def test_create_health_record(checkup, cow):
    assert checkup["status"] == "PENDING"
    assert checkup["cattle"]["tagNumber"] == cow["tagNumber"]
    assert checkup["daysUntilDue"] == 2


def test_create_requires_existing_cattle(client):
    response = client.post("/api/health", json={
        "cattleId": 77, "recordType": "CHECKUP", "description": "x", "scheduledDate": "2024-05-01T10:00:00",
    })
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid cattle ID"


def test_create_rejects_unknown_record_type(client, cow):
    response = client.post("/api/health", json={
        "cattleId": cow["id"], "recordType": "MASSAGE", "description": "x", "scheduledDate": "2024-05-01T10:00:00",
    })
    assert response.status_code == 400
    assert response.json()["error"] == "Valid record type is required"


def test_blank_vaccination_type_is_null(client, cow):
    response = client.post("/api/health", json={
        "cattleId": cow["id"], "recordType": "CHECKUP", "vaccinationType": "",
        "description": "Annual", "scheduledDate": "2024-05-01T10:00:00",
    })
    assert response.status_code == 201
    assert response.json()["vaccinationType"] is None


def test_complete_health_record(client, checkup):
    response = client.post("/api/health/complete", json={"id": checkup["id"], "notes": "No reaction"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "COMPLETED"
    assert body["completedDate"] is not None
    assert body["notes"] == "No reaction"


def test_complete_missing_record(client):
    response = client.post("/api/health/complete", json={"id": 999})
    assert response.status_code == 404
    assert response.json()["error"] == "Health record not found"


def test_filters_and_stats(client, cow, checkup):
    client.post("/api/health", json={
        "cattleId": cow["id"], "recordType": "DEWORMING", "description": "Quarterly",
        "scheduledDate": (local_now() - timedelta(days=5)).isoformat(), "status": "OVERDUE", "cost": 30,
    })

    assert len(client.get("/api/health").json()) == 2
    assert len(client.get("/api/health", params={"status": "OVERDUE"}).json()) == 1
    assert len(client.get("/api/health", params={"recordType": "VACCINATION", "status": "all"}).json()) == 1
    assert client.get("/api/health", params={"status": "LOST"}).status_code == 400

    stats = client.get("/api/health/stats").json()
    assert stats["total"] == 2
    assert stats["pending"] == 1
    assert stats["overdue"] == 1
    assert stats["dueThisWeek"] == 1
    assert stats["totalCost"] == 150


def test_update_and_delete(client, checkup, cow):
    payload = {
        "cattleId": cow["id"], "recordType": "VACCINATION", "vaccinationType": "ANTHRAX",
        "description": "Switched vaccine", "scheduledDate": checkup["scheduledDate"],
    }
    response = client.put(f"/api/health/{checkup['id']}", json=payload)
    assert response.status_code == 200
    assert response.json()["vaccinationType"] == "ANTHRAX"

    assert client.delete(f"/api/health/{checkup['id']}").json() == {"success": True}
    assert client.get(f"/api/health/{checkup['id']}").status_code == 404
