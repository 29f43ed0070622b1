from datetime import timedelta

from utils.dates import local_now, local_today


def test_create_cattle(client, cattle_payload):
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 201
    body = response.json()
    assert body["tagNumber"] == "TAG-10001"
    assert body["status"] == "ACTIVE"
    assert body["motherId"] is None
    assert "createdAt" in body


def test_duplicate_tag_number_conflicts(client, cow, cattle_payload):
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 409
    assert response.json()["error"] == "A cattle with this tag number already exists"


def test_missing_required_field(client, cattle_payload):
    del cattle_payload["gender"]
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Gender is required"


def test_invalid_gender(client, cattle_payload):
    cattle_payload["gender"] = "UNKNOWN"
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Valid gender (MALE or FEMALE) is required"


def test_invalid_mother_reference(client, cattle_payload):
    cattle_payload["motherId"] = 12345
    response = client.post("/api/cattle", json=cattle_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid mother reference"


def test_get_missing_cattle(client):
    response = client.get("/api/cattle/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Cattle not found"}


def test_update_cattle(client, cow, cattle_payload):
    cattle_payload.update({"name": "Bella II", "status": "QUARANTINED"})
    response = client.put(f"/api/cattle/{cow['id']}", json=cattle_payload)
    assert response.status_code == 200
    assert response.json()["name"] == "Bella II"
    assert response.json()["status"] == "QUARANTINED"


def test_update_to_taken_tag_conflicts(client, cow, cattle_payload):
    other = dict(cattle_payload, tagNumber="TAG-20002")
    created = client.post("/api/cattle", json=other).json()
    response = client.put(f"/api/cattle/{created['id']}", json=cattle_payload)
    assert response.status_code == 409


def test_list_includes_offspring_milk_and_next_due(client, cow, cattle_payload):
    calf = dict(cattle_payload, tagNumber="TAG-30003", name="Calfy", category="CALF", motherId=cow["id"])
    assert client.post("/api/cattle", json=calf).status_code == 201
    for liters in (10, 14):
        client.post("/api/milk", json={
            "cattleId": cow["id"], "date": local_today().isoformat(), "liters": liters, "session": "MORNING",
        })
    due = (local_now() + timedelta(days=3)).isoformat()
    later = (local_now() + timedelta(days=20)).isoformat()
    for scheduled in (later, due):
        client.post("/api/health", json={
            "cattleId": cow["id"], "recordType": "CHECKUP", "description": "Routine", "scheduledDate": scheduled,
        })

    response = client.get("/api/cattle")
    assert response.status_code == 200
    herd = {c["tagNumber"]: c for c in response.json()}
    bella = herd["TAG-10001"]
    assert bella["_count"] == {"offspring": 1, "milkRecords": 2}
    assert [o["tagNumber"] for o in bella["offspring"]] == ["TAG-30003"]
    assert bella["averageDailyMilk"] == 12
    assert len(bella["healthRecords"]) == 1
    assert bella["daysUntilNextDue"] == 3
    assert herd["TAG-30003"]["mother"]["id"] == cow["id"]


def test_herd_stats(client, cow, cattle_payload):
    bull = dict(cattle_payload, tagNumber="TAG-40004", gender="MALE", category="BULL", status="SOLD")
    client.post("/api/cattle", json=bull)
    client.post("/api/milk", json={
        "cattleId": cow["id"], "date": local_today().isoformat(), "liters": 18.5, "session": "EVENING",
    })

    stats = client.get("/api/cattle/stats").json()
    assert stats == {
        "total": 2,
        "active": 1,
        "females": 1,
        "males": 1,
        "totalOffspring": 0,
        "totalMilk": 18.5,
        "medicationDue": 0,
    }


def test_delete_keeps_offspring_and_milk_history(client, cow, cattle_payload):
    calf = client.post("/api/cattle", json=dict(
        cattle_payload, tagNumber="TAG-50005", category="CALF", motherId=cow["id"],
    )).json()
    milk = client.post("/api/milk", json={
        "cattleId": cow["id"], "date": local_today().isoformat(), "liters": 9, "session": "MORNING",
    }).json()

    response = client.delete(f"/api/cattle/{cow['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/cattle/{cow['id']}").status_code == 404
    assert client.get(f"/api/cattle/{calf['id']}").json()["motherId"] is None

    records = client.get("/api/milk").json()
    assert [r["id"] for r in records] == [milk["id"]]
    assert records[0]["cattleId"] is None


def test_mother_cycle_is_rejected(client, cow, cattle_payload):
    daughter = client.post("/api/cattle", json=dict(
        cattle_payload, tagNumber="TAG-60006", category="HEIFER", motherId=cow["id"],
    )).json()
    granddaughter = client.post("/api/cattle", json=dict(
        cattle_payload, tagNumber="TAG-70007", category="CALF", motherId=daughter["id"],
    )).json()

    for descendant in (daughter, granddaughter):
        response = client.put(f"/api/cattle/{cow['id']}", json=dict(cattle_payload, motherId=descendant["id"]))
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid mother reference"

    assert client.get(f"/api/cattle/{cow['id']}").json()["motherId"] is None


def test_own_mother_is_rejected(client, cow, cattle_payload):
    response = client.put(f"/api/cattle/{cow['id']}", json=dict(cattle_payload, motherId=cow["id"]))
    assert response.status_code == 400
