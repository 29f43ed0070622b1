from datetime import timedelta

import pytest

from utils.dates import local_now, local_today


@pytest.fixture
def hay(client):
    response = client.post("/api/feed", json={
        "feedType": "HAY",
        "quantity": 100,
        "unit": "bales",
        "minThreshold": 20,
        "cost": 12.5,
        "supplier": "Farm Supply Depot",
        "expiryDate": (local_now() + timedelta(days=90)).isoformat(),
    })
    assert response.status_code == 201, response.text
    return response.json()


def use(client, inventory_id, quantity, days_ago=0):
    return client.post("/api/feed/usage", json={
        "inventoryId": inventory_id,
        "date": (local_today() - timedelta(days=days_ago)).isoformat(),
        "quantityUsed": quantity,
    })


def test_create_defaults_last_restocked(hay):
    assert hay["lastRestocked"] is not None
    assert hay["unit"] == "bales"


def test_create_rejects_non_positive_quantity(client):
    response = client.post("/api/feed", json={"feedType": "SILAGE", "quantity": 0, "minThreshold": 5})
    assert response.status_code == 400
    assert response.json()["error"] == "Valid quantity (greater than 0) is required"


def test_usage_decrements_quantity(client, hay):
    response = use(client, hay["id"], 30)
    assert response.status_code == 201
    assert response.json()["inventory"]["feedType"] == "HAY"
    assert client.get(f"/api/feed/{hay['id']}").json()["quantity"] == 70


def test_usage_exceeding_stock_is_rejected(client, hay):
    response = use(client, hay["id"], 150)
    assert response.status_code == 400
    assert response.json() == {"error": "Insufficient inventory", "available": 100, "requested": 150}

    assert client.get(f"/api/feed/{hay['id']}").json()["quantity"] == 100
    assert client.get("/api/feed/usage").json() == []


def test_usage_can_drain_to_exactly_zero(client, hay):
    assert use(client, hay["id"], 100).status_code == 201
    assert use(client, hay["id"], 0.5).status_code == 400
    assert client.get(f"/api/feed/{hay['id']}").json()["quantity"] == 0


def test_usage_for_missing_inventory(client):
    response = use(client, 999, 1)
    assert response.status_code == 404


def test_usage_quantity_must_be_positive(client, hay):
    response = use(client, hay["id"], 0)
    assert response.status_code == 400


def test_restock(client, hay):
    use(client, hay["id"], 90)
    response = client.post("/api/feed/restock", json={"inventoryId": hay["id"], "quantityAdded": 50, "supplier": "AgriFeed Solutions"})
    assert response.status_code == 200
    body = response.json()
    assert body["quantity"] == 60
    assert body["supplier"] == "AgriFeed Solutions"


def test_detail_derives_stock_indicators(client, hay):
    for days_ago, quantity in enumerate([10, 10, 10]):
        use(client, hay["id"], quantity, days_ago=days_ago)

    detail = client.get(f"/api/feed/{hay['id']}").json()
    assert detail["stockStatus"] == "GOOD"
    # (70 - 20) / 10 a day
    assert detail["daysUntilRestock"] == 5
    assert detail["expiringSoon"] is False
    assert detail["_count"] == {"feedRecords": 3}
    assert len(detail["feedRecords"]) == 3


def test_list_without_usage_has_no_restock_estimate(client, hay):
    items = client.get("/api/feed").json()
    assert len(items) == 1
    assert items[0]["daysUntilRestock"] is None
    assert items[0]["feedRecords"] == []


def test_stats(client, hay):
    client.post("/api/feed", json={
        "feedType": "SILAGE", "quantity": 10, "minThreshold": 50,
        "expiryDate": (local_now() + timedelta(days=10)).isoformat(),
    })
    stats = client.get("/api/feed/stats").json()
    assert stats == {
        "totalItems": 2,
        "lowStock": 1,
        "expired": 0,
        "totalValue": 1250,
        "totalQuantity": 110,
        "expiringSoon": 1,
    }


def test_delete_removes_usage(client, hay):
    use(client, hay["id"], 5)
    assert client.delete(f"/api/feed/{hay['id']}").json() == {"success": True}
    assert client.get(f"/api/feed/{hay['id']}").status_code == 404
    assert client.get("/api/feed/usage").json() == []


def test_non_finite_quantities_are_rejected(client, hay):
    response = client.post("/api/feed/restock", json={"inventoryId": hay["id"], "quantityAdded": "inf"})
    assert response.status_code == 400
    assert use(client, hay["id"], "NaN").status_code == 400
    response = client.post("/api/feed", json={"feedType": "GRAIN", "quantity": "Infinity", "minThreshold": 1})
    assert response.status_code == 400
    response = client.post("/api/feed", json={"feedType": "GRAIN", "quantity": 10, "minThreshold": 1, "cost": "NaN"})
    assert response.status_code == 400

    assert client.get(f"/api/feed/{hay['id']}").json()["quantity"] == 100
