from datetime import date, timedelta

from models.daily_summary import DailySummary
from utils.dates import local_now, local_today


def test_empty_dashboard(client):
    response = client.get("/api/dashboard/stats")
    assert response.status_code == 200
    stats = response.json()
    assert stats["cattle"]["total"] == 0
    assert len(stats["cattle"]["chartData"]) == 7
    assert len(stats["milk"]["chartData"]) == 7
    assert all(p["liters"] == 0 for p in stats["milk"]["chartData"])
    assert stats["milk"]["avgPerCow"] == 0
    assert stats["health"] == {"due": 0}
    assert stats["feed"] == {"total": 0, "hay": 0, "concentrate": 0, "silage": 0, "silageLow": False}


def test_milk_totals_and_chart(client, cow):
    today = local_today().isoformat()
    client.post("/api/milk", json={"cattleId": cow["id"], "date": today, "liters": 10.5, "session": "MORNING"})
    client.post("/api/milk", json={"date": today, "liters": 5, "session": "EVENING"})

    milk = client.get("/api/dashboard/stats").json()["milk"]
    assert milk["today"] == 15.5
    assert milk["thisWeek"] == 15.5
    assert milk["avgPerCow"] == 2.2
    assert milk["chartData"][-1] == {"period": local_today().strftime("%a"), "key": today, "liters": 16}


def test_explicit_range_only_applies_to_daily_view(client):
    params = {"startDate": "2024-01-01", "endDate": "2024-01-10"}
    daily = client.get("/api/dashboard/stats", params=params).json()["milk"]["chartData"]
    assert len(daily) == 10
    assert daily[0]["key"] == "2024-01-01"

    monthly = client.get("/api/dashboard/stats", params=dict(params, milkView="monthly")).json()["milk"]["chartData"]
    assert len(monthly) == 6
    assert monthly[-1]["key"] == local_today().strftime("%Y-%m")


def test_unknown_view_falls_back_to_daily(client):
    stats = client.get("/api/dashboard/stats", params={"milkView": "hourly", "cattleView": "weekly"}).json()
    assert len(stats["milk"]["chartData"]) == 7
    assert len(stats["cattle"]["chartData"]) == 7


def test_cattle_chart_uses_summaries_and_flags_estimates(client, cow, db):
    db.add(DailySummary(date=local_today(), total_cattle=5))
    db.commit()

    chart = client.get("/api/dashboard/stats").json()["cattle"]["chartData"]
    assert chart[-1]["count"] == 5
    assert chart[-1]["estimated"] is False
    for point in chart[:-1]:
        assert point["count"] == 1
        assert point["estimated"] is True


def test_recorded_zero_is_not_estimated(client, cow, db):
    db.add(DailySummary(date=local_today() - timedelta(days=1), total_cattle=0))
    db.commit()

    chart = client.get("/api/dashboard/stats").json()["cattle"]["chartData"]
    assert chart[-2] == {"period": chart[-2]["period"], "key": chart[-2]["key"], "count": 0, "estimated": False}


def test_yearly_cattle_chart_takes_last_summary_of_year(client, db):
    this_year = local_today().year
    db.add_all([
        DailySummary(date=local_today().replace(year=this_year - 1, month=1, day=1), total_cattle=10),
        DailySummary(date=local_today().replace(year=this_year - 1, month=12, day=31), total_cattle=14),
    ])
    db.commit()

    chart = client.get("/api/dashboard/stats", params={"cattleView": "yearly"}).json()["cattle"]["chartData"]
    assert [p["key"] for p in chart] == [str(y) for y in range(this_year - 4, this_year + 1)]
    assert chart[-2]["count"] == 14
    assert chart[-2]["estimated"] is False


def test_herd_health_and_feed_totals(client, cow, cattle_payload):
    client.post("/api/cattle", json=dict(cattle_payload, tagNumber="TAG-2", gender="MALE", category="CALF"))
    client.post("/api/cattle", json=dict(cattle_payload, tagNumber="TAG-3", status="SOLD"))
    client.post("/api/health", json={
        "cattleId": cow["id"], "recordType": "CHECKUP", "description": "Hoof check",
        "scheduledDate": (local_now() + timedelta(days=3)).isoformat(),
    })
    client.post("/api/health", json={
        "cattleId": cow["id"], "recordType": "CHECKUP", "description": "Later",
        "scheduledDate": (local_now() + timedelta(days=30)).isoformat(),
    })
    client.post("/api/feed", json={"feedType": "HAY", "quantity": 300, "minThreshold": 50})
    client.post("/api/feed", json={"feedType": "SILAGE", "quantity": 40, "minThreshold": 100})

    stats = client.get("/api/dashboard/stats").json()
    assert {k: stats["cattle"][k] for k in ("total", "male", "female", "calves")} == {
        "total": 2, "male": 1, "female": 1, "calves": 1,
    }
    assert stats["health"]["due"] == 1
    assert stats["feed"] == {"total": 340, "hay": 300, "concentrate": 0, "silage": 40, "silageLow": True}


def test_inverted_range_is_rejected(client):
    response = client.get("/api/dashboard/stats", params={"startDate": "2024-02-01", "endDate": "2024-01-01"})
    assert response.status_code == 400
    assert response.json()["error"] == "startDate must not be after endDate"


def test_range_beyond_period_limit_is_rejected(client):
    response = client.get("/api/dashboard/stats", params={"startDate": "2024-01-01", "endDate": "2025-12-31"})
    assert response.status_code == 400


def test_range_at_period_limit_keeps_its_end(client):
    start = date(2024, 1, 1)
    end = start + timedelta(days=499)
    response = client.get("/api/dashboard/stats", params={"startDate": start.isoformat(), "endDate": end.isoformat()})
    assert response.status_code == 200
    chart = response.json()["milk"]["chartData"]
    assert len(chart) == 500
    assert chart[-1]["key"] == end.isoformat()
