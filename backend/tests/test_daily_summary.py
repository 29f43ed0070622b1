from models.daily_summary import DailySummary
from tasks.daily_summary import build_daily_summary
from utils.dates import local_today


def test_builds_and_refreshes_summary(client, cow, cattle_payload, db):
    today = local_today()
    client.post("/api/cattle", json=dict(cattle_payload, tagNumber="TAG-2", gender="MALE", category="CALF"))
    client.post("/api/milk", json={"cattleId": cow["id"], "date": today.isoformat(), "liters": 9, "session": "MORNING"})
    hay = client.post("/api/feed", json={"feedType": "HAY", "quantity": 100, "minThreshold": 10}).json()
    client.post("/api/feed/usage", json={"inventoryId": hay["id"], "date": today.isoformat(), "quantityUsed": 12.25})

    summary = build_daily_summary(db, today)
    assert summary.total_cattle == 2
    assert summary.male_count == 1
    assert summary.female_count == 1
    assert summary.calf_count == 1
    assert summary.total_milk_liters == 9
    assert summary.avg_milk_per_cow == 4.5
    assert summary.feed_hay_used == 12.3
    assert summary.feed_silage_used == 0

    client.post("/api/milk", json={"date": today.isoformat(), "liters": 3, "session": "EVENING"})
    build_daily_summary(db, today)

    rows = db.query(DailySummary).filter(DailySummary.date == today).all()
    assert len(rows) == 1
    assert rows[0].total_milk_liters == 12
