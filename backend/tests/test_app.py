from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from main import app
from scheduler import scheduler


def test_database_failure_returns_internal_error(client, monkeypatch):
    def broken_query(db):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr("crud.cattle.get_all_cattle", broken_query)
    response = client.get("/api/cattle")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_lifespan_leaves_scheduler_off_by_default():
    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert not scheduler.running
    assert not scheduler.running
