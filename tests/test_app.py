import pytest
from fastapi.testclient import TestClient

import app as app_module


SIMPLE_CSV = "Lap,Time\n1,1:23.456\n2,1:24.001\n3,1:22.987\n"


@pytest.fixture
def client():
    return TestClient(app_module.app)


def upload(text, name="session.csv"):
    return {"file": (name, text.encode("utf-8"), "text/csv")}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_parse_session(client):
    response = client.post("/api/parse", files=upload(SIMPLE_CSV))
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["format"] == "column"
    assert body["durations"] == [83.456, 84.001, 82.987]
    assert body["statistics"]["sample_size"] == 3
    assert body["form"]["best_lap"] == "1:22.987"


def test_parse_session_strips_bom(client):
    files = {"file": ("session.csv", b"\xef\xbb\xbfTime\n1:23.456\n1:24.001\n", "text/csv")}
    response = client.post("/api/parse", files=files)
    assert response.status_code == 200
    assert response.json()["lap_column"] == "Time"


def test_parse_failure_returns_422(client):
    response = client.post("/api/parse", files=upload("Speed,Throttle\n120,0.9\n"))
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["ok"] is False
    assert detail["error"] == "no_lap_time_column"
    assert detail["preview"] == ["Speed,Throttle", "120,0.9"]


def test_upload_too_large(client, monkeypatch):
    monkeypatch.setattr(app_module, "MAX_UPLOAD_BYTES", 8)
    response = client.post("/api/parse", files=upload(SIMPLE_CSV))
    assert response.status_code == 413


def test_export_laps(client):
    response = client.post("/api/export/laps", files=upload(SIMPLE_CSV))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=laps.csv" in response.headers["content-disposition"]
    assert response.text.splitlines()[0] == "lap_number,lap_time_s,lap_time,delta_to_best_s"
    assert len(response.text.splitlines()) == 4


def test_export_laps_failure(client):
    response = client.post("/api/export/laps", files=upload(""))
    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "empty_input"
