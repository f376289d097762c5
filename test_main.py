"""
test_main.py
============
HTTP surface: request validation, default location fallback and mapping of
engine errors to 400 responses.
"""

from fastapi.testclient import TestClient

from main import app
from vedic_engine.config import settings

client = TestClient(app)


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_choghadiya_endpoint():
    resp = client.post("/api/choghadiya", json={
        "year": 2024, "month": 6, "day": 21,
        "latitude": 28.6139, "longitude": 77.2090,
        "now": "2024-06-21T06:00:00+05:30",
    })
    assert resp.status_code == 200
    body = resp.json()["choghadiya"]
    assert len(body["periods"]) == 16
    assert body["periods"][0]["name"] == "Udveg"
    assert body["current"]["name"] == "Udveg"


def test_choghadiya_falls_back_to_default_location():
    resp = client.post("/api/choghadiya", json={"year": 2024, "month": 1, "day": 15})
    assert resp.status_code == 200
    body = resp.json()["choghadiya"]
    assert body["latitude"] == settings.DEFAULT_LATITUDE
    assert body["longitude"] == settings.DEFAULT_LONGITUDE


def test_choghadiya_polar_day_is_400():
    resp = client.post("/api/choghadiya", json={
        "year": 2024, "month": 6, "day": 21, "latitude": 78.2232, "longitude": 15.6267,
    })
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("PolarDayNightError")


def test_choghadiya_invalid_calendar_date():
    resp = client.post("/api/choghadiya", json={"year": 2023, "month": 2, "day": 30})
    assert resp.status_code == 400


def test_choghadiya_rejects_out_of_range_latitude():
    resp = client.post("/api/choghadiya", json={
        "year": 2024, "month": 6, "day": 21, "latitude": 95.0, "longitude": 0.0,
    })
    assert resp.status_code == 422


def test_birth_profile_endpoint():
    resp = client.post("/api/birth-profile", json={
        "birth": "1990-06-15T10:30:00+05:30",
        "latitude": 28.6139, "longitude": 77.2090,
        "now": "2024-06-15T00:00:00Z",
        "ayanamsa": "lahiri",
    })
    assert resp.status_code == 200
    profile = resp.json()["profile"]
    assert profile["ayanamsa"] == "lahiri"
    assert profile["dasha"]["remaining_years"] > 0


def test_birth_profile_out_of_range_date_is_400():
    resp = client.post("/api/birth-profile", json={"birth": "1750-01-01T00:00:00Z"})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("DateOutOfRange")


def test_vedic_elements_endpoint():
    resp = client.post("/api/vedic-elements", json={"instant": "2024-06-21T06:00:00Z"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["location"] == {
        "latitude": settings.DEFAULT_LATITUDE, "longitude": settings.DEFAULT_LONGITUDE}
    assert body["vedic_elements"]["polar"] is False


def test_parse_endpoint():
    resp = client.post("/api/prediction/parse", json={
        "text": "Panchang:\nTithi: Shukla Panchami\n\nChoghadiya:\n06:15 - Udveg (Unfavorable)",
    })
    assert resp.status_code == 200
    prediction = resp.json()["prediction"]
    assert prediction["panchang"]["tithi"] == "Shukla Panchami"
    assert prediction["choghadiya"] == [{"time": "06:15", "name": "Udveg", "nature": "Unfavorable"}]


def test_parse_endpoint_malformed_is_400():
    resp = client.post("/api/prediction/parse", json={"text": "   "})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("MalformedPredictionText")


def test_parse_endpoint_unrecognised_text_is_empty():
    resp = client.post("/api/prediction/parse", json={"text": "First paragraph.\n\nSecond paragraph."})
    assert resp.status_code == 200
    prediction = resp.json()["prediction"]
    assert prediction["choghadiya"] == []
    assert [w["asset"] for w in prediction["trading"]] == ["Gold", "Crypto"]
