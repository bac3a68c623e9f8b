"""
E2E tests for the usage analysis and refill prediction endpoints.
"""
from __future__ import annotations

import uuid
from datetime import date, timedelta

from fastapi.testclient import TestClient

REFERENCE_DATE = date(2026, 3, 31)


def build_records(days: int, taken: int, scheduled: int) -> list[dict]:
    return [
        {
            "date": (REFERENCE_DATE - timedelta(days=offset)).isoformat(),
            "taken_doses": taken,
            "scheduled_doses": scheduled,
        }
        for offset in range(days)
    ]


def test_usage_analysis(api_client: TestClient):
    response = api_client.post(
        "/refills/usage",
        json={
            "daily_frequency": 2,
            "reference_date": REFERENCE_DATE.isoformat(),
            "records": build_records(30, 2, 2),
        },
    )
    assert response.status_code == 200

    payload = response.json()
    assert abs(payload["adherence_rate"] - 1.0) < 1e-9
    assert abs(payload["consistency_score"] - 1.0) < 1e-9
    assert abs(payload["average_daily_usage"] - 2.0) < 1e-9
    assert payload["data_points"] == 30
    assert payload["period_days"] == 30


def test_usage_analysis_rejects_invalid_payload(api_client: TestClient):
    response = api_client.post(
        "/refills/usage",
        json={"daily_frequency": 0, "records": [{"date": "not-a-date"}]},
    )
    assert response.status_code == 422


def test_prediction_with_low_supply_is_critical(api_client: TestClient):
    response = api_client.post(
        "/refills/prediction",
        json={
            "prescription_id": "rx-1",
            "total_pills": 30,
            "pills_remaining": 6,
            "daily_frequency": 2,
            "reference_date": REFERENCE_DATE.isoformat(),
            "records": build_records(30, 2, 2),
        },
    )
    assert response.status_code == 200

    payload = response.json()
    assert payload["prescription_id"] == "rx-1"
    assert payload["alert"] == "critical"
    prediction = payload["prediction"]
    assert prediction["days_remaining"] == 3
    assert prediction["confidence"] == "High"
    assert prediction["predicted_refill_date"] == "2026-04-03"
    assert prediction["recommended_refill_date"] == "2026-03-29"


def test_prediction_without_inventory_is_empty(api_client: TestClient):
    response = api_client.post(
        "/refills/prediction",
        json={
            "prescription_id": "rx-2",
            "pills_remaining": 10,
            "records": build_records(5, 1, 1),
        },
    )
    assert response.status_code == 200
    assert response.json() == {
        "prescription_id": "rx-2",
        "prediction": None,
        "alert": None,
    }


def build_prescription(name: str, pills_remaining: int, **overrides) -> dict:
    prescription = {
        "id": f"{name.lower()}-{uuid.uuid4().hex}",
        "name": name,
        "daily_frequency": 2,
        "total_pills": 60,
        "pills_remaining": pills_remaining,
    }
    prescription.update(overrides)
    return prescription


def test_alerts_and_recommendations(api_client: TestClient):
    critical = build_prescription("Lipitor", 4, records=build_records(30, 2, 2))
    warning = build_prescription("Zoloft", 10, records=build_records(30, 2, 2))
    stocked = build_prescription("Metformin", 100, records=build_records(30, 2, 2))
    response = api_client.post(
        "/refills/alerts",
        json={
            "reference_date": REFERENCE_DATE.isoformat(),
            "prescriptions": [warning, stocked, critical],
        },
    )
    assert response.status_code == 200

    payload = response.json()
    assert payload["count"] == 2
    alert_types = {
        item["prescription_id"]: item["alert_type"] for item in payload["alerts"]
    }
    assert alert_types == {warning["id"]: "warning", critical["id"]: "critical"}
    assert api_client.get("/refills/alerts").json()["count"] == 2

    response = api_client.get("/refills/recommendations")
    assert response.status_code == 200

    recommendations = response.json()["recommendations"]
    assert [item["prescription_id"] for item in recommendations] == [
        critical["id"],
        warning["id"],
    ]
    assert recommendations[0]["urgency"] == "Immediate"
    assert recommendations[0]["days_remaining"] == 2
    assert recommendations[0]["reason"] == (
        "Critical: Only 2 days remaining. Refill immediately."
    )
    assert recommendations[1]["urgency"] == "Soon"
    assert recommendations[1]["days_remaining"] == 5
    assert recommendations[1]["reason"] == (
        "Based on your 100% adherence rate, you'll need a refill in 5 days."
    )


def test_pill_taken_raises_single_critical_alert(api_client: TestClient):
    prescription = build_prescription("Lisinopril", 5, daily_frequency=1)
    pills = []
    alerts = []
    for _ in range(3):
        response = api_client.post(
            "/refills/pill-taken",
            json={
                "prescription": prescription,
                "reference_date": REFERENCE_DATE.isoformat(),
            },
        )
        assert response.status_code == 200
        payload = response.json()
        pills.append(payload["pills_remaining"])
        alerts.append(payload["alert"])
        prescription["pills_remaining"] = payload["pills_remaining"]

    assert pills == [4, 3, 2]
    assert alerts[0] is None
    assert alerts[1]["alert_type"] == "critical"
    assert alerts[1]["prescription_id"] == prescription["id"]
    assert alerts[1]["prediction"]["days_remaining"] == 3
    assert alerts[2] is None


def test_pill_taken_without_inventory(api_client: TestClient):
    prescription = build_prescription("Advil", 0)
    response = api_client.post("/refills/pill-taken", json={"prescription": prescription})
    assert response.status_code == 200
    assert response.json()["pills_remaining"] == 0
    assert response.json()["alert"] is None


def test_adherence_summary(api_client: TestClient):
    records = build_records(2, 2, 2) + [
        {
            "date": (REFERENCE_DATE - timedelta(days=2)).isoformat(),
            "taken_doses": 1,
            "scheduled_doses": 2,
        }
    ]
    response = api_client.post(
        "/refills/adherence",
        json={"reference_date": REFERENCE_DATE.isoformat(), "records": records},
    )
    assert response.status_code == 200

    payload = response.json()
    assert abs(payload["overall_adherence"] - 500 / 6) < 1e-9
    assert payload["streak_days"] == 2
    assert payload["weekly_progress"] == [False] * 5 + [True, True]
    assert [day["level"] for day in payload["days"]] == ["fair", "perfect", "perfect"]
    assert payload["days"][0]["date"] == "2026-03-29"
    assert payload["days"][0]["description"] == "Fair (50-79%)"


def test_adherence_rejects_invalid_threshold(api_client: TestClient):
    response = api_client.post("/refills/adherence", json={"threshold": 150})
    assert response.status_code == 422
