"""Report, Impact and Health Routes - HTTP tests.

Tests cover:
    - Analyst generates a report (201); donor gets 403
    - Inverted window is 400 with field start_date
    - Export is text/plain with an attachment filename
    - Impact totals and health probes
"""

from uuid import uuid4

from tests.api.actor_headers import headers_for

WINDOW = {"report_type": "monthly", "start_date": "2024-01-01", "end_date": "2024-01-31"}


async def test_generate_report(client, analyst):
    resp = await client.post("/api/v1/reports", json=WINDOW, headers=headers_for(analyst))
    assert resp.status_code == 201
    report = resp.json()
    assert report["period"] == "2024-01-01 to 2024-01-31"
    assert report["total_donations"] == 0
    assert report["average_donation_size"] == 0.0


async def test_donor_cannot_generate_report(client, donor):
    resp = await client.post("/api/v1/reports", json=WINDOW, headers=headers_for(donor))
    assert resp.status_code == 403


async def test_inverted_window_is_400(client, analyst):
    resp = await client.post(
        "/api/v1/reports",
        json={**WINDOW, "start_date": "2024-02-01"},
        headers=headers_for(analyst),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_and_get_report(client, analyst):
    created = (await client.post(
        "/api/v1/reports", json=WINDOW, headers=headers_for(analyst),
    )).json()

    listed = (await client.get("/api/v1/reports")).json()
    assert [r["id"] for r in listed] == [created["id"]]
    fetched = await client.get(f"/api/v1/reports/{created['id']}")
    assert fetched.json()["start_date"] == "2024-01-01"


async def test_unknown_report_is_404(client):
    resp = await client.get(f"/api/v1/reports/{uuid4()}")
    assert resp.status_code == 404


async def test_export_report(client, analyst):
    created = (await client.post(
        "/api/v1/reports", json=WINDOW, headers=headers_for(analyst),
    )).json()

    resp = await client.get(f"/api/v1/reports/{created['id']}/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "food-waste-report-2024-01-01.txt" in resp.headers["content-disposition"]
    assert resp.text.startswith("Food Waste Reduction Report\n")
    assert "Total Donations: 0" in resp.text


async def test_impact_totals_empty(client):
    resp = await client.get("/api/v1/impact/totals")
    assert resp.status_code == 200
    assert resp.json() == {
        "total_donations": 0,
        "total_food_saved_lbs": 0.0,
        "total_co2_saved_lbs": 0.0,
        "total_meals_provided": 0,
        "average_donation_size": 0.0,
    }


async def test_liveness(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_readiness(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["database"] == "healthy"
