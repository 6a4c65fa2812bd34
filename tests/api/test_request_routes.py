"""Request Routes - HTTP tests for the approve/reject/complete flow.

Tests cover:
    - Submit returns 201 pending; listing untouched
    - Approve claims the listing in the same call
    - Second approval on a claimed listing is 409 INVALID_STATE
    - Complete returns request, listing and impact record together
    - Ownership violations are 403
"""

from uuid import uuid4

from tests.api.actor_headers import headers_for


async def test_submit_request(client, posted_listing, posted_request):
    assert posted_request["status"] == "pending"
    assert posted_request["listing_id"] == posted_listing["id"]
    listing = (await client.get(f"/api/v1/listings/{posted_listing['id']}")).json()
    assert listing["status"] == "available"


async def test_submit_for_unknown_listing_is_404(client, recipient):
    resp = await client.post(
        "/api/v1/requests",
        json={"listing_id": str(uuid4())},
        headers=headers_for(recipient),
    )
    assert resp.status_code == 404


async def test_approve_claims_listing(client, donor, recipient, posted_listing, posted_request):
    resp = await client.post(
        f"/api/v1/requests/{posted_request['id']}/approve", headers=headers_for(donor),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"

    listing = (await client.get(f"/api/v1/listings/{posted_listing['id']}")).json()
    assert listing["status"] == "claimed"
    assert listing["claimed_by"] == str(recipient.user_id)


async def test_sibling_approval_is_conflict(
    client, donor, other_recipient, posted_listing, posted_request,
):
    await client.post(
        f"/api/v1/requests/{posted_request['id']}/approve", headers=headers_for(donor),
    )
    sibling = (await client.post(
        "/api/v1/requests",
        json={"listing_id": posted_listing["id"]},
        headers=headers_for(other_recipient),
    )).json()

    resp = await client.post(
        f"/api/v1/requests/{sibling['id']}/approve", headers=headers_for(donor),
    )
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "INVALID_STATE"
    assert error["context"]["listing_id"] == posted_listing["id"]


async def test_other_donor_cannot_approve(client, other_donor, posted_request):
    resp = await client.post(
        f"/api/v1/requests/{posted_request['id']}/approve",
        headers=headers_for(other_donor),
    )
    assert resp.status_code == 403


async def test_reject(client, donor, posted_request):
    resp = await client.post(
        f"/api/v1/requests/{posted_request['id']}/reject", headers=headers_for(donor),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"


async def test_complete_returns_impact(client, donor, recipient, posted_listing, posted_request):
    await client.post(
        f"/api/v1/requests/{posted_request['id']}/approve", headers=headers_for(donor),
    )
    resp = await client.post(
        f"/api/v1/requests/{posted_request['id']}/complete",
        headers=headers_for(recipient),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["request"]["status"] == "completed"
    assert body["listing"]["status"] == "completed"
    assert body["impact_record"]["donation_id"] == posted_listing["id"]
    assert body["impact_record"]["meals_provided"] == 33

    again = await client.post(
        f"/api/v1/requests/{posted_request['id']}/complete",
        headers=headers_for(recipient),
    )
    assert again.status_code == 409

    totals = (await client.get("/api/v1/impact/totals")).json()
    assert totals["total_donations"] == 1


async def test_complete_pending_request_is_conflict(client, recipient, posted_request):
    resp = await client.post(
        f"/api/v1/requests/{posted_request['id']}/complete",
        headers=headers_for(recipient),
    )
    assert resp.status_code == 409


async def test_list_requests_for_listing(client, posted_listing, posted_request):
    resp = await client.get(
        "/api/v1/requests", params={"listing_id": posted_listing["id"]},
    )
    assert [r["id"] for r in resp.json()] == [posted_request["id"]]
