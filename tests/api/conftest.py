"""API test fixtures - ASGI client over the in-memory database."""

import pytest
from httpx import ASGITransport, AsyncClient

import foodloop.infrastructure.database as db_module
from foodloop.infrastructure.database import get_db_manager
from foodloop.main import app
from tests.api.actor_headers import headers_for


@pytest.fixture
async def client(test_db_manager):
    """FastAPI test client with the session manager overridden."""
    app.dependency_overrides[get_db_manager] = lambda: test_db_manager

    # Patch db_manager for the readiness probe, which reads it directly
    original_manager = db_module.db_manager
    db_module.db_manager = test_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def listing_body():
    return {
        "title": "Leftover catering trays",
        "food_type": "prepared",
        "quantity": 10,
        "unit": "kg",
        "pickup_location": "12 Market St, loading dock",
    }


@pytest.fixture
async def posted_listing(client, donor, listing_body):
    resp = await client.post(
        "/api/v1/listings", json=listing_body, headers=headers_for(donor),
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
async def posted_request(client, recipient, posted_listing):
    resp = await client.post(
        "/api/v1/requests",
        json={"listing_id": posted_listing["id"], "message": "Pickup at 5pm"},
        headers=headers_for(recipient),
    )
    assert resp.status_code == 201
    return resp.json()
