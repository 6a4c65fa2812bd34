"""Service test fixtures - lifecycle engine and report aggregator over the SQL store."""

import pytest

from foodloop.services.donation_lifecycle import DonationLifecycle
from foodloop.services.report_aggregator import ReportAggregator


@pytest.fixture
def lifecycle(store, settings, clock):
    return DonationLifecycle(store, settings, clock=clock)


@pytest.fixture
def aggregator(store, clock):
    return ReportAggregator(store, clock=clock)


@pytest.fixture
async def listing(lifecycle, donor, listing_attrs):
    return await lifecycle.create_listing(donor, listing_attrs)


@pytest.fixture
async def pending_request(lifecycle, recipient, listing):
    return await lifecycle.submit_request(recipient, listing["id"], "We can pick up at 5pm")


@pytest.fixture
async def approved_request(lifecycle, donor, pending_request):
    return await lifecycle.approve_request(donor, pending_request["id"])
