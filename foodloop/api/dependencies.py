"""Request Dependencies - actor extraction and service wiring for routes.

Invariants:
    - The actor is read from X-Actor-Id / X-Actor-Role on every request; a missing
      or malformed header is a 400 validation error
    - Services are built per request around the process-wide session manager

Design Decisions:
    - Authentication happens upstream (gateway); this layer only trusts the
      forwarded identity and hands it to services explicitly
"""

from uuid import UUID

from fastapi import Depends, Header

from foodloop.config import Settings, get_settings
from foodloop.core.domain_types import Actor, UserId, UserRole
from foodloop.infrastructure.data_store import SqlDataStore
from foodloop.infrastructure.database import DatabaseSessionManager, get_db_manager
from foodloop.services.donation_lifecycle import DonationLifecycle
from foodloop.services.report_aggregator import ReportAggregator


def get_actor(
    x_actor_id: UUID = Header(...),
    x_actor_role: UserRole = Header(...),
) -> Actor:
    return Actor(user_id=UserId(x_actor_id), role=x_actor_role)


def get_data_store(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> SqlDataStore:
    return SqlDataStore(manager)


def get_lifecycle(
    store: SqlDataStore = Depends(get_data_store),
    settings: Settings = Depends(get_settings),
) -> DonationLifecycle:
    return DonationLifecycle(store, settings)


def get_report_aggregator(
    store: SqlDataStore = Depends(get_data_store),
) -> ReportAggregator:
    return ReportAggregator(store)
