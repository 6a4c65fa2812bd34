"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - ListingId, RequestId, ImpactRecordId, ReportId, UserId wrap UUIDs
    - Canonical mass is always expressed in pounds (CanonicalMass)
    - All valid states encoded as Enums - no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB string columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ListingId = NewType("ListingId", UUID)
RequestId = NewType("RequestId", UUID)
ImpactRecordId = NewType("ImpactRecordId", UUID)
ReportId = NewType("ReportId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

CanonicalMass = NewType("CanonicalMass", float)     # pounds-equivalent, >= 0


# ─── Enums ───────────────────────────────────────────────────────

class ListingStatus(str, Enum):
    """Listing lifecycle states - maps to food_listings.status."""
    AVAILABLE = "available"
    CLAIMED = "claimed"
    COMPLETED = "completed"
    EXPIRED = "expired"


class RequestStatus(str, Enum):
    """Request lifecycle states - maps to donation_requests.status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class QuantityUnit(str, Enum):
    """Units a donor may tag a listing quantity with."""
    KG = "kg"
    LBS = "lbs"
    SERVINGS = "servings"
    ITEMS = "items"


class FoodType(str, Enum):
    PREPARED = "prepared"
    FRESH_PRODUCE = "fresh_produce"
    PACKAGED = "packaged"
    BAKED_GOODS = "baked_goods"
    OTHER = "other"


class ReportType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class UserRole(str, Enum):
    """Caller roles supplied by the upstream gateway."""
    ADMIN = "admin"
    FOOD_DONOR = "food_donor"
    RECIPIENT_ORG = "recipient_org"
    DATA_ANALYST = "data_analyst"


class Action(str, Enum):
    """Role-gated operations exposed by the services layer."""
    CREATE_LISTING = "create_listing"
    EXPIRE_LISTING = "expire_listing"
    SUBMIT_REQUEST = "submit_request"
    APPROVE_REQUEST = "approve_request"
    REJECT_REQUEST = "reject_request"
    COMPLETE_REQUEST = "complete_request"
    GENERATE_REPORT = "generate_report"


class EntityKind(str, Enum):
    """Record kinds the Data Store persists."""
    LISTING = "listing"
    REQUEST = "request"
    IMPACT_RECORD = "impact_record"
    REPORT = "report"


# ─── Caller Identity ─────────────────────────────────────────────

@dataclass(frozen=True)
class Actor:
    """Explicit caller identity, passed into every service call."""
    user_id: UserId
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
