"""ORM Models - SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - FoodListing is the aggregate root; requests and the impact record hang off it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from foodloop.models.listing import FoodListing  # noqa: F401
from foodloop.models.donation_request import DonationRequest  # noqa: F401
from foodloop.models.impact_record import ImpactRecord  # noqa: F401
from foodloop.models.report import WasteReport  # noqa: F401
