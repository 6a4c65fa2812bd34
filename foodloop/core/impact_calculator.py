"""Impact Calculator - derives CO2-avoided and meals-provided from canonical mass.

Invariants:
    - co2_avoided = mass * CO2_LBS_PER_FOOD_LB (3.8)
    - meals_provided = floor(mass * MEALS_PER_FOOD_LB (1.5))
    - Negative or non-finite mass raises DomainError; zero is legal

Design Decisions:
    - Returns a frozen dataclass, not a dict: figures are immutable once derived
    - impact_for_quantity composes normalizer + calculator for the completion step
"""

import math
from dataclasses import dataclass

from foodloop.core.domain_types import CanonicalMass, QuantityUnit
from foodloop.core.errors import DomainError
from foodloop.core.unit_normalizer import to_canonical_mass


CO2_LBS_PER_FOOD_LB: float = 3.8
MEALS_PER_FOOD_LB: float = 1.5


@dataclass(frozen=True)
class ImpactFigures:
    """Derived impact of one donation."""
    food_saved_lbs: float
    co2_avoided: float
    meals_provided: int


def compute_impact(canonical_mass: float) -> ImpactFigures:
    """Derive impact figures from canonical mass. Pure."""
    if not math.isfinite(canonical_mass):
        raise DomainError(
            f"Canonical mass must be finite, got {canonical_mass}", canonical_mass,
        )
    if canonical_mass < 0:
        raise DomainError(
            f"Canonical mass must be non-negative, got {canonical_mass}",
            canonical_mass,
        )
    return ImpactFigures(
        food_saved_lbs=canonical_mass,
        co2_avoided=canonical_mass * CO2_LBS_PER_FOOD_LB,
        meals_provided=math.floor(canonical_mass * MEALS_PER_FOOD_LB),
    )


def impact_for_quantity(quantity: float, unit: str | QuantityUnit) -> ImpactFigures:
    """Normalize a listing quantity and derive its impact."""
    mass: CanonicalMass = to_canonical_mass(quantity, unit)
    return compute_impact(mass)
