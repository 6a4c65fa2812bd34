"""Unit Normalizer - converts a (quantity, unit) pair into canonical mass (pounds).

Invariants:
    - Pure and deterministic: same input, same output, no side effects
    - Total over QuantityUnit; any other tag raises UnsupportedUnitError
    - Monotonic in quantity for every unit (all factors are positive)

Design Decisions:
    - Conversion factors live in one table (LBS_PER_UNIT): single source of truth
      shared by the impact calculator and tests
    - servings/items use fixed average weights; they are estimates, not measurements
"""

from foodloop.core.domain_types import CanonicalMass, QuantityUnit
from foodloop.core.errors import UnsupportedUnitError


LBS_PER_UNIT: dict[QuantityUnit, float] = {
    QuantityUnit.LBS: 1.0,
    QuantityUnit.KG: 2.20462,
    QuantityUnit.SERVINGS: 0.5,
    QuantityUnit.ITEMS: 0.75,
}


def parse_unit(unit: str | QuantityUnit) -> QuantityUnit:
    """Coerce a unit tag to QuantityUnit or raise UnsupportedUnitError."""
    if isinstance(unit, QuantityUnit):
        return unit
    try:
        return QuantityUnit(unit)
    except ValueError:
        raise UnsupportedUnitError(str(unit))


def to_canonical_mass(quantity: float, unit: str | QuantityUnit) -> CanonicalMass:
    """Convert quantity in `unit` to pounds-equivalent canonical mass."""
    parsed = parse_unit(unit)
    if parsed == QuantityUnit.LBS:
        return CanonicalMass(float(quantity))
    return CanonicalMass(quantity * LBS_PER_UNIT[parsed])
