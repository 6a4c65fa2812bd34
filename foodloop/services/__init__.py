"""Services Layer - the lifecycle engine and the report aggregator.

Invariants:
    - Services depend on the DataStore protocol, never on SQLAlchemy directly
    - Business rules come from core/; services only sequence IO around them
"""
