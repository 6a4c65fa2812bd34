"""Infrastructure Layer - database session management, the SQL Data Store, logging.

Invariants:
    - Implements the protocols declared in core/repository_protocols.py
    - SQLAlchemy exceptions never escape this package unmapped

Design Decisions:
    - Shell owns all IO; core stays pure
"""
