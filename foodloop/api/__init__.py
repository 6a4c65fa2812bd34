"""API Layer - FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (report export excepted)

Design Decisions:
    - Thin routes delegate to services; the actor comes from gateway headers
"""
