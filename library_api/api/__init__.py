"""API Layer — FastAPI routes, the Basic guard and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to the action table and dispatch (ADR: impureim sandwich)
"""
