"""Services Layer — descriptor tables, handler dispatch and resource handlers.

Invariants:
    - Handlers receive a RequestContext and return a HandlerResponse; no FastAPI types
    - Every descriptor name maps to exactly one handler coroutine

Design Decisions:
    - Thin routes delegate to services (ADR: impureim sandwich)
"""
