"""Database Metadata — declarative Base shared by models and alembic.

Invariants:
    - Single metadata object for the whole schema
"""
