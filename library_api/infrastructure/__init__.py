"""Infrastructure Layer — database access, repositories and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Repositories are the only code that issues queries

Design Decisions:
    - Repositories expose the collaborator contract (get/list/exists/add/update/persist)
      so handlers never touch SQLAlchemy directly
"""
