"""Author ORM — the aggregate root that owns books.

Invariants:
    - id is a UUID primary key (client-side default)
    - first_name/last_name are required, at most 150 characters
    - version_id increments on every UPDATE; a flush against a stale version fails

Design Decisions:
    - version_id_col gives optimistic concurrency without a separate lock table
    - No books collection on Author: nothing reads it, and an unloaded collection in
      async context would lazy-load on access
"""

import uuid

from sqlalchemy import Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from library_api.db.base import Base


class Author(Base):
    """A book author."""
    __tablename__ = "authors"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    first_name: Mapped[str] = mapped_column(String(150), nullable=False)
    last_name: Mapped[str] = mapped_column(String(150), nullable=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
