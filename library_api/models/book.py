"""Book ORM — scoped by author_id; cascades away with its author.

Invariants:
    - title required, at most 150 characters; description at most 2500
    - amount_of_pages optional (only the page-count creation shape sets it)
    - author is eagerly loaded (selectin): every book representation needs the name

Design Decisions:
    - ondelete=CASCADE at the FK: database enforces cleanup, no ORM collection needed
"""

import uuid

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.base import Base
from library_api.models.author import Author


class Book(Base):
    """A book written by one author."""
    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("authors.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(String(2500), nullable=True)
    amount_of_pages: Mapped[int | None] = mapped_column(Integer, nullable=True)

    author: Mapped[Author] = relationship(Author, lazy="selectin")
