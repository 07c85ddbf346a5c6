"""
db/models/gig.py

Gig (sellable listing) registered under an income source.
"""

import uuid

from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin


class Gig(Base, CreatedAtMixin):
    __tablename__ = "gigs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (UniqueConstraint("source", "name", name="uq_gigs_source_name"),)

    def __repr__(self) -> str:
        return f"<Gig source={self.source!r} name={self.name!r}>"
