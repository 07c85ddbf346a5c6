"""
db/models/client.py

Client registry entry. Rows are created automatically the first time an
imported order references an unseen username.
"""

import uuid

from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Client(Base, TimestampMixin):
    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String, nullable=False)

    source: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Income source the client was first seen on",
    )

    __table_args__ = (UniqueConstraint("username", name="uq_clients_username"),)

    def __repr__(self) -> str:
        return f"<Client username={self.username!r} source={self.source!r}>"
