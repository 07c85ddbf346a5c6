"""
db/models/order.py

Order model: one sale imported from an income source.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, Float, Index, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin

ORDER_ID_UNIQUE_CONSTRAINT = "uq_orders_order_id"


class OrderStatus:
    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    CANCELLED = "Cancelled"

    ALL: tuple[str, ...] = (COMPLETED, IN_PROGRESS, CANCELLED)


class Order(Base, CreatedAtMixin):
    """
    Persisted order.

    ``order_id`` is the identifier assigned by the originating source and is
    unique across all orders; ``id`` is the internal identifier assigned on
    insert. Ingestion never mutates an order after it is created.
    """

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    order_id: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="External order identifier from the income source",
    )
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    gig_name: Mapped[str] = mapped_column(String, nullable=False)
    client_username: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2, asdecimal=True),
        nullable=False,
    )
    source: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Income source (marketplace / channel) label",
    )
    order_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="Order",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=OrderStatus.COMPLETED,
    )
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    cancellation_reasons: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("order_id", name=ORDER_ID_UNIQUE_CONSTRAINT),
        Index("ix_orders_order_date", "order_date"),
        Index("ix_orders_source", "source"),
        Index("ix_orders_client_username", "client_username"),
    )

    def __repr__(self) -> str:
        return f"<Order order_id={self.order_id!r} date={self.order_date} amount={self.amount}>"
