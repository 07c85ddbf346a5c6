"""
app/schemas/orders.py

Request and response schemas for order endpoints.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from app.domain.orders import OrderUpdate
from db.models.order import OrderStatus


class BulkOrderImportRequest(BaseModel):
    source: str = Field(..., min_length=1, description="Income source the orders belong to")
    csv_content: str = Field(..., min_length=1, description="CSV text with a header row")


class SingleOrderImportRequest(BaseModel):
    source: str = Field(..., min_length=1)
    order_data: dict[str, str] = Field(
        ...,
        description="Column → value map, e.g. {'date': ..., 'order id': ..., 'amount': ...}",
    )


class OrderUpdateRequest(BaseModel):
    order_id: str = Field(..., min_length=1, description="New external order identifier")
    order_date: date
    gig_name: str = Field(..., min_length=1)
    client_username: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    source: str = Field(..., min_length=1)
    order_type: str = Field(default="Order", min_length=1, max_length=32)
    status: str = OrderStatus.COMPLETED
    rating: float | None = Field(default=None, ge=0, le=5)
    cancellation_reasons: list[str] = Field(default_factory=list)
    custom_cancellation_reason: str | None = None

    @model_validator(mode="after")
    def _check_status(self) -> "OrderUpdateRequest":
        if self.status not in OrderStatus.ALL:
            raise ValueError(f"status must be one of: {', '.join(OrderStatus.ALL)}.")
        if self.status == OrderStatus.CANCELLED and not self.final_cancellation_reasons():
            raise ValueError("At least one cancellation reason must be provided for cancelled orders.")
        return self

    def final_cancellation_reasons(self) -> list[str]:
        reasons = [reason.strip() for reason in self.cancellation_reasons if reason.strip()]
        custom = (self.custom_cancellation_reason or "").strip()
        if custom:
            reasons.append(custom)
        return reasons

    def to_update(self) -> OrderUpdate:
        cancelled = self.status == OrderStatus.CANCELLED
        return OrderUpdate(
            order_id=self.order_id.strip(),
            order_date=self.order_date,
            gig_name=self.gig_name.strip(),
            client_username=self.client_username.strip(),
            amount=self.amount,
            source=self.source.strip(),
            status=self.status,
            order_type=self.order_type.strip(),
            rating=self.rating,
            cancellation_reasons=self.final_cancellation_reasons() if cancelled else None,
        )


class BulkDeleteRequest(BaseModel):
    order_ids: list[str] = Field(..., min_length=1)


class RowOutcomeResponse(BaseModel):
    row_index: int = Field(..., ge=0)
    line_number: int = Field(..., ge=1)
    status: str
    order_id: str | None = None
    reason: str | None = None
    message: str | None = None


class IngestionResultResponse(BaseModel):
    total_rows: int = Field(..., ge=0)
    accepted_count: int = Field(..., ge=0)
    rejected_count: int = Field(..., ge=0)
    outcomes: list[RowOutcomeResponse] = Field(default_factory=list)


class OrderResponse(BaseModel):
    id: uuid.UUID
    order_id: str
    order_date: date
    gig_name: str
    client_username: str
    amount: Decimal
    source: str
    order_type: str
    status: str
    rating: float | None = None
    cancellation_reasons: list[str] | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class OrderExistsResponse(BaseModel):
    exists: bool


class BulkDeleteResponse(BaseModel):
    deleted_count: int = Field(..., ge=0)
    message: str


class DailyOrderPointResponse(BaseModel):
    day: date
    orders: int
    revenue: Decimal


class PeriodTotalsResponse(BaseModel):
    date_from: date
    date_to: date
    orders: int
    revenue: Decimal


class OrderCountSummaryResponse(BaseModel):
    current: PeriodTotalsResponse
    previous: PeriodTotalsResponse
    order_growth_pct: float | None = None
    revenue_growth_pct: float | None = None
    daily: list[DailyOrderPointResponse] = Field(default_factory=list)
