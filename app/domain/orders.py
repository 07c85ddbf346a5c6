"""
app/domain/orders.py

Domain models used by the order ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


class RejectionReason:
    MISSING_FIELD = "missing-field"
    INVALID_DATE = "invalid-date"
    INVALID_AMOUNT = "invalid-amount"
    DUPLICATE_IDENTIFIER = "duplicate-identifier"


class RowStatus:
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CandidateRow:
    """
    One raw data row of an import payload, before normalization.
    """

    row_index: int
    line_number: int
    fields: dict[str, str]
    source: str


@dataclass(frozen=True)
class OrderCandidate:
    """
    Typed order prepared for persistence.
    """

    order_id: str
    order_date: date
    gig_name: str
    client_username: str
    amount: Decimal
    source: str
    order_type: str = "Order"

    def to_row(self) -> dict[str, str]:
        """
        Serialize back to import column form (ISO date, two-decimal amount).
        """

        return {
            "date": self.order_date.isoformat(),
            "order id": self.order_id,
            "gig name": self.gig_name,
            "client username": self.client_username,
            "amount": f"{self.amount:.2f}",
            "type": self.order_type,
        }


@dataclass(frozen=True)
class RowRejection:
    """
    Why one row was not accepted.
    """

    reason: str
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class RowOutcome:
    row_index: int
    line_number: int
    status: str
    order_id: str | None = None
    reason: str | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == RowStatus.ACCEPTED


@dataclass(frozen=True)
class IngestionResult:
    """
    Per-call ingestion report. Counts always match the outcome list.
    """

    outcomes: list[RowOutcome] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.outcomes) - self.accepted_count

    @property
    def total_rows(self) -> int:
        return len(self.outcomes)


@dataclass(frozen=True)
class OrderUpdate:
    """
    Full replacement of an order's editable fields.

    ``cancellation_reasons`` is only kept for cancelled orders.
    """

    order_id: str
    order_date: date
    gig_name: str
    client_username: str
    amount: Decimal
    source: str
    status: str
    order_type: str = "Order"
    rating: float | None = None
    cancellation_reasons: list[str] | None = None
