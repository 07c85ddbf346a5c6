"""
app/validators/order_row_validator.py

Row-level normalization for order imports.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.orders import OrderCandidate, RejectionReason, RowRejection
from app.mappers.order_column_mapper import FIELD_LABELS, REQUIRED_ORDER_FIELDS

DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
)

CURRENCY_SYMBOLS = "$€£¥₹"
_THOUSANDS_PATTERN = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")

AMOUNT_QUANTUM = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


class OrderRowValidator:
    """
    Turns one mapped import row into a typed order candidate or a rejection.

    Pure: performs no I/O.
    """

    def is_completely_empty_row(self, row: Mapping[str, Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row.values())

    def normalize(
        self,
        mapped_row: Mapping[str, str | None],
        *,
        source: str,
        default_order_type: str = "Order",
    ) -> tuple[OrderCandidate | None, RowRejection | None]:
        """
        Validate and normalize one mapped row.

        When a row has several problems the reported reason follows the order
        missing-field, invalid-date, invalid-amount.
        """

        if self.is_completely_empty_row(mapped_row):
            return None, RowRejection(
                reason=RejectionReason.MISSING_FIELD,
                message="Row is blank.",
            )

        missing = [name for name in REQUIRED_ORDER_FIELDS if self._is_blank(mapped_row.get(name))]
        if missing:
            labels = ", ".join(FIELD_LABELS[name] for name in missing)
            return None, RowRejection(
                reason=RejectionReason.MISSING_FIELD,
                message=f"Required value is missing: {labels}.",
                column=FIELD_LABELS[missing[0]],
            )

        raw_date = str(mapped_row["date"]).strip()
        order_date = parse_order_date(raw_date)
        if order_date is None:
            return None, RowRejection(
                reason=RejectionReason.INVALID_DATE,
                message="Invalid date format.",
                column=FIELD_LABELS["date"],
                value=raw_date,
            )

        raw_amount = str(mapped_row["amount"]).strip()
        amount = parse_amount(raw_amount)
        if amount is None:
            return None, RowRejection(
                reason=RejectionReason.INVALID_AMOUNT,
                message="Amount must be a non-negative number with at most two decimal places.",
                column=FIELD_LABELS["amount"],
                value=raw_amount,
            )

        order_type = self._parse_optional_string(mapped_row.get("order_type")) or default_order_type

        return (
            OrderCandidate(
                order_id=str(mapped_row["order_id"]).strip(),
                order_date=order_date,
                gig_name=str(mapped_row["gig_name"]).strip(),
                client_username=str(mapped_row["client_username"]).strip(),
                amount=amount,
                source=source.strip(),
                order_type=order_type,
            ),
            None,
        )

    def _parse_optional_string(self, value: str | None) -> str | None:
        if self._is_blank(value):
            return None
        return str(value).strip()

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""


def parse_order_date(raw: str) -> date | None:
    """
    Parse an ISO date/datetime or one of DATE_FORMATS; None when unparseable.
    """

    if not raw:
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def parse_amount(raw: str) -> Decimal | None:
    """
    Parse a money amount into a two-place Decimal; None when invalid.

    Accepts a leading currency symbol and comma thousands separators.
    Rejects negatives, non-finite values and more than two decimal places.
    """

    text = raw.strip()
    if text[:1] and text[0] in CURRENCY_SYMBOLS:
        text = text[1:].strip()
    if "," in text:
        if not _THOUSANDS_PATTERN.match(text):
            return None
        text = text.replace(",", "")

    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        return None

    if not value.is_finite() or value < 0 or value > MAX_AMOUNT:
        return None
    exponent = value.as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2 and value != value.quantize(AMOUNT_QUANTUM):
        return None
    return abs(value).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
