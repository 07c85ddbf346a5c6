"""
app/services/order_analytics_service.py

Order count and revenue aggregation over a date range.

Each period is answered with one grouped query; the previous period is the
window of equal length ending the day before ``date_from``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.order import Order

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DailyOrderPoint:
    day: date
    orders: int
    revenue: Decimal


@dataclass(frozen=True)
class PeriodTotals:
    date_from: date
    date_to: date
    orders: int
    revenue: Decimal


@dataclass(frozen=True)
class OrderCountSummary:
    current: PeriodTotals
    previous: PeriodTotals
    daily: list[DailyOrderPoint] = field(default_factory=list)

    @property
    def order_growth_pct(self) -> float | None:
        if self.previous.orders == 0:
            return None
        return round((self.current.orders - self.previous.orders) / self.previous.orders * 100, 2)

    @property
    def revenue_growth_pct(self) -> float | None:
        if self.previous.revenue == 0:
            return None
        change = (self.current.revenue - self.previous.revenue) / self.previous.revenue * 100
        return round(float(change), 2)


class OrderAnalyticsService:
    """
    Read-only aggregation over stored orders. The caller owns the session.
    """

    def __init__(self, session: Session, *, max_range_days: int = 366) -> None:
        self._session = session
        self._max_range_days = max(1, max_range_days)

    def order_count_summary(
        self,
        date_from: date,
        date_to: date,
        *,
        source: str | None = None,
    ) -> OrderCountSummary:
        if date_from > date_to:
            raise ValueError("date_from must not be after date_to.")

        span = (date_to - date_from).days + 1
        if span > self._max_range_days:
            raise ValueError(f"Date range is limited to {self._max_range_days} days.")
        try:
            previous_to = date_from - timedelta(days=1)
            previous_from = previous_to - timedelta(days=span - 1)
        except OverflowError as exc:
            raise ValueError("Date range has no previous period to compare with.") from exc

        current_by_day = self._daily_totals(date_from, date_to, source)
        previous_by_day = self._daily_totals(previous_from, previous_to, source)

        daily = [
            DailyOrderPoint(
                day=day,
                orders=current_by_day.get(day, (0, _ZERO))[0],
                revenue=current_by_day.get(day, (0, _ZERO))[1],
            )
            for day in (date_from + timedelta(days=offset) for offset in range(span))
        ]

        return OrderCountSummary(
            current=self._totals(date_from, date_to, current_by_day),
            previous=self._totals(previous_from, previous_to, previous_by_day),
            daily=daily,
        )

    def _daily_totals(
        self,
        date_from: date,
        date_to: date,
        source: str | None,
    ) -> dict[date, tuple[int, Decimal]]:
        stmt = (
            select(
                Order.order_date,
                func.count(Order.id),
                func.coalesce(func.sum(Order.amount), 0),
            )
            .where(Order.order_date >= date_from, Order.order_date <= date_to)
            .group_by(Order.order_date)
        )
        if source:
            stmt = stmt.where(Order.source == source)

        totals: dict[date, tuple[int, Decimal]] = {}
        for day, count, revenue in self._session.execute(stmt).all():
            totals[day] = (int(count), Decimal(str(revenue)).quantize(_ZERO))
        return totals

    @staticmethod
    def _totals(
        date_from: date,
        date_to: date,
        by_day: dict[date, tuple[int, Decimal]],
    ) -> PeriodTotals:
        return PeriodTotals(
            date_from=date_from,
            date_to=date_to,
            orders=sum(count for count, _ in by_day.values()),
            revenue=sum((revenue for _, revenue in by_day.values()), _ZERO),
        )
