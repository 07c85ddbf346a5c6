"""
app/api/routers/analytics.py

Order analytics endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import get_analytics_settings
from app.schemas.orders import (
    DailyOrderPointResponse,
    OrderCountSummaryResponse,
    PeriodTotalsResponse,
)
from app.services.order_analytics_service import OrderAnalyticsService
from db.session import get_db

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/order-count", response_model=OrderCountSummaryResponse)
def order_count(
    date_from: date = Query(..., description="First day of the range (inclusive)"),
    date_to: date = Query(..., description="Last day of the range (inclusive)"),
    source: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> OrderCountSummaryResponse:
    """
    Order count and revenue for a date range, compared with the preceding
    period of the same length.
    """

    try:
        service = OrderAnalyticsService(db, max_range_days=get_analytics_settings().max_range_days)
        summary = service.order_count_summary(date_from, date_to, source=source)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return OrderCountSummaryResponse(
        current=PeriodTotalsResponse(**vars(summary.current)),
        previous=PeriodTotalsResponse(**vars(summary.previous)),
        order_growth_pct=summary.order_growth_pct,
        revenue_growth_pct=summary.revenue_growth_pct,
        daily=[
            DailyOrderPointResponse(day=point.day, orders=point.orders, revenue=point.revenue)
            for point in summary.daily
        ],
    )
