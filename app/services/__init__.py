"""
app/services package marker.
"""

from app.services.duplicate_detector import DuplicateDetector
from app.services.order_analytics_service import OrderAnalyticsService, OrderCountSummary
from app.services.order_ingestion_service import (
    DuplicateOrderError,
    OrderImportPayloadError,
    OrderIngestionFailedError,
    OrderIngestionService,
    OrderRowValidationError,
    build_order_ingestion_service,
)

__all__ = [
    "DuplicateDetector",
    "DuplicateOrderError",
    "OrderAnalyticsService",
    "OrderCountSummary",
    "OrderImportPayloadError",
    "OrderIngestionFailedError",
    "OrderIngestionService",
    "OrderRowValidationError",
    "build_order_ingestion_service",
]
