"""
app/schemas package marker.
"""

from app.schemas.orders import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkOrderImportRequest,
    IngestionResultResponse,
    OrderCountSummaryResponse,
    OrderExistsResponse,
    OrderResponse,
    OrderUpdateRequest,
    RowOutcomeResponse,
    SingleOrderImportRequest,
)

__all__ = [
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "BulkOrderImportRequest",
    "IngestionResultResponse",
    "OrderCountSummaryResponse",
    "OrderExistsResponse",
    "OrderResponse",
    "OrderUpdateRequest",
    "RowOutcomeResponse",
    "SingleOrderImportRequest",
]
