"""
app/domain package marker.
"""

from app.domain.orders import (
    CandidateRow,
    IngestionResult,
    OrderCandidate,
    OrderUpdate,
    RejectionReason,
    RowOutcome,
    RowRejection,
    RowStatus,
)

__all__ = [
    "CandidateRow",
    "IngestionResult",
    "OrderCandidate",
    "OrderUpdate",
    "RejectionReason",
    "RowOutcome",
    "RowRejection",
    "RowStatus",
]
