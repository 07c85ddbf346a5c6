"""
app/api/routers/orders.py

Order import and order management endpoints.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Form, HTTPException, Query, UploadFile, status

from app.api.dependencies import get_csv_upload, get_order_ingestion_service, get_order_repository
from app.domain.orders import IngestionResult
from app.repositories.errors import OrderConflictError, OrderStoreError
from app.repositories.order_repository import OrderRepository
from app.schemas.orders import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkOrderImportRequest,
    IngestionResultResponse,
    OrderExistsResponse,
    OrderResponse,
    OrderUpdateRequest,
    RowOutcomeResponse,
    SingleOrderImportRequest,
)
from app.services.order_ingestion_service import (
    DuplicateOrderError,
    OrderImportPayloadError,
    OrderIngestionFailedError,
    OrderIngestionService,
    OrderRowValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


@router.post(
    "/import-bulk",
    response_model=IngestionResultResponse,
    status_code=status.HTTP_201_CREATED,
)
def import_bulk(
    body: BulkOrderImportRequest,
    ingestion_service: OrderIngestionService = Depends(get_order_ingestion_service),
) -> IngestionResultResponse:
    """
    Import a CSV payload. Per-row rejections are reported in the body; only a
    store failure produces a non-2xx response.
    """

    return _run_bulk_import(ingestion_service, source=body.source, csv_text=body.csv_content)


@router.post(
    "/import-bulk/upload",
    response_model=IngestionResultResponse,
    status_code=status.HTTP_201_CREATED,
)
def import_bulk_upload(
    source: str = Form(..., min_length=1),
    file: UploadFile = Depends(get_csv_upload),
    ingestion_service: OrderIngestionService = Depends(get_order_ingestion_service),
) -> IngestionResultResponse:
    try:
        csv_text = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 encoded.",
        ) from exc
    finally:
        file.file.close()

    return _run_bulk_import(ingestion_service, source=source, csv_text=csv_text)


@router.post(
    "/import-single",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def import_single(
    body: SingleOrderImportRequest,
    ingestion_service: OrderIngestionService = Depends(get_order_ingestion_service),
) -> OrderResponse:
    """
    Import one order. 409 when the order ID was already imported, 400 when
    the row is malformed.
    """

    try:
        order = ingestion_service.ingest_single(source=body.source, fields=body.order_data)
    except OrderImportPayloadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OrderRowValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": str(exc),
                "reason": exc.rejection.reason,
                "column": exc.rejection.column,
                "value": exc.rejection.value,
            },
        ) from exc
    except DuplicateOrderError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except OrderIngestionFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import order.",
        ) from exc

    return OrderResponse.model_validate(order)


def _run_bulk_import(
    ingestion_service: OrderIngestionService,
    *,
    source: str,
    csv_text: str,
) -> IngestionResultResponse:
    try:
        result = ingestion_service.ingest_bulk(source=source, csv_text=csv_text)
    except OrderImportPayloadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except OrderIngestionFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import orders.",
        ) from exc

    return _to_response(result)


def _to_response(result: IngestionResult) -> IngestionResultResponse:
    return IngestionResultResponse(
        total_rows=result.total_rows,
        accepted_count=result.accepted_count,
        rejected_count=result.rejected_count,
        outcomes=[
            RowOutcomeResponse(
                row_index=outcome.row_index,
                line_number=outcome.line_number,
                status=outcome.status,
                order_id=outcome.order_id,
                reason=outcome.reason,
                message=outcome.message,
            )
            for outcome in result.outcomes
        ],
    )


# ---------------------------------------------------------------------------
# Management
# ---------------------------------------------------------------------------


@router.get("", response_model=list[OrderResponse])
def list_orders(
    source: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    repository: OrderRepository = Depends(get_order_repository),
) -> list[OrderResponse]:
    try:
        orders = repository.list_orders(
            source=source,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
    except OrderStoreError as exc:
        logger.exception("Failed to list orders")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch orders.",
        ) from exc
    return [OrderResponse.model_validate(order) for order in orders]


@router.get("/exists/{order_id}", response_model=OrderExistsResponse)
def order_exists(
    order_id: str,
    repository: OrderRepository = Depends(get_order_repository),
) -> OrderExistsResponse:
    try:
        return OrderExistsResponse(exists=repository.exists_by_identifier(order_id))
    except OrderStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check order existence.",
        ) from exc


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_orders(
    body: BulkDeleteRequest,
    repository: OrderRepository = Depends(get_order_repository),
) -> BulkDeleteResponse:
    try:
        deleted = repository.delete_by_identifiers(body.order_ids)
    except OrderStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete orders.",
        ) from exc
    return BulkDeleteResponse(
        deleted_count=deleted,
        message=f"{deleted} orders deleted successfully.",
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    repository: OrderRepository = Depends(get_order_repository),
) -> OrderResponse:
    try:
        order = repository.find_by_identifier(order_id)
    except OrderStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch order.",
        ) from exc
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")
    return OrderResponse.model_validate(order)


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: str,
    body: OrderUpdateRequest,
    repository: OrderRepository = Depends(get_order_repository),
) -> OrderResponse:
    """
    Replace an order's editable fields. Cancelled orders need at least one
    cancellation reason.
    """

    try:
        order = repository.update_order(order_id, body.to_update())
    except OrderConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Order with ID '{body.order_id}' already exists.",
        ) from exc
    except OrderStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update order.",
        ) from exc
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}")
def delete_order(
    order_id: str,
    repository: OrderRepository = Depends(get_order_repository),
) -> dict[str, str]:
    try:
        deleted = repository.delete_by_identifier(order_id)
    except OrderStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete order.",
        ) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")
    return {"message": "Order deleted successfully."}
