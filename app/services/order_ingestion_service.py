"""
app/services/order_ingestion_service.py

Service layer for order import: bulk CSV payloads and single rows.

Bulk flow per call:

    1. parse the payload into header + data rows
    2. normalize every row (missing-field / invalid-date / invalid-amount)
    3. reject identifiers already stored or accepted earlier in the payload
    4. commit all accepted rows with one bulk insert

Row-level problems never abort a call; they are reported per row. Only a
store failure at the commit step aborts, in which case nothing from the call
is persisted. A uniqueness conflict raised by the store at commit time (for
example a concurrent import of the same identifiers) is folded back into
per-row duplicate rejections.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import NoReturn

from sqlalchemy.orm import Session

from app.config import OrderImportSettings, get_order_import_settings
from app.domain.orders import (
    CandidateRow,
    IngestionResult,
    OrderCandidate,
    RejectionReason,
    RowOutcome,
    RowRejection,
    RowStatus,
)
from app.logging_utils import log_event
from app.mappers.order_column_mapper import OrderColumnMapper, OrderColumnMappingError
from app.parsers.tabular import TabularFormatError, parse_tabular
from app.repositories.errors import OrderConflictError, OrderStoreError
from app.repositories.order_repository import OrderRepository, OrderStore
from app.services.duplicate_detector import DuplicateDetector
from app.validators.order_row_validator import OrderRowValidator
from db.models.order import Order

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "An order with this ID already exists."


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class OrderImportPayloadError(ValueError):
    """
    Raised when a bulk payload cannot be processed at all.
    """

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict[str, object]:
        if self.details is not None:
            return self.details
        return {"message": str(self)}


class OrderRowValidationError(ValueError):
    """
    Raised by single-row import when the row is malformed.
    """

    def __init__(self, rejection: RowRejection) -> None:
        super().__init__(rejection.message)
        self.rejection = rejection


class DuplicateOrderError(RuntimeError):
    """
    Raised by single-row import when the identifier is already stored.
    """

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order with ID '{order_id}' already exists.")
        self.order_id = order_id


class OrderIngestionFailedError(RuntimeError):
    """
    Raised when the store fails; no order from the call was committed.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class OrderIngestionService:
    """
    Coordinates parsing, normalization, duplicate detection and commit.
    """

    def __init__(
        self,
        store: OrderStore,
        *,
        settings: OrderImportSettings | None = None,
        mapper: OrderColumnMapper | None = None,
        validator: OrderRowValidator | None = None,
        detector_factory: Callable[[OrderStore], DuplicateDetector] | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or OrderImportSettings()
        self._mapper = mapper or OrderColumnMapper()
        self._validator = validator or OrderRowValidator()
        self._detector_factory = detector_factory or (
            lambda order_store: DuplicateDetector(
                order_store,
                chunk_size=self._settings.lookup_chunk_size,
            )
        )

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def ingest_bulk(self, *, source: str, csv_text: str) -> IngestionResult:
        """
        Import every row of ``csv_text`` under income source ``source``.

        Returns outcomes in input row order. Raises OrderImportPayloadError
        for payload-level problems and OrderIngestionFailedError when the
        store fails.
        """

        source_label = self._require_source(source)
        rows = self._read_rows(source_label, csv_text)

        outcomes: list[RowOutcome | None] = [None] * len(rows)
        normalized: list[tuple[CandidateRow, OrderCandidate]] = []

        for row in rows:
            candidate, rejection = self._normalize(row)
            if rejection is not None:
                outcomes[row.row_index] = self._reject(row, rejection)
                continue
            normalized.append((row, candidate))

        detector = self._detector_factory(self._store)
        accepted_ids: set[str] = set()
        accepted: list[tuple[CandidateRow, OrderCandidate]] = []
        try:
            detector.prime(candidate.order_id for _, candidate in normalized)
            for row, candidate in normalized:
                if detector.is_duplicate(candidate.order_id, accepted_ids):
                    outcomes[row.row_index] = self._reject(
                        row,
                        RowRejection(
                            reason=RejectionReason.DUPLICATE_IDENTIFIER,
                            message=DUPLICATE_MESSAGE,
                            column="order id",
                            value=candidate.order_id,
                        ),
                        order_id=candidate.order_id,
                    )
                    continue
                accepted_ids.add(candidate.order_id)
                accepted.append((row, candidate))
                outcomes[row.row_index] = RowOutcome(
                    row_index=row.row_index,
                    line_number=row.line_number,
                    status=RowStatus.ACCEPTED,
                    order_id=candidate.order_id,
                )
        except OrderStoreError as exc:
            self._fail(source_label, "duplicate_check", exc)

        self._commit(source_label, accepted, outcomes)

        result = IngestionResult(outcomes=[outcome for outcome in outcomes if outcome is not None])
        log_event(
            logger,
            logging.INFO,
            "order_import_completed",
            source=source_label,
            total=result.total_rows,
            accepted=result.accepted_count,
            rejected=result.rejected_count,
        )
        return result

    # ------------------------------------------------------------------
    # Single row
    # ------------------------------------------------------------------

    def ingest_single(self, *, source: str, fields: Mapping[str, str | None]) -> Order:
        """
        Import one order given as a header → value map.

        Raises OrderRowValidationError, DuplicateOrderError or
        OrderIngestionFailedError.
        """

        source_label = self._require_source(source)
        mapping = self._mapper.resolve_mapping([key for key in fields if isinstance(key, str)])
        mapped = self._mapper.map_row(raw_row=fields, mapping=mapping)
        candidate, rejection = self._validator.normalize(
            mapped,
            source=source_label,
            default_order_type=self._settings.default_order_type,
        )
        if rejection is not None:
            raise OrderRowValidationError(rejection)

        try:
            if self._store.exists_by_identifier(candidate.order_id):
                raise DuplicateOrderError(candidate.order_id)
            self._store.insert_many([candidate])
            order = self._store.find_by_identifier(candidate.order_id)
        except OrderConflictError as exc:
            raise DuplicateOrderError(candidate.order_id) from exc
        except OrderStoreError as exc:
            self._fail(source_label, "single_import", exc)

        if order is None:
            raise OrderIngestionFailedError("Order was not found after insert.")

        log_event(
            logger,
            logging.INFO,
            "order_single_import_completed",
            source=source_label,
            order_id=candidate.order_id,
        )
        return order

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_source(self, source: str) -> str:
        label = (source or "").strip()
        if not label:
            raise OrderImportPayloadError("Income source is required.")
        return label

    def _read_rows(self, source: str, csv_text: str) -> list[CandidateRow]:
        try:
            payload = parse_tabular(csv_text or "")
            mapping = self._mapper.resolve_mapping(payload.headers).require_complete()
        except OrderColumnMappingError as exc:
            raise OrderImportPayloadError(str(exc), details=exc.to_dict()) from exc
        except TabularFormatError as exc:
            raise OrderImportPayloadError(str(exc)) from exc

        limit = self._settings.max_rows_per_import
        if len(payload.rows) > limit:
            raise OrderImportPayloadError(
                f"CSV contains {len(payload.rows)} orders; at most {limit} are allowed per import."
            )

        log_event(
            logger,
            logging.INFO,
            "order_import_started",
            source=source,
            rows=len(payload.rows),
            delimiter=payload.delimiter,
            column_matches=mapping.match_strategies,
        )

        return [
            CandidateRow(
                row_index=row.row_index,
                line_number=row.line_number,
                fields={
                    key: value
                    for key, value in self._mapper.map_row(raw_row=row.fields, mapping=mapping).items()
                    if value is not None
                },
                source=source,
            )
            for row in payload.rows
        ]

    def _normalize(self, row: CandidateRow) -> tuple[OrderCandidate | None, RowRejection | None]:
        return self._validator.normalize(
            row.fields,
            source=row.source,
            default_order_type=self._settings.default_order_type,
        )

    def _reject(
        self,
        row: CandidateRow,
        rejection: RowRejection,
        *,
        order_id: str | None = None,
    ) -> RowOutcome:
        if self._settings.log_rejections:
            log_event(
                logger,
                logging.WARNING,
                "order_import_row_rejected",
                row_index=row.row_index,
                line=row.line_number,
                reason=rejection.reason,
                column=rejection.column,
                value=rejection.value,
            )
        if order_id is None:
            raw_id = row.fields.get("order_id")
            order_id = raw_id.strip() if raw_id and raw_id.strip() else None
        return RowOutcome(
            row_index=row.row_index,
            line_number=row.line_number,
            status=RowStatus.REJECTED,
            order_id=order_id,
            reason=rejection.reason,
            message=rejection.message,
        )

    def _commit(
        self,
        source: str,
        accepted: list[tuple[CandidateRow, OrderCandidate]],
        outcomes: list[RowOutcome | None],
    ) -> None:
        pending = list(accepted)
        for _ in range(self._settings.max_commit_attempts):
            if not pending:
                return
            try:
                self._store.insert_many([candidate for _, candidate in pending])
                return
            except OrderConflictError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "order_import_conflicts_reconciled",
                    source=source,
                    conflicts=sorted(exc.order_ids),
                )
                pending = self._reconcile_conflicts(pending, exc.order_ids, outcomes)
            except OrderStoreError as exc:
                self._fail(source, "commit", exc)

        if pending:
            self._fail(
                source,
                "commit",
                OrderStoreError("Order identifiers kept conflicting on commit."),
            )

    def _reconcile_conflicts(
        self,
        pending: list[tuple[CandidateRow, OrderCandidate]],
        conflicting_ids: frozenset[str],
        outcomes: list[RowOutcome | None],
    ) -> list[tuple[CandidateRow, OrderCandidate]]:
        remaining: list[tuple[CandidateRow, OrderCandidate]] = []
        for row, candidate in pending:
            if candidate.order_id not in conflicting_ids:
                remaining.append((row, candidate))
                continue
            accepted_outcome = outcomes[row.row_index]
            outcomes[row.row_index] = replace(
                accepted_outcome,
                status=RowStatus.REJECTED,
                reason=RejectionReason.DUPLICATE_IDENTIFIER,
                message=DUPLICATE_MESSAGE,
            )
        return remaining

    def _fail(self, source: str, stage: str, exc: Exception) -> NoReturn:
        log_event(
            logger,
            logging.ERROR,
            "order_import_failed",
            source=source,
            stage=stage,
            error=str(exc),
        )
        raise OrderIngestionFailedError("Failed to import orders: the order store is unavailable.") from exc


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_order_ingestion_service(session: Session) -> OrderIngestionService:
    """
    Build the ingestion service around a request-scoped session.
    """

    settings = get_order_import_settings()
    return OrderIngestionService(
        OrderRepository(session, chunk_size=settings.lookup_chunk_size),
        settings=settings,
    )
