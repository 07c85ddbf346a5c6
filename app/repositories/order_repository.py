"""
app/repositories/order_repository.py

Persistence layer for orders, plus the client and gig registries that imports
keep up to date.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from datetime import date
from typing import Any, Protocol

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.orders import OrderCandidate, OrderUpdate
from app.repositories.errors import OrderConflictError, OrderPersistenceError
from db.models.client import Client
from db.models.gig import Gig
from db.models.order import Order

_DEFAULT_CHUNK_SIZE = 500


class OrderStore(Protocol):
    """
    Operations the ingestion coordinator needs from order persistence.
    """

    def exists_by_identifier(self, order_id: str) -> bool:
        ...

    def existing_identifiers(self, order_ids: Collection[str]) -> set[str]:
        ...

    def find_by_identifier(self, order_id: str) -> Order | None:
        ...

    def insert_many(self, candidates: Sequence[OrderCandidate]) -> int:
        ...


def _chunks(values: Sequence[Any], size: int) -> Iterable[Sequence[Any]]:
    step = max(1, size)
    for start in range(0, len(values), step):
        yield values[start : start + step]


class OrderRepository:
    """
    SQLAlchemy-backed order store. The caller owns the session lifecycle.
    """

    def __init__(self, session: Session, *, chunk_size: int = _DEFAULT_CHUNK_SIZE) -> None:
        self._session = session
        self._chunk_size = max(1, chunk_size)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def exists_by_identifier(self, order_id: str) -> bool:
        stmt = select(func.count()).select_from(Order).where(Order.order_id == order_id)
        try:
            return bool(self._session.scalar(stmt))
        except SQLAlchemyError as exc:
            raise OrderPersistenceError("Failed to check order existence.") from exc

    def existing_identifiers(self, order_ids: Collection[str]) -> set[str]:
        """
        Return the subset of ``order_ids`` already stored, one query per chunk.
        """

        unique_ids = sorted(set(order_ids))
        found: set[str] = set()
        try:
            for chunk in _chunks(unique_ids, self._chunk_size):
                stmt = select(Order.order_id).where(Order.order_id.in_(chunk))
                found.update(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise OrderPersistenceError("Failed to look up existing orders.") from exc
        return found

    def find_by_identifier(self, order_id: str) -> Order | None:
        stmt = select(Order).where(Order.order_id == order_id)
        try:
            return self._session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise OrderPersistenceError("Failed to load order.") from exc

    def list_orders(
        self,
        *,
        source: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Order]:
        """
        Orders newest first, optionally filtered by source and date range.
        """

        stmt = select(Order)
        if source:
            stmt = stmt.where(Order.source == source)
        if date_from is not None:
            stmt = stmt.where(Order.order_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(Order.order_date <= date_to)
        stmt = (
            stmt.order_by(Order.order_date.desc(), Order.created_at.desc(), Order.order_id)
            .limit(max(1, limit))
            .offset(max(0, offset))
        )
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise OrderPersistenceError("Failed to list orders.") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_many(self, candidates: Sequence[OrderCandidate]) -> int:
        """
        Insert all candidates in one transaction and commit.

        Unseen clients and gigs are registered in the same transaction. On a
        uniqueness violation of the external identifier the whole transaction
        is rolled back and OrderConflictError names the identifiers that
        already exist; nothing from this call is persisted.
        """

        if not candidates:
            return 0

        payloads = [
            {
                "order_id": candidate.order_id,
                "order_date": candidate.order_date,
                "gig_name": candidate.gig_name,
                "client_username": candidate.client_username,
                "amount": candidate.amount,
                "source": candidate.source,
                "order_type": candidate.order_type,
            }
            for candidate in candidates
        ]

        try:
            self._register_clients(candidates)
            self._register_gigs(candidates)
            for chunk in _chunks(payloads, self._chunk_size):
                self._session.execute(insert(Order), list(chunk))
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            conflicts = self._conflicting_identifiers(candidates)
            if conflicts:
                raise OrderConflictError(conflicts) from exc
            raise OrderPersistenceError("Order insert violated a store constraint.") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise OrderPersistenceError("Failed to persist orders.") from exc

        return len(payloads)

    def update_order(self, order_id: str, update: OrderUpdate) -> Order | None:
        """
        Replace the editable fields of one order and commit.

        Returns None when no order has ``order_id``. Renaming onto an
        identifier that is already taken raises OrderConflictError.
        """

        order = self.find_by_identifier(order_id)
        if order is None:
            return None

        order.order_id = update.order_id
        order.order_date = update.order_date
        order.gig_name = update.gig_name
        order.client_username = update.client_username
        order.amount = update.amount
        order.source = update.source
        order.order_type = update.order_type
        order.status = update.status
        order.rating = update.rating
        order.cancellation_reasons = update.cancellation_reasons
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise OrderConflictError([update.order_id]) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise OrderPersistenceError("Failed to update order.") from exc

        self._session.refresh(order)
        return order

    def delete_by_identifier(self, order_id: str) -> bool:
        return self.delete_by_identifiers([order_id]) == 1

    def delete_by_identifiers(self, order_ids: Collection[str]) -> int:
        unique_ids = sorted({order_id for order_id in order_ids if order_id})
        if not unique_ids:
            return 0

        deleted = 0
        try:
            for chunk in _chunks(unique_ids, self._chunk_size):
                result = self._session.execute(
                    delete(Order).where(Order.order_id.in_(chunk)),
                    execution_options={"synchronize_session": False},
                )
                deleted += result.rowcount or 0
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise OrderPersistenceError("Failed to delete orders.") from exc
        return deleted

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _conflicting_identifiers(self, candidates: Sequence[OrderCandidate]) -> set[str]:
        seen: set[str] = set()
        repeated: set[str] = set()
        for candidate in candidates:
            if candidate.order_id in seen:
                repeated.add(candidate.order_id)
            seen.add(candidate.order_id)
        return repeated | self.existing_identifiers(seen)

    def _register_clients(self, candidates: Sequence[OrderCandidate]) -> None:
        first_source: dict[str, str] = {}
        for candidate in candidates:
            first_source.setdefault(candidate.client_username, candidate.source)

        rows = [{"username": username, "source": source} for username, source in first_source.items()]
        self._insert_ignoring_conflicts(Client, rows, index_elements=["username"])

    def _register_gigs(self, candidates: Sequence[OrderCandidate]) -> None:
        wanted = sorted({(candidate.source, candidate.gig_name) for candidate in candidates})
        rows = [{"source": source, "name": name} for source, name in wanted]
        self._insert_ignoring_conflicts(Gig, rows, index_elements=["source", "name"])

    def _insert_ignoring_conflicts(
        self,
        model: type[Client] | type[Gig],
        rows: Sequence[dict[str, Any]],
        *,
        index_elements: list[str],
    ) -> None:
        """
        Insert registry rows, leaving rows that another writer already
        committed untouched.
        """

        if not rows:
            return

        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            insert_factory = postgresql_insert
        elif dialect == "sqlite":
            insert_factory = sqlite_insert
        else:
            raise OrderPersistenceError(f"Unsupported order store dialect: {dialect}.")

        for chunk in _chunks(rows, self._chunk_size):
            stmt = insert_factory(model).on_conflict_do_nothing(index_elements=index_elements)
            self._session.execute(stmt, list(chunk))
