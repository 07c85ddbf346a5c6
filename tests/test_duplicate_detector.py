from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from app.domain.orders import OrderCandidate
from app.repositories.errors import OrderPersistenceError
from app.services.duplicate_detector import DuplicateDetector


def _stored(order_id: str) -> OrderCandidate:
    return OrderCandidate(
        order_id=order_id,
        order_date=date(2024, 1, 1),
        gig_name="Gig",
        client_username="client",
        amount=Decimal("1.00"),
        source="Fiverr",
    )


def test_prime_batches_lookups(store_factory) -> None:
    store = store_factory(existing=[_stored("A2")])
    detector = DuplicateDetector(store, chunk_size=2)

    detector.prime(["A1", "A2", "A3", "A1", ""])

    assert store.batch_calls == [["A1", "A2"], ["A3"]]
    assert detector.is_duplicate("A2")
    assert not detector.is_duplicate("A1")
    assert store.exists_calls == []


def test_unprimed_identifier_hits_store_once(store_factory) -> None:
    store = store_factory(existing=[_stored("B1")])
    detector = DuplicateDetector(store)

    assert detector.exists_in_store("B1")
    assert detector.exists_in_store("B1")
    assert store.exists_calls == ["B1"]


def test_batch_accepted_set_counts_as_duplicate(fake_store) -> None:
    detector = DuplicateDetector(fake_store)

    assert detector.is_duplicate("C1", {"C1"})
    assert fake_store.exists_calls == []


def test_store_error_propagates(fake_store) -> None:
    def _boom(order_ids):
        raise OrderPersistenceError("down")

    fake_store.existing_identifiers = _boom
    detector = DuplicateDetector(fake_store)

    with pytest.raises(OrderPersistenceError):
        detector.prime(["A1"])
