"""
app/services/duplicate_detector.py

Decides whether an external order identifier is already taken, either by a
stored order or by a row accepted earlier in the same import.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from app.repositories.order_repository import OrderStore


class DuplicateDetector:
    """
    Read-only duplicate check with a per-import cache of store answers.

    The coordinator owns the set of identifiers accepted in the current batch
    and passes it in; this class never records acceptances.
    """

    def __init__(self, store: OrderStore, *, chunk_size: int = 500) -> None:
        self._store = store
        self._chunk_size = max(1, chunk_size)
        self._checked: set[str] = set()
        self._existing: set[str] = set()

    def prime(self, identifiers: Iterable[str]) -> None:
        """
        Resolve store existence for many identifiers with batched queries.
        """

        pending = sorted({identifier for identifier in identifiers if identifier} - self._checked)
        for start in range(0, len(pending), self._chunk_size):
            chunk = pending[start : start + self._chunk_size]
            self._existing.update(self._store.existing_identifiers(chunk))
            self._checked.update(chunk)

    def exists_in_store(self, identifier: str) -> bool:
        if identifier not in self._checked:
            if self._store.exists_by_identifier(identifier):
                self._existing.add(identifier)
            self._checked.add(identifier)
        return identifier in self._existing

    def is_duplicate(self, identifier: str, accepted: Set[str] = frozenset()) -> bool:
        if identifier in accepted:
            return True
        return self.exists_in_store(identifier)
