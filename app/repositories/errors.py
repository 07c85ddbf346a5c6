"""
Order store exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable


class OrderStoreError(Exception):
    """Base exception for order store failures."""


class OrderConflictError(OrderStoreError):
    """
    Raised when an insert violates external order identifier uniqueness.

    Nothing from the failed insert is committed.
    """

    def __init__(self, order_ids: Iterable[str], message: str | None = None) -> None:
        self.order_ids = frozenset(order_ids)
        super().__init__(
            message or f"{len(self.order_ids)} order identifier(s) already exist: "
            + ", ".join(sorted(self.order_ids))
        )


class OrderPersistenceError(OrderStoreError):
    """Raised when the store cannot complete a read or write."""
