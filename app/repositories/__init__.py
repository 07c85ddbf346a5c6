"""
app/repositories package marker.
"""

from app.repositories.errors import OrderConflictError, OrderPersistenceError, OrderStoreError
from app.repositories.order_repository import OrderRepository, OrderStore

__all__ = [
    "OrderConflictError",
    "OrderPersistenceError",
    "OrderRepository",
    "OrderStore",
    "OrderStoreError",
]
