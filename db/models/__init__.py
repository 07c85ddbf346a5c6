"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.client import Client
from db.models.gig import Gig
from db.models.order import Order, OrderStatus

__all__ = [
    "Client",
    "Gig",
    "Order",
    "OrderStatus",
]
