"""
app/api/routers package marker.
"""

from app.api.routers.analytics import router as analytics_router
from app.api.routers.orders import router as orders_router

__all__ = [
    "analytics_router",
    "orders_router",
]
