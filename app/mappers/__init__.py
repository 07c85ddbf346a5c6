"""
app/mappers package marker.
"""

from app.mappers.order_column_mapper import (
    ORDER_FIELDS,
    REQUIRED_ORDER_FIELDS,
    ColumnMapping,
    OrderColumnMapper,
    OrderColumnMappingError,
)

__all__ = [
    "ORDER_FIELDS",
    "REQUIRED_ORDER_FIELDS",
    "ColumnMapping",
    "OrderColumnMapper",
    "OrderColumnMappingError",
]
