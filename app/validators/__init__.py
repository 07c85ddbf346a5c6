"""
app/validators package marker.
"""

from app.validators.order_row_validator import OrderRowValidator, parse_amount, parse_order_date

__all__ = [
    "OrderRowValidator",
    "parse_amount",
    "parse_order_date",
]
