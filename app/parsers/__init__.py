"""
app/parsers package marker.
"""

from app.parsers.tabular import TabularFormatError, TabularPayload, TabularRow, parse_tabular

__all__ = [
    "TabularFormatError",
    "TabularPayload",
    "TabularRow",
    "parse_tabular",
]
