"""
app/mappers/order_column_mapper.py

Resolves import headers onto canonical order fields.

Exports from different marketplaces label the same column differently
("Order ID", "order_id", "Order #"), so headers are matched on a normalized
form, then through aliases, then by fuzzy similarity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import Any, Mapping, Sequence

from app.parsers.tabular import TabularFormatError

ORDER_FIELDS: tuple[str, ...] = (
    "date",
    "order_id",
    "gig_name",
    "client_username",
    "amount",
    "order_type",
)

REQUIRED_ORDER_FIELDS: tuple[str, ...] = (
    "date",
    "order_id",
    "gig_name",
    "client_username",
    "amount",
)

# Column names as they appear in the import guidelines and in error messages.
FIELD_LABELS: dict[str, str] = {
    "date": "date",
    "order_id": "order id",
    "gig_name": "gig name",
    "client_username": "client username",
    "amount": "amount",
    "order_type": "type",
}

DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("order date", "ordered at", "created at", "purchase date"),
    "order_id": ("order id", "order", "order #", "order number", "order no", "id"),
    "gig_name": ("gig name", "gig", "item", "item name", "service", "listing"),
    "client_username": ("client username", "client", "username", "buyer", "buyer username", "customer"),
    "amount": ("price", "total", "earnings", "revenue", "order amount"),
    "order_type": ("type", "order type", "kind"),
}


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum() or ch == "#")


@dataclass(frozen=True)
class ColumnMappingErrorDetail:
    code: str
    message: str
    canonical_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] = field(default_factory=dict)


class OrderColumnMappingError(TabularFormatError):
    """
    Raised when the header row cannot supply every required order field.
    """

    def __init__(self, *, message: str, errors: Sequence[ColumnMappingErrorDetail]) -> None:
        super().__init__(message)
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, object]:
        return {
            "message": str(self),
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "canonical_field": error.canonical_field,
                    "source_column": error.source_column,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


@dataclass(frozen=True)
class ColumnMapping:
    """
    Resolved canonical-field to source-header mapping.
    """

    field_to_source: dict[str, str]
    source_headers: tuple[str, ...]
    match_strategies: dict[str, str]

    @property
    def missing_required(self) -> tuple[str, ...]:
        return tuple(name for name in REQUIRED_ORDER_FIELDS if name not in self.field_to_source)

    def require_complete(self) -> "ColumnMapping":
        missing = self.missing_required
        if not missing:
            return self

        labels = ", ".join(FIELD_LABELS[name] for name in missing)
        raise OrderColumnMappingError(
            message=f"CSV is missing required columns: {labels}.",
            errors=[
                ColumnMappingErrorDetail(
                    code="required_column_missing",
                    message=f"No column found for '{FIELD_LABELS[name]}'.",
                    canonical_field=name,
                    context={"source_headers": list(self.source_headers)},
                )
                for name in missing
            ],
        )


class OrderColumnMapper:
    """
    Maps raw import rows onto canonical order fields.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Sequence[str]] | None = None,
        fuzzy_threshold: float = 0.86,
    ) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            canonical: tuple(values)
            for canonical, values in (aliases or DEFAULT_COLUMN_ALIASES).items()
        }
        self._fuzzy_threshold = max(0.0, min(1.0, fuzzy_threshold))

    def resolve_mapping(self, headers: Sequence[str]) -> ColumnMapping:
        """
        Resolve canonical fields against the given headers.

        Exact and alias matches are assigned for every field before any fuzzy
        match is attempted, so a fuzzy guess never takes a header that an
        exact match needs.
        """

        source_headers = tuple(header for header in headers if header and header.strip())
        normalized_lookup: dict[str, str] = {}
        for header in source_headers:
            normalized = normalize_header(header)
            if normalized and normalized not in normalized_lookup:
                normalized_lookup[normalized] = header

        resolved: dict[str, str] = {}
        strategies: dict[str, str] = {}
        used_headers: set[str] = set()

        for canonical_field in ORDER_FIELDS:
            match = self._find_exact_or_alias_match(canonical_field, normalized_lookup, used_headers)
            if match is not None:
                resolved[canonical_field] = match
                strategies[canonical_field] = "exact_or_alias"
                used_headers.add(match)

        for canonical_field in ORDER_FIELDS:
            if canonical_field in resolved:
                continue
            match = self._find_best_fuzzy_match(canonical_field, normalized_lookup, used_headers)
            if match is not None:
                resolved[canonical_field] = match
                strategies[canonical_field] = "fuzzy"
                used_headers.add(match)

        return ColumnMapping(
            field_to_source=resolved,
            source_headers=source_headers,
            match_strategies=strategies,
        )

    def map_row(
        self,
        *,
        raw_row: Mapping[str, str | None],
        mapping: ColumnMapping,
    ) -> dict[str, str | None]:
        """
        Project one raw row onto canonical fields. Unmapped fields are None.
        """

        return {
            canonical_field: (
                raw_row.get(mapping.field_to_source[canonical_field])
                if canonical_field in mapping.field_to_source
                else None
            )
            for canonical_field in ORDER_FIELDS
        }

    def _find_exact_or_alias_match(
        self,
        canonical_field: str,
        normalized_lookup: Mapping[str, str],
        used_headers: set[str],
    ) -> str | None:
        candidates = (canonical_field, *self._aliases.get(canonical_field, ()))
        for candidate in candidates:
            match = normalized_lookup.get(normalize_header(candidate))
            if match and match not in used_headers:
                return match
        return None

    def _find_best_fuzzy_match(
        self,
        canonical_field: str,
        normalized_lookup: Mapping[str, str],
        used_headers: set[str],
    ) -> str | None:
        candidates = [
            normalize_header(item)
            for item in (canonical_field, *self._aliases.get(canonical_field, ()))
        ]
        candidates = [item for item in candidates if item]

        best_header: str | None = None
        best_score = 0.0
        for header_norm, header_raw in normalized_lookup.items():
            if header_raw in used_headers:
                continue
            for candidate in candidates:
                score = SequenceMatcher(None, header_norm, candidate).ratio()
                # Containment only counts for reasonably long tokens ("id" is in everything).
                if len(header_norm) >= 4 and len(candidate) >= 4:
                    if header_norm in candidate or candidate in header_norm:
                        score = max(score, 0.9)
                if score > best_score:
                    best_score = score
                    best_header = header_raw

        if best_header is not None and best_score >= self._fuzzy_threshold:
            return best_header
        return None
