from __future__ import annotations

import unittest

from app.mappers.order_column_mapper import OrderColumnMapper, OrderColumnMappingError


class TestOrderColumnMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = OrderColumnMapper()

    def test_matches_guideline_headers_case_insensitively(self) -> None:
        mapping = self.mapper.resolve_mapping(
            ["Date", "Order ID", "Gig Name", "Client Username", "Amount", "Type"]
        )

        self.assertEqual(mapping.field_to_source["order_id"], "Order ID")
        self.assertEqual(mapping.field_to_source["client_username"], "Client Username")
        self.assertEqual(mapping.field_to_source["order_type"], "Type")
        self.assertEqual(mapping.missing_required, ())

    def test_matches_aliases(self) -> None:
        mapping = self.mapper.resolve_mapping(["order_date", "Order #", "Gig", "Buyer", "Price"])

        self.assertEqual(mapping.field_to_source["date"], "order_date")
        self.assertEqual(mapping.field_to_source["order_id"], "Order #")
        self.assertEqual(mapping.field_to_source["gig_name"], "Gig")
        self.assertEqual(mapping.field_to_source["client_username"], "Buyer")
        self.assertEqual(mapping.field_to_source["amount"], "Price")
        self.assertEqual(mapping.match_strategies["amount"], "exact_or_alias")

    def test_fuzzy_match_on_decorated_header(self) -> None:
        mapping = self.mapper.resolve_mapping(["date", "order id", "gig name", "client username", "Amount (USD)"])

        self.assertEqual(mapping.field_to_source["amount"], "Amount (USD)")
        self.assertEqual(mapping.match_strategies["amount"], "fuzzy")

    def test_require_complete_reports_missing_columns(self) -> None:
        mapping = self.mapper.resolve_mapping(["date", "order id"])

        with self.assertRaises(OrderColumnMappingError) as ctx:
            mapping.require_complete()

        fields = {error.canonical_field for error in ctx.exception.errors}
        self.assertEqual(fields, {"gig_name", "client_username", "amount"})
        self.assertIn("gig name", ctx.exception.to_dict()["message"])

    def test_map_row_projects_onto_canonical_fields(self) -> None:
        mapping = self.mapper.resolve_mapping(["date", "order id", "gig name", "client username", "amount"])

        mapped = self.mapper.map_row(
            raw_row={
                "date": "2024-05-20",
                "order id": "FO1",
                "gig name": "Logo",
                "client username": "olivia.m",
                "amount": "10",
                "notes": "ignored",
            },
            mapping=mapping,
        )

        self.assertEqual(mapped["order_id"], "FO1")
        self.assertIsNone(mapped["order_type"])
        self.assertNotIn("notes", mapped)


if __name__ == "__main__":
    unittest.main()
