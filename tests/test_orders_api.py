from __future__ import annotations

from decimal import Decimal

from app.api.dependencies import get_order_ingestion_service
from app.main import app
from app.repositories.errors import OrderPersistenceError
from app.services.order_ingestion_service import OrderIngestionService

CSV = (
    "Date,Order ID,Gig Name,Client Username,Amount\n"
    "2024-05-20,FO1,Logo Design,olivia.m,120.00\n"
    "2024-05-21,FO2,Landing Page,will.k,80\n"
    "2024-05-21,FO2,Landing Page,will.k,80\n"
    "bad-date,FO3,Landing Page,will.k,80\n"
)


def _import(client, csv_content: str = CSV, source: str = "Fiverr"):
    return client.post("/orders/import-bulk", json={"source": source, "csv_content": csv_content})


class TestBulkImportEndpoint:
    def test_returns_per_row_outcomes(self, client) -> None:
        response = _import(client)

        assert response.status_code == 201
        body = response.json()
        assert body["total_rows"] == 4
        assert body["accepted_count"] == 2
        assert body["rejected_count"] == 2
        assert [outcome["reason"] for outcome in body["outcomes"]] == [
            None,
            None,
            "duplicate-identifier",
            "invalid-date",
        ]

    def test_reimport_rejects_everything_as_duplicate(self, client) -> None:
        _import(client)

        body = _import(client).json()

        assert body["accepted_count"] == 0
        assert body["outcomes"][0]["reason"] == "duplicate-identifier"

    def test_missing_columns_is_bad_request(self, client) -> None:
        response = _import(client, csv_content="Date,Order ID\n2024-05-20,FO1\n")

        assert response.status_code == 400
        assert "errors" in response.json()["detail"]

    def test_blank_source_is_bad_request(self, client) -> None:
        response = _import(client, source="   ")

        assert response.status_code == 400

    def test_missing_body_fields_are_validation_errors(self, client) -> None:
        response = client.post("/orders/import-bulk", json={"source": "Fiverr"})

        assert response.status_code == 422

    def test_store_failure_is_server_error(self, client, store_factory) -> None:
        store = store_factory()
        store.insert_error = OrderPersistenceError("connection lost")
        app.dependency_overrides[get_order_ingestion_service] = lambda: OrderIngestionService(store)

        response = _import(client)

        assert response.status_code == 500
        assert store.orders == {}

    def test_upload_csv_file(self, client) -> None:
        response = client.post(
            "/orders/import-bulk/upload",
            data={"source": "Fiverr"},
            files={"file": ("orders.csv", CSV.encode("utf-8-sig"), "text/csv")},
        )

        assert response.status_code == 201
        assert response.json()["accepted_count"] == 2

    def test_upload_rejects_non_csv(self, client) -> None:
        response = client.post(
            "/orders/import-bulk/upload",
            data={"source": "Fiverr"},
            files={"file": ("orders.json", b"{}", "application/json")},
        )

        assert response.status_code == 400


class TestSingleImportEndpoint:
    ORDER = {
        "date": "2024-05-20",
        "order id": "S1",
        "gig name": "Logo Design",
        "client username": "olivia.m",
        "amount": "45.5",
    }

    def test_creates_order(self, client) -> None:
        response = client.post("/orders/import-single", json={"source": "Fiverr", "order_data": self.ORDER})

        assert response.status_code == 201
        body = response.json()
        assert body["order_id"] == "S1"
        assert Decimal(str(body["amount"])) == Decimal("45.50")
        assert body["order_type"] == "Order"

    def test_duplicate_is_conflict(self, client) -> None:
        client.post("/orders/import-single", json={"source": "Fiverr", "order_data": self.ORDER})

        response = client.post("/orders/import-single", json={"source": "Fiverr", "order_data": self.ORDER})

        assert response.status_code == 409

    def test_invalid_amount_is_bad_request(self, client) -> None:
        order = {**self.ORDER, "amount": "lots"}

        response = client.post("/orders/import-single", json={"source": "Fiverr", "order_data": order})

        assert response.status_code == 400
        assert response.json()["detail"]["reason"] == "invalid-amount"


class TestOrderManagementEndpoints:
    def test_list_and_filter(self, client) -> None:
        _import(client)
        _import(
            client,
            csv_content="date,order id,gig name,client username,amount\n2024-06-01,UP1,Copy,ann,5\n",
            source="Upwork",
        )

        all_orders = client.get("/orders").json()
        upwork = client.get("/orders", params={"source": "Upwork"}).json()

        assert [order["order_id"] for order in all_orders] == ["UP1", "FO2", "FO1"]
        assert [order["order_id"] for order in upwork] == ["UP1"]

    def test_exists(self, client) -> None:
        _import(client)

        assert client.get("/orders/exists/FO1").json() == {"exists": True}
        assert client.get("/orders/exists/NOPE").json() == {"exists": False}

    def test_get_and_delete(self, client) -> None:
        _import(client)

        assert client.get("/orders/FO1").status_code == 200
        assert client.delete("/orders/FO1").status_code == 200
        assert client.get("/orders/FO1").status_code == 404
        assert client.delete("/orders/FO1").status_code == 404

    def test_bulk_delete(self, client) -> None:
        _import(client)

        response = client.post("/orders/bulk-delete", json={"order_ids": ["FO1", "FO2", "NOPE"]})

        assert response.status_code == 200
        assert response.json()["deleted_count"] == 2
        assert client.get("/orders").json() == []

    def test_bulk_delete_requires_ids(self, client) -> None:
        response = client.post("/orders/bulk-delete", json={"order_ids": []})

        assert response.status_code == 422

    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "healthy"}


class TestOrderUpdateEndpoint:
    UPDATE = {
        "order_id": "FO1",
        "order_date": "2024-05-20",
        "gig_name": "Logo Design",
        "client_username": "olivia.m",
        "amount": "150.00",
        "source": "Fiverr",
        "status": "Completed",
        "rating": 4.8,
    }

    def test_updates_status_and_rating(self, client) -> None:
        _import(client)

        response = client.put("/orders/FO1", json=self.UPDATE)

        assert response.status_code == 200
        body = response.json()
        assert body["rating"] == 4.8
        assert Decimal(str(body["amount"])) == Decimal("150.00")
        assert body["cancellation_reasons"] is None

    def test_cancelled_order_keeps_reasons(self, client) -> None:
        _import(client)
        update = {
            **self.UPDATE,
            "status": "Cancelled",
            "cancellation_reasons": ["Cancelled without requirements"],
            "custom_cancellation_reason": " Buyer changed plans ",
        }

        body = client.put("/orders/FO1", json=update).json()

        assert body["status"] == "Cancelled"
        assert body["cancellation_reasons"] == ["Cancelled without requirements", "Buyer changed plans"]

    def test_cancelled_without_reason_is_rejected(self, client) -> None:
        _import(client)

        response = client.put("/orders/FO1", json={**self.UPDATE, "status": "Cancelled"})

        assert response.status_code == 422
        assert client.get("/orders/FO1").json()["status"] == "Completed"

    def test_unknown_status_is_rejected(self, client) -> None:
        _import(client)

        response = client.put("/orders/FO1", json={**self.UPDATE, "status": "Refunded"})

        assert response.status_code == 422

    def test_rating_out_of_range_is_rejected(self, client) -> None:
        _import(client)

        response = client.put("/orders/FO1", json={**self.UPDATE, "rating": 7})

        assert response.status_code == 422

    def test_unknown_order_is_not_found(self, client) -> None:
        response = client.put("/orders/NOPE", json={**self.UPDATE, "order_id": "NOPE"})

        assert response.status_code == 404

    def test_rename_onto_existing_identifier_conflicts(self, client) -> None:
        _import(client)

        response = client.put("/orders/FO1", json={**self.UPDATE, "order_id": "FO2"})

        assert response.status_code == 409
        assert client.get("/orders/exists/FO1").json() == {"exists": True}
