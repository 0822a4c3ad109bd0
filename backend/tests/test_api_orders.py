"""API tests for the order board, lifecycle actions and bills."""

from decimal import Decimal

import pytest

API = "/api/v1"


def _place(client, table_number=1, customer_id=None, **extra):
    payload = {
        "table_number": table_number,
        "items": [{"menu_item_id": "m1", "quantity": 2}, {"menu_item_id": "m2"}],
        **extra,
    }
    if customer_id:
        payload["customer_id"] = customer_id
    return client.post(f"{API}/orders/", json=payload)


@pytest.fixture
def placed(client, seeded_menu, seeded_tables):
    response = _place(client, table_number=2)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "healthy"


class TestPlaceOrder:
    def test_create_order(self, placed):
        assert placed["status"] == "received"
        assert Decimal(placed["subtotal"]) == Decimal("27.97")
        assert Decimal(placed["total"]) == Decimal("27.97")
        assert placed["version"] == 1
        assert [line["quantity"] for line in placed["items"]] == [2, 1]

    def test_table_becomes_occupied(self, client, placed):
        tables = client.get(f"{API}/tables/").json()["items"]
        table = next(t for t in tables if t["id"] == 2)
        assert table["status"] == "occupied"
        assert table["order_id"] == placed["id"]

    def test_board_groups_by_status(self, client, placed):
        board = client.get(f"{API}/orders/").json()
        assert [o["id"] for o in board["received"]] == [placed["id"]]
        assert board["preparing"] == board["ready"] == board["served"] == []

    def test_empty_order_rejected(self, client, placed):
        response = client.post(f"{API}/orders/", json={"table_number": 1, "items": []})
        assert response.status_code == 422
        board = client.get(f"{API}/orders/").json()
        assert [o["id"] for o in board["received"]] == [placed["id"]]
        table = next(t for t in client.get(f"{API}/tables/").json()["items"] if t["id"] == 1)
        assert table["status"] == "available"

    def test_missing_table_number_rejected(self, client, seeded_menu, seeded_tables):
        response = client.post(f"{API}/orders/", json={"items": [{"menu_item_id": "m1"}]})
        assert response.status_code == 422

    def test_unknown_table_rejected(self, client, seeded_menu, seeded_tables):
        assert _place(client, table_number=99).status_code == 422

    def test_unknown_menu_item_rejected(self, client, seeded_menu, seeded_tables):
        response = client.post(
            f"{API}/orders/", json={"table_number": 1, "items": [{"menu_item_id": "nope"}]}
        )
        assert response.status_code == 422

    def test_unknown_customer(self, client, seeded_menu, seeded_tables):
        assert _place(client, customer_id="CUST-missing").status_code == 404


class TestLifecycle:
    def test_full_flow(self, client, placed):
        order_id = placed["id"]

        advanced = client.post(f"{API}/orders/{order_id}/advance").json()
        assert advanced["status"] == "preparing"
        assert advanced["version"] == 2

        discounted = client.post(
            f"{API}/orders/{order_id}/discount", json={"percentage": 10, "expected_version": 2}
        ).json()
        assert Decimal(discounted["total"]) == Decimal("25.173")
        assert discounted["status"] == "preparing"

        bill = client.get(f"{API}/orders/{order_id}/bill").json()
        assert bill["total"] == "₹25.17"
        assert bill["discount"] == "-₹2.80"
        assert "₹25.17" in bill["text"]

        archived = client.post(f"{API}/orders/{order_id}/archive")
        assert archived.status_code == 200
        assert archived.json()["status"] == "archived"

        assert client.get(f"{API}/orders/").json()["preparing"] == []
        history = client.get(f"{API}/orders/archive").json()
        assert [o["id"] for o in history["items"]] == [order_id]

        tables = client.get(f"{API}/tables/").json()["items"]
        assert next(t for t in tables if t["id"] == 2)["status"] == "available"

    def test_served_advance_is_noop(self, client, placed):
        order_id = placed["id"]
        for _ in range(3):
            client.post(f"{API}/orders/{order_id}/advance")
        response = client.post(f"{API}/orders/{order_id}/advance")
        assert response.status_code == 200
        assert response.json()["status"] == "served"
        assert response.json()["version"] == 4

    def test_discount_clamped(self, client, placed):
        response = client.post(f"{API}/orders/{placed['id']}/discount", json={"percentage": 150})
        assert Decimal(response.json()["discount"]) == Decimal("100")
        assert Decimal(response.json()["total"]) == Decimal("0")

    def test_fine_discount_survives_reload(self, client, placed):
        response = client.post(f"{API}/orders/{placed['id']}/discount", json={"percentage": "12.345678"})
        assert response.status_code == 200
        applied = response.json()
        assert Decimal(applied["discount"]) == Decimal("12.3457")

        reloaded = client.get(f"{API}/orders/{placed['id']}").json()
        assert Decimal(reloaded["discount"]) == Decimal(applied["discount"])
        assert Decimal(reloaded["total"]) == Decimal(applied["total"])
        assert Decimal(applied["total"]) == Decimal("27.97") * (1 - Decimal("12.3457") / 100)

    def test_archive_twice(self, client, placed):
        assert client.post(f"{API}/orders/{placed['id']}/archive").status_code == 200
        assert client.post(f"{API}/orders/{placed['id']}/archive").status_code == 422
        assert client.get(f"{API}/orders/archive").json()["total"] == 1

    def test_unknown_order_404(self, client, placed):
        assert client.post(f"{API}/orders/ORD-missing/advance").status_code == 404
        assert client.get(f"{API}/orders/ORD-missing").status_code == 404

    def test_stale_version_409(self, client, placed):
        order_id = placed["id"]
        client.post(f"{API}/orders/{order_id}/advance", json={"expected_version": 1})
        response = client.post(f"{API}/orders/{order_id}/advance", json={"expected_version": 1})
        assert response.status_code == 409
        assert client.get(f"{API}/orders/{order_id}").json()["status"] == "preparing"

    def test_cancel_received_order(self, client, placed):
        response = client.delete(f"{API}/orders/{placed['id']}")
        assert response.status_code == 200
        assert client.get(f"{API}/orders/{placed['id']}").status_code == 404

    def test_cancel_started_order_rejected(self, client, placed):
        client.post(f"{API}/orders/{placed['id']}/advance")
        assert client.delete(f"{API}/orders/{placed['id']}").status_code == 422

    def test_bill_pdf(self, client, placed):
        response = client.get(f"{API}/orders/{placed['id']}/bill.pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")


class TestLoyaltyThroughOrders:
    @pytest.fixture
    def customer_id(self, client):
        response = client.post(
            f"{API}/customers/", json={"name": "John Doe", "email": "john@example.com", "phone": "555-0101"}
        )
        assert response.status_code == 201
        return response.json()["id"]

    def _points(self, client, customer_id):
        customers = client.get(f"{API}/customers/").json()["items"]
        return next(c for c in customers if c["id"] == customer_id)["loyalty_points"]

    def test_points_accrue_on_total(self, client, seeded_menu, seeded_tables, customer_id):
        order = _place(client, customer_id=customer_id).json()
        assert order["points_earned"] == 2
        assert order["customer_name"] == "John Doe"
        assert self._points(client, customer_id) == 2

    def test_redeem_and_revert(self, client, seeded_menu, seeded_tables, customer_id):
        # Two orders give the customer enough points to spend
        for _ in range(2):
            _place(client, customer_id=customer_id)
        order = _place(client, customer_id=customer_id).json()
        balance = self._points(client, customer_id)

        redeemed = client.post(f"{API}/orders/{order['id']}/redeem", json={"points": 3})
        assert redeemed.status_code == 200
        assert redeemed.json()["points_redeemed"] == 3
        assert Decimal(redeemed.json()["total"]) == Decimal("24.97")
        assert self._points(client, customer_id) == balance - 3

        reverted = client.post(f"{API}/orders/{order['id']}/revert-redemption")
        assert reverted.json()["points_redeemed"] == 0
        assert self._points(client, customer_id) == balance

    def test_cancel_returns_points(self, client, seeded_menu, seeded_tables, customer_id):
        order = _place(client, customer_id=customer_id).json()
        client.delete(f"{API}/orders/{order['id']}")
        assert self._points(client, customer_id) == 0


class TestArchiveRoutes:
    def test_search_and_export(self, client, placed):
        client.post(f"{API}/orders/{placed['id']}/archive")
        assert client.get(f"{API}/orders/archive", params={"search": "no-such"}).json()["total"] == 0

        export = client.get(f"{API}/orders/archive/export.xlsx")
        assert export.status_code == 200
        assert export.content[:2] == b"PK"

    def test_file_size_unavailable_for_sql(self, client):
        assert client.get(f"{API}/orders/archive/file-size").status_code == 404

    def test_monthly_summary(self, client, placed):
        client.post(f"{API}/orders/{placed['id']}/archive")
        summary = client.get(f"{API}/reports/archive-summary").json()
        assert summary["order_count"] == 1
        assert Decimal(summary["total_sales"]) == Decimal("27.97")
