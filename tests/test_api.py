import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from inventory_service.infrastructure.db import Database
from inventory_service.main import app

JSON = {"Content-Type": "application/json"}


class TestWarehouses:
    def test_list_empty(self, client):
        resp = client.get('/warehouses')
        assert resp.status_code == 200
        assert resp.json() == []

    def test_create_then_list(self, client):
        resp = client.post('/warehouses/create', json={"address": "1 Dock Road"})
        assert resp.status_code == 201
        created = resp.json()
        assert created["address"] == "1 Dock Road"

        assert client.get('/warehouses').json() == [created]

    def test_blank_address(self, client):
        resp = client.post('/warehouses/create', json={"address": ""})
        assert resp.status_code == 400
        assert "address" in resp.json()["detail"]

    def test_missing_body_field_is_a_bad_request(self, client):
        assert client.post('/warehouses/create', json={}).status_code == 400


class TestProducts:
    def test_create_and_list_keeps_attributes(self, client):
        resp = client.post('/products/create', json={
            "name": "Rope",
            "description": "Hemp",
            "attributes": {"color": "red"},
            "weight": 1.5,
            "barcode": "4006381333931",
        })
        assert resp.status_code == 201
        product_id = resp.json()["id"]

        [listed] = client.get('/products').json()
        assert listed == {
            "id": product_id,
            "name": "Rope",
            "description": "Hemp",
            "attributes": {"color": "red"},
            "weight": 1.5,
            "barcode": "4006381333931",
        }

    def test_non_finite_weight_is_a_bad_request(self, client):
        resp = client.post('/products/create', content='{"name": "Y", "weight": NaN}', headers=JSON)
        assert resp.status_code == 400
        assert client.get('/products').json() == []

    def test_update(self, client, stocked):
        resp = client.put('/products/update/1', json={"description": "Zinc plated"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["description"] == "Zinc plated"
        assert body["attributes"] == {"size": "M8"}

    def test_update_missing(self, client, stocked):
        resp = client.put('/products/update/99', json={"description": "x"})
        assert resp.status_code == 404


class TestInventory:
    def test_create(self, client, stocked):
        resp = client.post('/inventory/create', json={
            "productId": 3, "warehouseId": 1, "quantity": 4, "price": 2.5, "discount": 0.1,
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["productId"] == 3
        assert body["warehouseId"] == 1
        assert body["quantity"] == 4

    def test_create_rejects_bad_discount(self, client, stocked):
        resp = client.post('/inventory/create', json={
            "productId": 3, "warehouseId": 1, "quantity": 4, "price": 2.5, "discount": 10,
        })
        assert resp.status_code == 400

    @pytest.mark.parametrize("body", [
        '{"productId": 3, "warehouseId": 1, "quantity": 1, "price": NaN}',
        '{"productId": 3, "warehouseId": 1, "quantity": 1, "price": Infinity}',
        '{"productId": 3, "warehouseId": 1, "quantity": NaN, "price": 1.0}',
    ])
    def test_create_rejects_non_finite_numbers(self, client, stocked, body):
        resp = client.post('/inventory/create', content=body, headers=JSON)
        assert resp.status_code == 400
        assert "already stocked" not in str(resp.json()["detail"])
        assert len(client.get('/inventory/warehouse/1').json()) == 2

    def test_create_for_unknown_product(self, client, stocked):
        resp = client.post('/inventory/create', json={
            "productId": 42, "warehouseId": 1, "quantity": 4, "price": 2.5, "discount": 0,
        })
        assert resp.status_code == 404

    def test_get(self, client, stocked):
        resp = client.get('/inventory/2')
        assert resp.status_code == 200
        assert resp.json() == {
            "id": 2, "productId": 2, "warehouseId": 1, "quantity": 5, "price": 4.5, "discount": 0.1,
        }

    def test_get_missing(self, client, stocked):
        resp = client.get('/inventory/99')
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Inventory record 99 not found"

    def test_by_warehouse(self, client, stocked):
        resp = client.get('/inventory/warehouse/2')
        assert resp.status_code == 200
        assert [(r["id"], r["productId"]) for r in resp.json()] == [(3, 1), (4, 3)]
        assert client.get('/inventory/warehouse/77').json() == []

    def test_adjust_quantity(self, client, stocked):
        resp = client.put('/inventory/1', json={"quantity": 5})
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 15

        resp = client.put('/inventory/1', json={"quantity": -20})
        assert resp.status_code == 400
        assert client.get('/inventory/1').json()["quantity"] == 15

        assert client.put('/inventory/99', json={"quantity": 1}).status_code == 404

    def test_discount(self, client, stocked):
        resp = client.post('/inventory/discount', json={"productIds": [1], "discount": 0.25})
        assert resp.status_code == 200
        assert resp.json() == {"updated": 2}
        assert client.get('/inventory/1').json()["discount"] == 0.25
        assert client.get('/inventory/3').json()["discount"] == 0.25
        assert client.get('/inventory/2').json()["discount"] == 0.1

    def test_summary(self, client, stocked):
        resp = client.post('/inventory/summary', json={
            "warehouseId": 1, "items": [{"productId": 1, "quantity": 2}],
        })
        assert resp.status_code == 200
        assert resp.json() == {"total": 20.0}

    def test_summary_unknown_product(self, client, stocked):
        resp = client.post('/inventory/summary', json={
            "warehouseId": 1, "items": [{"productId": 3, "quantity": 2}],
        })
        assert resp.status_code == 404

    def test_purchase(self, client, stocked):
        resp = client.post('/inventory/purchase', json={
            "warehouseId": 1,
            "items": [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 1}],
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["warehouseId"] == 1
        assert body["total"] == 24.05
        assert client.get('/inventory/1').json()["quantity"] == 8
        assert client.get('/inventory/2').json()["quantity"] == 4

    def test_purchase_insufficient_stock(self, client, stocked):
        resp = client.post('/inventory/purchase', json={
            "warehouseId": 1,
            "items": [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 50}],
        })
        assert resp.status_code == 400
        assert resp.json()["productId"] == 2
        assert client.get('/inventory/1').json()["quantity"] == 10
        assert client.get('/inventory/2').json()["quantity"] == 5


class TestAnalytics:
    def test_record_and_report(self, client, stocked):
        # Snake case keys are accepted as well as camel case
        resp = client.put('/analytics', json={
            "warehouse_id": 1, "product_id": 1, "quantity": 2, "total_amount": 20.0,
        })
        assert resp.status_code == 204
        resp = client.put('/analytics', json={
            "warehouseId": 2, "productId": 3, "quantity": 5, "totalAmount": 10.0,
        })
        assert resp.status_code == 204

        report = client.get('/analytics/warehouse/1').json()
        assert report == [{"productName": "Bolt", "totalSold": 2, "totalRevenue": 20.0}]

        top = client.get('/top-warehouses').json()
        assert top == [
            {"warehouseId": 1, "address": "1 Dock Road", "totalRevenue": 20.0},
            {"warehouseId": 2, "address": "2 Harbour Lane", "totalRevenue": 10.0},
        ]

    def test_negative_sale(self, client, stocked):
        resp = client.put('/analytics', json={
            "warehouseId": 1, "productId": 1, "quantity": -2, "totalAmount": 20.0,
        })
        assert resp.status_code == 400

    def test_non_finite_sale_amount(self, client, stocked):
        body = '{"warehouseId": 1, "productId": 1, "quantity": 2, "totalAmount": NaN}'
        resp = client.put('/analytics', content=body, headers=JSON)
        assert resp.status_code == 400
        assert client.get('/analytics/warehouse/1').json() == []

    def test_purchase_feeds_the_report(self, client, stocked):
        client.post('/inventory/purchase', json={
            "warehouseId": 1, "items": [{"productId": 2, "quantity": 2}],
        })
        assert client.get('/analytics/warehouse/1').json() == [
            {"productName": "Anchor", "totalSold": 2, "totalRevenue": 8.1},
        ]

    def test_top_warehouses_limit_is_bounded(self, client, stocked):
        assert client.get('/top-warehouses', params={"limit": 11}).status_code == 400
        assert client.get('/top-warehouses', params={"limit": 0}).status_code == 400


class TestPlumbing:
    def test_request_id_is_echoed(self, client):
        resp = client.get('/warehouses', headers={"X-Request-ID": "abc-123"})
        assert resp.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client):
        assert client.get('/warehouses').headers["X-Request-ID"]

    def test_store_failure_is_an_opaque_500(self):
        # No tables were created in this database
        broken = Database("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
        previous = app.state.database
        app.state.database = broken
        try:
            resp = TestClient(app).get('/warehouses')
        finally:
            app.state.database = previous
            broken.dispose()
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Data store unavailable"}

    def test_info(self, client):
        body = client.get('/info').json()
        assert body["service"] == "inventory-service"
