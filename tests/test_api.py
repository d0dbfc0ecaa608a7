"""
Tests de los endpoints HTTP de stock y ubicaciones
"""
from fastapi.testclient import TestClient

from app.main import app
from app.modules.stock.router import get_stock_calculator
from app.modules.stock.service import StockCalculator
from fakes import FakeAssociationStore, FakeItemStore


class TestApiRoot:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_process_time_header(self, client):
        response = client.get("/api/v1/")
        assert "X-Process-Time" in response.headers

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/api/v1/no-existe")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}

    def test_wrong_method_uses_envelope(self, client):
        """Sólo se exponen lecturas: un POST responde 405 con el sobre y la cabecera Allow"""
        response = client.post("/api/v1/health")

        assert response.status_code == 405
        assert response.json() == {"success": False, "error": "Method Not Allowed"}
        assert "GET" in response.headers["allow"]


class TestStockEndpoints:

    def test_item_stock(self, client):
        response = client.get("/api/v1/stock/repuesto/rep-1")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["total_stock"] == 20
        assert body["data"]["is_low_stock"] is False
        assert body["data"]["locations"][0]["location_path"] == "Almacén Central > Armario Principal"

    def test_componente_stock(self, client):
        data = client.get("/api/v1/stock/componente/comp-2").json()["data"]

        assert data["item_code"] == "CAPACITOR-comp-2"
        assert data["total_stock"] == 50

    def test_missing_item_is_404(self, client):
        response = client.get("/api/v1/stock/repuesto/rep-x")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Repuesto con ID rep-x no encontrado"}

    def test_inactive_item_is_404_unless_requested(self, client):
        assert client.get("/api/v1/stock/repuesto/rep-4").status_code == 404
        assert client.get("/api/v1/stock/repuesto/rep-4", params={"include_inactive": True}).status_code == 200

    def test_invalid_item_type_is_422(self, client):
        response = client.get("/api/v1/stock/pieza/rep-1")

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Parámetros inválidos"
        assert body["details"]

    def test_low_stock_listing(self, client):
        data = client.get("/api/v1/stock", params={"low_stock": True}).json()["data"]

        assert [item["item_id"] for item in data["items"]] == ["rep-2"]
        assert data["summary"]["filter"] == "low-stock"
        assert data["summary"]["item_type"] == "repuesto"

    def test_full_listing_paginated(self, client):
        data = client.get("/api/v1/stock", params={"page": 2, "limit": 2}).json()["data"]

        assert [item["item_id"] for item in data["items"]] == ["rep-3", "comp-1"]
        assert data["summary"]["total_items"] == 5
        assert data["summary"]["total_pages"] == 3
        assert data["summary"]["low_stock_repuestos"] == 1

    def test_limit_above_maximum_is_422(self, client):
        assert client.get("/api/v1/stock", params={"limit": 10000}).status_code == 422

    def test_recalculate(self, client):
        data = client.get("/api/v1/stock/recalculate", params={"item_type": "componente"}).json()["data"]

        assert data["repuestos"] == []
        assert [item["item_id"] for item in data["componentes"]] == ["comp-1", "comp-2"]
        assert data["summary"]["total_componentes"] == 2

    def test_unexpected_error_is_500(self):
        class BrokenItems(FakeItemStore):
            async def find_repuesto(self, repuesto_id, include_inactive=False):
                raise RuntimeError("base de datos caída")

        app.dependency_overrides[get_stock_calculator] = \
            lambda: StockCalculator(BrokenItems(), FakeAssociationStore())
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/v1/stock/repuesto/rep-1")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}


class TestLocationEndpoints:

    def test_contents(self, client):
        data = client.get("/api/v1/ubicaciones/ubic-1/contents").json()["data"]

        assert data["location_type"] == "ubicacion"
        assert data["summary"]["total_items"] == 6
        assert data["items"][0]["location"]["location_path"] == "Almacén Central > Armario Principal"

    def test_contents_without_children(self, client):
        data = client.get(
            "/api/v1/ubicaciones/arm-1/contents", params={"include_children": False}
        ).json()["data"]

        assert [item["association_id"] for item in data["items"]] == ["ru-1"]

    def test_unknown_location_is_404(self, client):
        response = client.get("/api/v1/ubicaciones/no-existe/contents")

        assert response.status_code == 404
        assert response.json()["error"] == "Ubicación con ID no-existe no encontrada"

    def test_descendants(self, client):
        data = client.get("/api/v1/ubicaciones/esta-1/descendants").json()["data"]

        assert data["location_type"] == "estanteria"
        assert [node["location_id"] for node in data["descendants"]] == ["ste-1", "org-2", "cjt-2"]

    def test_stats(self, client):
        data = client.get("/api/v1/ubicaciones/cjt-2/stats").json()["data"]

        assert data["componente_types"] == {"RESISTENCIA": 100, "CAPACITOR": 50}
        assert data["total_repuestos"] == 0
