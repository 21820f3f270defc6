"""Tests for the customer and storage registries."""

from fastapi.testclient import TestClient

from conftest import ADMIN, OPERATOR


def _create_storage(client: TestClient, storage_number: str, **fields) -> dict:
    response = client.post(
        "/api/storages/",
        json={"storage_number": storage_number, **fields},
        headers=ADMIN,
    )
    assert response.status_code == 201
    return response.json()


class TestCustomers:
    """Tests for customer endpoints."""

    def test_create_and_list(self, client: TestClient) -> None:
        response = client.post(
            "/api/customers/", json={"code": "CUST-2", "name": "PT. Maju Mundur"}, headers=ADMIN
        )
        assert response.status_code == 201
        assert response.json()["code"] == "CUST-2"
        client.post("/api/customers/", json={"code": "CUST-1"}, headers=ADMIN)

        response = client.get("/api/customers/", headers=OPERATOR)
        assert response.status_code == 200
        assert [c["code"] for c in response.json()] == ["CUST-1", "CUST-2"]

    def test_duplicate_code(self, client: TestClient) -> None:
        client.post("/api/customers/", json={"code": "CUST-1"}, headers=ADMIN)
        response = client.post("/api/customers/", json={"code": "CUST-1"}, headers=ADMIN)
        assert response.status_code == 400

    def test_operator_cannot_create(self, client: TestClient) -> None:
        response = client.post("/api/customers/", json={"code": "CUST-1"}, headers=OPERATOR)
        assert response.status_code == 403

    def test_update_name(self, client: TestClient) -> None:
        created = client.post("/api/customers/", json={"code": "CUST-1"}, headers=ADMIN).json()

        response = client.put(
            f"/api/customers/{created['id']}", json={"name": "PT. Maju Jaya"}, headers=ADMIN
        )

        assert response.status_code == 200
        assert response.json()["name"] == "PT. Maju Jaya"
        assert response.json()["code"] == "CUST-1"

    def test_delete(self, client: TestClient) -> None:
        created = client.post("/api/customers/", json={"code": "CUST-1"}, headers=ADMIN).json()

        assert client.delete(f"/api/customers/{created['id']}", headers=ADMIN).status_code == 204
        assert client.delete(f"/api/customers/{created['id']}", headers=ADMIN).status_code == 404


class TestStorages:
    """Tests for storage endpoints."""

    def test_create_defaults_to_mobile(self, client: TestClient) -> None:
        storage = _create_storage(client, "STG-A-01")
        assert storage["type"] == "mobile"
        assert storage["customer_code"] is None

    def test_fixed_storage_needs_owner(self, client: TestClient) -> None:
        response = client.post(
            "/api/storages/", json={"storage_number": "TANK-1", "type": "fixed"}, headers=ADMIN
        )
        assert response.status_code == 422

    def test_duplicate_number(self, client: TestClient) -> None:
        _create_storage(client, "STG-A-01")
        response = client.post("/api/storages/", json={"storage_number": "STG-A-01"}, headers=ADMIN)
        assert response.status_code == 400

    def test_admin_only(self, client: TestClient) -> None:
        assert client.get("/api/storages/", headers=OPERATOR).status_code == 403

    def test_get_update_delete(self, client: TestClient) -> None:
        storage = _create_storage(client, "STG-A-01", default_quantity=1000)

        response = client.put(
            f"/api/storages/{storage['id']}",
            json={"type": "fixed", "customer_code": "CUST-2", "default_quantity": 1200},
            headers=ADMIN,
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["type"] == "fixed"
        assert updated["customer_code"] == "CUST-2"
        assert updated["default_quantity"] == 1200
        assert updated["storage_number"] == "STG-A-01"

        assert client.get(f"/api/storages/{storage['id']}", headers=ADMIN).status_code == 200
        assert client.delete(f"/api/storages/{storage['id']}", headers=ADMIN).status_code == 204
        assert client.get(f"/api/storages/{storage['id']}", headers=ADMIN).status_code == 404
