"""Tests per le API delle tabelle di definizione."""

import pytest


def _create(client, resource, data):
    response = client.post(f"/api/definitions/{resource}", json=data)
    return response, response.get_json()


class TestWarehouses:
    def test_crud_cycle(self, client):
        response, body = _create(client, "warehouses", {"name": " Armazém Norte ", "phc_number": "A1"})
        assert response.status_code == 201
        warehouse_id = body["payload"]["id"]
        assert body["payload"]["name"] == "Armazém Norte"

        _create(client, "warehouses", {"name": "Depósito Sul", "phc_number": "B2"})
        listed = client.get("/api/definitions/warehouses", query_string={"q": "norte"}).get_json()
        assert [w["name"] for w in listed["payload"]] == ["Armazém Norte"]
        listed = client.get("/api/definitions/warehouses", query_string={"q": "b2"}).get_json()
        assert [w["name"] for w in listed["payload"]] == ["Depósito Sul"]

        response = client.patch(f"/api/definitions/warehouses/{warehouse_id}", json={"address": "Rua A"})
        assert response.get_json()["payload"]["address"] == "Rua A"
        assert response.get_json()["payload"]["name"] == "Armazém Norte"

        assert client.delete(f"/api/definitions/warehouses/{warehouse_id}").status_code == 200
        assert client.delete(f"/api/definitions/warehouses/{warehouse_id}").status_code == 404

    def test_name_required(self, client):
        response, body = _create(client, "warehouses", {"name": "  "})
        assert response.status_code == 400
        assert body["payload"]["error_kind"] == "validation"

    def test_unknown_field(self, client):
        response, _ = _create(client, "warehouses", {"name": "X", "colour": "red"})
        assert response.status_code == 400

    def test_unknown_resource(self, client):
        assert client.get("/api/definitions/spaceships").status_code == 404


class TestHolidays:
    def test_date_validation(self, client):
        response, _ = _create(client, "holidays", {"holiday_date": "25-12-2024", "description": "Natal"})
        assert response.status_code == 400

    def test_year_filter_and_order(self, client):
        _create(client, "holidays", {"holiday_date": "2024-12-25", "description": "Natal"})
        _create(client, "holidays", {"holiday_date": "2024-06-10", "description": "Dia de Portugal"})
        _create(client, "holidays", {"holiday_date": "2025-01-01", "description": "Ano Novo"})

        body = client.get("/api/definitions/holidays", query_string={"year": "2024"}).get_json()
        assert [h["holiday_date"] for h in body["payload"]] == ["2024-06-10", "2024-12-25"]

    def test_bad_year(self, client):
        assert client.get("/api/definitions/holidays", query_string={"year": "abc"}).status_code == 400


class TestVatExceptions:
    @pytest.mark.parametrize("rate", ["-1", "100.5", "abc"])
    def test_rate_out_of_range(self, client, rate):
        response, _ = _create(client, "vat-exceptions", {"supplier_name": "Fornecedor A", "vat_rate": rate})
        assert response.status_code == 400

    def test_supplier_name_is_unique(self, client):
        response, body = _create(client, "vat-exceptions", {"supplier_name": "Fornecedor A", "vat_rate": "6"})
        assert response.status_code == 201
        assert body["payload"]["vat_rate"] == 6.0
        assert body["payload"]["is_active"] is True

        response, body = _create(client, "vat-exceptions", {"supplier_name": "Fornecedor A", "vat_rate": "13"})
        assert response.status_code == 409
        assert body["payload"]["error_kind"] == "unique_violation"

    def test_session_usable_after_conflict(self, client):
        _create(client, "vat-exceptions", {"supplier_name": "Fornecedor A", "vat_rate": "6"})
        _create(client, "vat-exceptions", {"supplier_name": "Fornecedor A", "vat_rate": "13"})
        response, _ = _create(client, "vat-exceptions", {"supplier_name": "Fornecedor B", "vat_rate": "23"})
        assert response.status_code == 201


class TestOtherResources:
    @pytest.mark.parametrize(
        "resource, data",
        [
            ("suppliers", {"name": "Papelaria", "email": "geral@papelaria.pt"}),
            ("clients", {"name": "Acme Corp", "postal_code": "1000-001"}),
            ("carriers", {"name": "DHL"}),
            ("machines", {"name": "Plotter", "value_m2": "12,50"}),
        ],
    )
    def test_create_and_list(self, client, resource, data):
        response, body = _create(client, resource, data)
        assert response.status_code == 201
        listed = client.get(f"/api/definitions/{resource}").get_json()["payload"]
        assert [row["id"] for row in listed] == [body["payload"]["id"]]

    def test_machine_value_is_decimal(self, client):
        _, body = _create(client, "machines", {"name": "Plotter", "value_m2": "12,50"})
        assert body["payload"]["value_m2"] == 12.5
