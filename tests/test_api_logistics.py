"""Tests per le API JSON della logistica."""

from datetime import date

import pytest

from app.services.logistics_sessions import get_session_registry


@pytest.fixture
def session_id(client):
    response = client.post("/api/logistics/sessions", headers={"X-Operator": "rui"})
    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["payload"]["owner"] == "rui"
    return body["payload"]["id"]


@pytest.fixture
def seeded(seed, day):
    acme = seed.client("Acme Corp")
    beta = seed.client("Beta Lda")
    warehouse = seed.warehouse("Armazém Norte")
    seed.carrier("DHL")
    first = seed.record(day, client=acme, fo_number="1001")
    second = seed.record(day, client=beta, fo_number="1002", is_gift=True)
    seed.record(date(2024, 6, 2), client=acme, fo_number="1003")
    return {"acme": acme, "warehouse": warehouse, "first": first, "second": second}


def _records(http, sid, **params):
    params.setdefault("date", "2024-06-01")
    response = http.get(f"/api/logistics/{sid}/records", query_string=params)
    return response, response.get_json()


class TestSessions:
    def test_health(self, client):
        assert client.get("/health").get_json() == {"status": "ok"}

    def test_close_session(self, client, session_id):
        assert client.delete(f"/api/logistics/sessions/{session_id}").status_code == 200
        assert client.delete(f"/api/logistics/sessions/{session_id}").status_code == 404
        assert get_session_registry().get(session_id) is None

    def test_unknown_session(self, client):
        response, body = _records(client, "nope")
        assert response.status_code == 404
        assert body["payload"]["error_kind"] == "not_found"

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/logistics/x/unknown")
        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestRecords:
    def test_list_by_date(self, client, session_id, seeded):
        response, body = _records(client, session_id)
        assert response.status_code == 200
        assert body["payload"]["total"] == 2
        assert [r["item"]["work_order"]["work_order_number"] for r in body["payload"]["records"]] == ["1001", "1002"]

    def test_filters_and_sort(self, client, session_id, seeded):
        _, body = _records(client, session_id, client="acme")
        assert [r["id"] for r in body["payload"]["records"]] == [seeded["first"].id]

        _, body = _records(client, session_id, kind="brindes")
        assert [r["id"] for r in body["payload"]["records"]] == [seeded["second"].id]

        _, body = _records(client, session_id, sort="work_order_number", dir="desc")
        assert [r["item"]["work_order"]["work_order_number"] for r in body["payload"]["records"]] == ["1002", "1001"]

    def test_bad_date_and_sort(self, client, session_id, seeded):
        response, _ = _records(client, session_id, date="2024-13-01")
        assert response.status_code == 400
        response, _ = _records(client, session_id, sort="colour")
        assert response.status_code == 400

    def test_cached_after_first_read(self, client, session_id, seeded):
        _records(client, session_id)
        session = get_session_registry().get(session_id)
        assert session.coordinator.cache.keys() == ["2024-06-01"]
        assert session.references_loaded

    def test_references(self, client, session_id, seeded):
        body = client.get(f"/api/logistics/{session_id}/references").get_json()
        assert [c["label"] for c in body["payload"]["clients"]] == ["Acme Corp", "Beta Lda"]
        assert [c["label"] for c in body["payload"]["carriers"]] == ["DHL"]


class TestMutations:
    def test_patch_field(self, client, session_id, seeded):
        _records(client, session_id)
        record_id = seeded["first"].id
        response = client.patch(
            f"/api/logistics/{session_id}/records/{record_id}",
            json={"field": "notes", "value": "Entregar de manhã"},
        )
        assert response.status_code == 200
        assert response.get_json()["payload"]["notes"] == "Entregar de manhã"

        _, body = _records(client, session_id, notes="manhã")
        assert [r["id"] for r in body["payload"]["records"]] == [record_id]

    def test_changing_dispatch_date_moves_record(self, client, session_id, seeded):
        _records(client, session_id, date="2024-06-02")
        _records(client, session_id)
        record_id = seeded["first"].id
        response = client.patch(
            f"/api/logistics/{session_id}/records/{record_id}",
            json={"field": "dispatch_date", "value": "2024-06-02"},
        )
        assert response.status_code == 200

        _, body = _records(client, session_id)
        assert [r["id"] for r in body["payload"]["records"]] == [seeded["second"].id]
        _, body = _records(client, session_id, date="2024-06-02")
        assert record_id in [r["id"] for r in body["payload"]["records"]]
        assert body["payload"]["total"] == 2

    def test_patch_requires_field(self, client, session_id, seeded):
        _records(client, session_id)
        response = client.patch(f"/api/logistics/{session_id}/records/{seeded['first'].id}", json={})
        assert response.status_code == 400

    def test_location(self, client, session_id, seeded):
        _records(client, session_id)
        response = client.put(
            f"/api/logistics/{session_id}/records/{seeded['first'].id}/location",
            json={"kind": "pickup", "warehouse_id": seeded["warehouse"].id},
        )
        payload = response.get_json()["payload"]
        assert payload["pickup_location_id"] == seeded["warehouse"].id
        assert payload["pickup_location"] == "Armazém Norte"

    def test_duplicate_and_delete(self, client, session_id, seeded):
        _records(client, session_id)
        response = client.post(f"/api/logistics/{session_id}/records/{seeded['first'].id}/duplicate")
        assert response.status_code == 201
        created = response.get_json()["payload"]
        assert created["tracking_number"] is None
        assert created["dispatch_date"] == "2024-06-01"

        _, body = _records(client, session_id)
        assert body["payload"]["total"] == 3

        response = client.delete(f"/api/logistics/{session_id}/records/{created['id']}")
        assert response.status_code == 200
        _, body = _records(client, session_id)
        assert body["payload"]["total"] == 2

    def test_work_order_number_conflict(self, client, session_id, seeded):
        _records(client, session_id)
        work_order_id = seeded["second"].item.work_order_id
        response = client.patch(
            f"/api/logistics/{session_id}/work-orders/{work_order_id}",
            json={"field": "work_order_number", "value": "1001"},
        )
        assert response.status_code == 409
        assert response.get_json()["payload"]["error_kind"] == "unique_violation"

    def test_item_update(self, client, session_id, seeded):
        _records(client, session_id)
        response = client.patch(
            f"/api/logistics/{session_id}/items/{seeded['first'].item_id}",
            json={"field": "code", "value": "NEW-1"},
        )
        assert response.status_code == 200
        _, body = _records(client, session_id, code="new-1")
        assert [r["id"] for r in body["payload"]["records"]] == [seeded["first"].id]

    def test_refresh_unknown_record(self, client, session_id, seeded):
        response = client.post(f"/api/logistics/{session_id}/records/9999/refresh")
        assert response.status_code == 404

    def test_create_dispatch(self, client, seeded):
        response = client.post(
            "/api/logistics/dispatches",
            json={
                "work_order": {"work_order_number": "5001", "client_id": seeded["acme"].id},
                "item": {"description": "Banner"},
                "record": {"dispatch_date": "2024-06-01"},
            },
        )
        assert response.status_code == 201
        assert response.get_json()["payload"]["item"]["work_order"]["client_name"] == "Acme Corp"


class TestExport:
    def test_export_returns_workbook(self, client, session_id, seeded):
        response = client.get(f"/api/logistics/{session_id}/export", query_string={"date": "2024-06-01"})
        assert response.status_code == 200
        assert response.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        assert "logistica_2024-06-01.xlsx" in response.headers["Content-Disposition"]
        assert response.data[:2] == b"PK"
