"""Tests di integrazione per SqlDeliveryStore e create_dispatch (SQLite)."""

from datetime import date

from app.extensions import db
from app.models import DeliveryRecord, Item, WorkOrder
from app.services.dispatch_service import create_dispatch
from app.services.logistics_coordinator import LogisticsCoordinator
from app.services.logistics_store import SqlDeliveryStore
from app.services.results import Err, ErrorKind, Ok


class TestSqlDeliveryStore:
    def test_fetch_by_date_serializes_relations(self, seed, day):
        acme = seed.client("Acme Corp")
        seed.record(day, client=acme, fo_number="1001", notes="Frágil")
        seed.record(date(2024, 6, 2), fo_number="1002")

        result = SqlDeliveryStore().fetch_by_date(day)

        assert isinstance(result, Ok)
        assert len(result.value) == 1
        record = result.value[0]
        assert record["dispatch_date"] == "2024-06-01"
        assert record["notes"] == "Frágil"
        assert record["item"]["work_order"]["work_order_number"] == "1001"
        assert record["item"]["work_order"]["client_id"] == acme.id

    def test_fetch_one_missing(self, app):
        result = SqlDeliveryStore().fetch_one(999)
        assert result.kind is ErrorKind.NOT_FOUND

    def test_update_record_parses_dates(self, seed, day):
        record = seed.record(day)
        result = SqlDeliveryStore().update_record(record.id, {"completed_date": "2024-06-03"})
        assert isinstance(result, Ok)
        assert db.session.get(DeliveryRecord, record.id).completed_date == date(2024, 6, 3)

    def test_update_record_bad_date(self, seed, day):
        record = seed.record(day)
        result = SqlDeliveryStore().update_record(record.id, {"delivery_date": "03/06/2024"})
        assert result.kind is ErrorKind.VALIDATION

    def test_duplicate_work_order_number(self, seed, day):
        seed.record(day, fo_number="1001")
        other = seed.record(day, fo_number="1002")
        result = SqlDeliveryStore().update_work_order(
            other.item.work_order_id, {"work_order_number": "1001"}
        )
        assert isinstance(result, Err)
        assert result.kind is ErrorKind.UNIQUE_VIOLATION
        assert db.session.get(WorkOrder, other.item.work_order_id).work_order_number == "1002"

    def test_insert_requires_item(self, app):
        result = SqlDeliveryStore().insert_record({"item_id": 12345, "notes": "x"})
        assert result.kind is ErrorKind.VALIDATION

    def test_delete_record(self, seed, day):
        record = seed.record(day)
        assert isinstance(SqlDeliveryStore().delete_record(record.id), Ok)
        assert db.session.get(DeliveryRecord, record.id) is None


class TestCoordinatorOnDatabase:
    def test_duplicate_twice_then_reload(self, seed, day):
        record = seed.record(day, item_quantity=40)
        coordinator = LogisticsCoordinator(store=SqlDeliveryStore())
        coordinator.get(day)
        coordinator.update_record_field(record.id, "tracking_number", "777")

        first = coordinator.duplicate_row(record.id)
        second = coordinator.duplicate_row(record.id)

        assert isinstance(first, Ok) and isinstance(second, Ok)
        rows = {r["id"]: r for r in coordinator.records}
        assert len(rows) == 3
        assert rows[record.id]["tracking_number"] == 777
        for created in (first.value, second.value):
            assert rows[created["id"]]["tracking_number"] is None
            assert rows[created["id"]]["quantity"] == 40
            assert rows[created["id"]]["item"]["id"] == record.item_id


class TestCreateDispatch:
    def test_creates_work_order_item_and_record(self, seed):
        acme = seed.client("Acme Corp")
        result = create_dispatch({
            "work_order": {"work_order_number": "3001", "budget_number": "42", "client_id": acme.id},
            "item": {"description": "Roll-up", "quantity": "3"},
            "record": {"dispatch_date": "2024-06-01", "tracking_number": "55"},
        })
        assert isinstance(result, Ok)
        created = result.value
        assert created["description"] == "Roll-up"
        assert created["tracking_number"] == 55
        assert created["item"]["quantity"] == 3
        assert created["item"]["work_order"]["client_name"] == "Acme Corp"
        assert created["item"]["work_order"]["budget_number"] == 42

    def test_duplicate_fo_creates_nothing(self, seed, day):
        seed.record(day, fo_number="3001")
        items_before = Item.query.count()
        result = create_dispatch({
            "work_order": {"work_order_number": "3001"},
            "item": {"description": "Roll-up"},
        })
        assert result.kind is ErrorKind.UNIQUE_VIOLATION
        assert Item.query.count() == items_before

    def test_invalid_budget_number(self, app):
        result = create_dispatch({
            "work_order": {"budget_number": "ORC-1"},
            "item": {"description": "Roll-up"},
        })
        assert result.kind is ErrorKind.VALIDATION
        assert WorkOrder.query.count() == 0

    def test_reuses_existing_work_order(self, seed, day):
        existing = seed.record(day, fo_number="4001")
        result = create_dispatch({
            "work_order": {"id": existing.item.work_order_id},
            "item": {"description": "Flyer"},
        })
        assert result.value["item"]["work_order"]["work_order_number"] == "4001"
        assert WorkOrder.query.count() == 1
