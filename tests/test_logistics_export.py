"""Tests per l'export Excel della logistica."""

import io
from datetime import date

from openpyxl import load_workbook

from app.services.logistics_export import TITLE, build_workbook, export_rows, export_to_bytes
from app.services.reference_service import ReferenceData, ReferenceOption


def _record(row_id, fo, pickup_id=None, **fields):
    record = {
        "id": row_id,
        "description": f"Item {row_id}",
        "tracking_number": None,
        "pickup_location_id": pickup_id,
        "pickup_location": None,
        "delivery_location_id": None,
        "delivery_location": None,
        "carrier_id": None,
        "notes": None,
        "pickup_contact": None,
        "pickup_phone": None,
        "delivery_contact": None,
        "delivery_phone": None,
        "quantity": None,
        "item": {
            "description": f"Item {row_id}",
            "quantity": 10 * row_id,
            "work_order": {"work_order_number": fo, "budget_number": 500 + row_id,
                           "client_id": None, "client_name": "Acme Corp"},
        },
    }
    record.update(fields)
    return record


REFERENCES = ReferenceData(
    clients=[ReferenceOption(1, "Cliente Sul", "Rua B", "2000-002")],
    carriers=[ReferenceOption(5, "DHL")],
    warehouses=[ReferenceOption(3, "Armazém Norte", "Rua A", "1000-001")],
)


class TestExportRows:
    def test_sorted_by_fo_then_pickup(self):
        records = [
            _record(1, "200"),
            _record(2, "100", pickup_id=1),
            _record(3, "100", pickup_id=3),
        ]
        rows = export_rows(records, REFERENCES)
        assert [r[2] for r in rows] == ["Item 3", "Item 2", "Item 1"]
        assert rows[0][5] == "Armazém Norte Rua A 1000-001"

    def test_notes_include_contacts_and_quantity_falls_back(self):
        record = _record(
            1, "100", notes="Frágil", pickup_contact="Rui", delivery_phone="912", carrier_id=5
        )
        row = export_rows([record], REFERENCES)[0]
        assert row[8] == "Frágil\n\n\nCont. Recolh.\nRui\n\nTel. Entreg.\n912"
        assert row[7] == "DHL"
        assert row[9] == 10


class TestWorkbook:
    def test_layout(self):
        wb = build_workbook([_record(1, "100")], date(2024, 6, 1), REFERENCES)
        ws = wb.active
        assert ws["A1"].value == TITLE
        assert ws["A2"].value == "01/06/2024"
        assert [c.value for c in ws[4]][:3] == ["ORC", "FO", "Descrição"]
        assert ws["B5"].value == "100"

    def test_bytes_are_a_valid_workbook(self):
        content = export_to_bytes([_record(1, "100")], None, REFERENCES)
        ws = load_workbook(io.BytesIO(content)).active
        assert ws.title == "Logistica"
        assert ws["C5"].value == "Item 1"
