"""
Export Excel della vista logistica ("Listagem de Recolhas e Entregas").

Riga 1 titolo, riga 2 data, riga 3 vuota, riga 4 intestazioni, dati dalla
riga 5. I record sono ordinati per numero FO, poi luogo di ritiro, poi luogo
di consegna.
"""
from __future__ import annotations

import io
import logging
from datetime import date
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from app.services.logistics_filters import carrier_label, client_label
from app.services.logistics_records import Record, effective_quantity
from app.services.reference_service import ReferenceData

logger = logging.getLogger(__name__)

TITLE = "Listagem de Recolhas e Entregas"
SHEET_NAME = "Logistica"

COLUMNS = [
    ("ORC", 10),
    ("FO", 10),
    ("Descrição", 40),
    ("Guia", 12),
    ("Cliente", 30),
    ("Local Recolha", 35),
    ("Local Entrega", 35),
    ("Transportadora", 20),
    ("Notas", 40),
    ("QT", 8),
]
WRAPPED_COLUMNS = {"Descrição", "Cliente", "Local Recolha", "Local Entrega", "Notas"}

HEADER_FILL = PatternFill(fill_type="solid", fgColor="FF4F4F4F")
STRIPE_FILL = PatternFill(fill_type="solid", fgColor="FFF3F4F6")
WHITE_FILL = PatternFill(fill_type="solid", fgColor="FFFFFFFF")
THIN = Side(style="thin")


def _location_text(record: Record, kind: str, references: ReferenceData) -> str:
    """Etichetta del luogo con indirizzo e codice postale, se noti."""
    location_id = record.get(f"{kind}_location_id")
    option = references.find_location(location_id) if location_id else None
    if option is None:
        return record.get(f"{kind}_location") or ""
    address_line = " ".join(p for p in (option.address, option.postal_code) if p)
    return f"{option.label} {address_line}" if address_line else option.label


def _notes_text(record: Record) -> str:
    parts = []
    if record.get("notes"):
        parts.append(record["notes"])
    if record.get("pickup_contact"):
        parts.append("\nCont. Recolh.\n" + record["pickup_contact"])
    if record.get("pickup_phone"):
        parts.append("Tel. Recolh.\n" + record["pickup_phone"])
    if record.get("delivery_contact"):
        parts.append("Cont. Entreg.\n" + record["delivery_contact"])
    if record.get("delivery_phone"):
        parts.append("Tel. Entreg.\n" + record["delivery_phone"])
    return "\n\n".join(parts)


def _fo_number(record: Record) -> int:
    work_order = (record.get("item") or {}).get("work_order") or {}
    try:
        return int(work_order.get("work_order_number") or 0)
    except (TypeError, ValueError):
        return 0


def export_rows(records: List[Record], references: ReferenceData) -> List[list]:
    """Valori delle righe dati, già ordinate."""
    ordered = sorted(
        records,
        key=lambda r: (
            _fo_number(r),
            _location_text(r, "pickup", references).lower(),
            _location_text(r, "delivery", references).lower(),
        ),
    )
    rows = []
    for record in ordered:
        item = record.get("item") or {}
        work_order = item.get("work_order") or {}
        quantity = effective_quantity(record)
        rows.append([
            work_order.get("budget_number") or "",
            work_order.get("work_order_number") or "",
            record.get("description") or item.get("description") or "",
            record.get("tracking_number") or "",
            client_label(record, references.client_lookup),
            _location_text(record, "pickup", references),
            _location_text(record, "delivery", references),
            carrier_label(record, references.carrier_lookup),
            _notes_text(record),
            quantity if quantity is not None else "",
        ])
    return rows


def build_workbook(
    records: List[Record], selected_date: Optional[date], references: ReferenceData
) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME
    width = len(COLUMNS)

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)
    title_cell = ws.cell(row=1, column=1, value=TITLE)
    title_cell.font = Font(size=18, bold=True)
    title_cell.alignment = Alignment(horizontal="center", vertical="center")

    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=width)
    date_cell = ws.cell(row=2, column=1, value=selected_date.strftime("%d/%m/%Y") if selected_date else "")
    date_cell.font = Font(size=12)
    date_cell.alignment = Alignment(horizontal="center", vertical="center")

    ws.merge_cells(start_row=3, start_column=1, end_row=3, end_column=width)

    for col, (header, col_width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=4, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = Font(color="FFFFFFFF", bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = Border(top=THIN, left=THIN, bottom=THIN, right=THIN)
        ws.column_dimensions[get_column_letter(col)].width = col_width

    rows = export_rows(records, references)
    for index, values in enumerate(rows):
        row_number = 5 + index
        fill = WHITE_FILL if index % 2 == 0 else STRIPE_FILL
        last = index == len(rows) - 1
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_number, column=col, value=value)
            cell.fill = fill
            cell.border = Border(left=THIN, right=THIN, bottom=THIN if last else None)
            cell.alignment = Alignment(
                vertical="top", wrap_text=COLUMNS[col - 1][0] in WRAPPED_COLUMNS
            )

    ws.freeze_panes = "A5"
    return wb


def export_to_bytes(
    records: List[Record], selected_date: Optional[date], references: ReferenceData
) -> bytes:
    wb = build_workbook(records, selected_date, references)
    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(
        "Export logistica generato",
        extra={"rows": len(records), "date": selected_date.isoformat() if selected_date else None},
    )
    return buffer.getvalue()
