"""
Forma dei record di logistica usata da cache, filtri ed export.

Un record è un dict JSON-compatibile (date in formato ISO) con un oggetto
``item`` annidato che contiene a sua volta ``work_order``. ``normalize_record``
garantisce che gli oggetti annidati esistano sempre, così il codice a valle
non deve mai controllare ``None``.
"""

from __future__ import annotations

import copy
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from app.models import DeliveryRecord, Item, WorkOrder

Record = Dict[str, Any]

EMPTY_WORK_ORDER: Record = {
    "id": None,
    "budget_number": None,
    "work_order_number": "",
    "campaign_name": "",
    "client_id": None,
    "client_name": "",
    "departed": False,
}

EMPTY_ITEM: Record = {
    "id": None,
    "description": "",
    "code": "",
    "quantity": None,
    "is_gift": False,
    "work_order_id": None,
    "work_order": None,
}

# Campi di logistica_entregas modificabili dalla vista
RECORD_FIELDS = frozenset({
    "description",
    "tracking_number",
    "pickup_location_id",
    "pickup_location",
    "delivery_location_id",
    "delivery_location",
    "carrier_id",
    "notes",
    "pickup_contact",
    "pickup_phone",
    "delivery_contact",
    "delivery_phone",
    "quantity",
    "delivery_date",
    "dispatch_date",
    "completed",
    "completed_date",
    "departed",
    "is_delivery",
})

DATE_FIELDS = frozenset({"delivery_date", "dispatch_date", "completed_date"})

ITEM_FIELDS = frozenset({"description", "code", "quantity", "is_gift"})

WORK_ORDER_FIELDS = frozenset({
    "budget_number",
    "work_order_number",
    "campaign_name",
    "client_id",
    "client_name",
    "departed",
})


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_work_order(work_order: Optional[WorkOrder]) -> Optional[Record]:
    if work_order is None:
        return None
    return {
        "id": work_order.id,
        "budget_number": work_order.budget_number,
        "work_order_number": work_order.work_order_number or "",
        "campaign_name": work_order.campaign_name or "",
        "client_id": work_order.client_id,
        "client_name": work_order.client_name or "",
        "departed": bool(work_order.departed),
    }


def serialize_item(item: Optional[Item]) -> Optional[Record]:
    if item is None:
        return None
    return {
        "id": item.id,
        "description": item.description or "",
        "code": item.code or "",
        "quantity": item.quantity,
        "is_gift": bool(item.is_gift),
        "work_order_id": item.work_order_id,
        "work_order": serialize_work_order(item.work_order),
    }


def serialize_delivery_record(record: DeliveryRecord) -> Record:
    """Converte il modello in dict; le relazioni mancanti restano ``None``."""
    return {
        "id": record.id,
        "item_id": record.item_id,
        "description": record.description,
        "tracking_number": record.tracking_number,
        "pickup_location_id": record.pickup_location_id,
        "pickup_location": record.pickup_location,
        "delivery_location_id": record.delivery_location_id,
        "delivery_location": record.delivery_location,
        "carrier_id": record.carrier_id,
        "notes": record.notes,
        "pickup_contact": record.pickup_contact,
        "pickup_phone": record.pickup_phone,
        "delivery_contact": record.delivery_contact,
        "delivery_phone": record.delivery_phone,
        "quantity": record.quantity,
        "delivery_date": _iso(record.delivery_date),
        "dispatch_date": _iso(record.dispatch_date),
        "completed": bool(record.completed),
        "completed_date": _iso(record.completed_date),
        "departed": bool(record.departed),
        "is_delivery": bool(record.is_delivery),
        "item": serialize_item(record.item),
    }


def normalize_record(raw: Record, current: Optional[Record] = None) -> Record:
    """
    Restituisce una copia profonda di ``raw`` con le relazioni garantite.

    Se ``current`` (la versione locale della riga) è presente, le relazioni
    mancanti e la descrizione dell'item mancante vengono presi da lì invece
    che dai valori vuoti di default.
    """
    record = copy.deepcopy(raw)
    current_item = (current or {}).get("item") or None

    item = record.get("item")
    if not item:
        item = copy.deepcopy(current_item) if current_item else copy.deepcopy(EMPTY_ITEM)
        record["item"] = item

    if current_item and current_item.get("description") and not item.get("description"):
        item["description"] = current_item["description"]

    if not item.get("work_order"):
        fallback_wo = (current_item or {}).get("work_order")
        item["work_order"] = (
            copy.deepcopy(fallback_wo) if fallback_wo else copy.deepcopy(EMPTY_WORK_ORDER)
        )

    # Descrizione diretta prima, poi quella dell'item
    if not record.get("description") and item.get("description"):
        record["description"] = item["description"]

    return record


def dedupe_by_id(records: Iterable[Record]) -> List[Record]:
    """Rimuove i duplicati per id mantenendo l'ultima occorrenza nella posizione della prima."""
    unique: Dict[Any, Record] = {}
    for record in records:
        unique[record.get("id")] = record
    return list(unique.values())


def effective_quantity(record: Record) -> Optional[int]:
    """Quantità della spedizione, oppure quella base dell'item se non impostata."""
    if record.get("quantity") is not None:
        return record["quantity"]
    return (record.get("item") or {}).get("quantity")
