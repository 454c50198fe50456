"""
Creazione di una nuova spedizione dalla vista logistica.

Folha de obra, item e record di logistica vengono creati nella stessa
transazione: se un passo fallisce non resta nulla di parziale.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import NoResultFound

from app.models import DeliveryRecord, Item, WorkOrder
from app.services.logging import log_structured_event
from app.services.logistics_records import RECORD_FIELDS, serialize_delivery_record
from app.services.logistics_store import parse_iso_date
from app.services.results import ErrorKind, Result, ServiceError, ValidationError, guarded
from app.services.unit_of_work import UnitOfWork


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _clean_int(value: Any, label: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{label} non valido: {value!r}") from exc


def _resolve_work_order(uow: UnitOfWork, data: Mapping[str, Any]) -> WorkOrder:
    """Folha de obra esistente (``id``) oppure nuova dai campi indicati."""
    existing_id = data.get("id")
    if existing_id is not None:
        work_order = uow.work_orders.get_by_id(existing_id)
        if work_order is None:
            raise NoResultFound(f"Folha de obra {existing_id} non trovata")
        return work_order

    number = _clean_text(data.get("work_order_number"))
    if number and uow.work_orders.number_taken(number):
        raise ServiceError(ErrorKind.UNIQUE_VIOLATION, f"Numero FO {number} già esistente")

    client_id = _clean_int(data.get("client_id"), "Cliente")
    client_name = _clean_text(data.get("client_name"))
    if client_id is not None:
        client = uow.clients.get_by_id(client_id)
        if client is None:
            raise ValidationError(f"Cliente {client_id} inesistente")
        client_name = client_name or client.name

    work_order = WorkOrder(
        budget_number=_clean_int(data.get("budget_number"), "Numero ORC"),
        work_order_number=number,
        campaign_name=_clean_text(data.get("campaign_name")),
        client_id=client_id,
        client_name=client_name,
    )
    uow.work_orders.add(work_order)
    return work_order


def create_dispatch(payload: Mapping[str, Any]) -> Result:
    """
    Crea folha de obra (o riusa quella indicata), item e record di logistica.

    ``payload`` = ``{"work_order": {...}, "item": {...}, "record": {...}}``.
    Restituisce il record creato, serializzato.
    """

    def _run() -> Dict[str, Any]:
        wo_data = payload.get("work_order") or {}
        item_data = payload.get("item") or {}
        record_data = dict(payload.get("record") or {})

        description = _clean_text(item_data.get("description"))
        if not description:
            raise ValidationError("Descrizione dell'item obbligatoria")
        unknown = set(record_data) - RECORD_FIELDS
        if unknown:
            raise ValidationError(f"Campi non modificabili: {', '.join(sorted(unknown))}")
        for key in ("delivery_date", "dispatch_date", "completed_date"):
            if key in record_data:
                record_data[key] = parse_iso_date(record_data[key])
        for key, label in (("tracking_number", "Guia"), ("quantity", "Quantità")):
            if key in record_data:
                record_data[key] = _clean_int(record_data[key], label)

        with UnitOfWork() as uow:
            work_order = _resolve_work_order(uow, wo_data)
            item = Item(
                work_order=work_order,
                description=description,
                code=_clean_text(item_data.get("code")),
                quantity=_clean_int(item_data.get("quantity"), "Quantità"),
                is_gift=bool(item_data.get("is_gift")),
            )
            uow.items.add(item)
            record_data.setdefault("description", description)
            record_data.setdefault("is_delivery", True)
            record = DeliveryRecord(item=item, **record_data)
            uow.delivery_records.add(record)
            uow.commit()

            log_structured_event(
                "dispatch_created",
                message="Nuova spedizione creata",
                work_order_id=work_order.id,
                item_id=item.id,
                record_id=record.id,
            )
            return serialize_delivery_record(record)

    return guarded("create_dispatch", _run)
