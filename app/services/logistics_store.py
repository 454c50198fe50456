"""
Accesso al database per la logistica.

``SqlDeliveryStore`` è l'unico punto in cui il coordinatore della logistica
parla con il database: ogni metodo restituisce un ``Result`` (``Ok``/``Err``)
invece di sollevare eccezioni.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import NoResultFound

from app.models import DeliveryRecord
from app.services.logistics_records import (
    DATE_FIELDS,
    ITEM_FIELDS,
    RECORD_FIELDS,
    WORK_ORDER_FIELDS,
    Record,
    serialize_delivery_record,
)
from app.services.results import ErrorKind, Result, ServiceError, ValidationError, guarded
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def parse_iso_date(value: Any) -> date | None:
    """Accetta ``date``, stringa ``YYYY-MM-DD`` o valori vuoti."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Formato data non valido: {value!r} (usa YYYY-MM-DD)") from exc


def _checked_values(values: Mapping[str, Any], allowed: frozenset) -> Dict[str, Any]:
    unknown = set(values) - allowed
    if unknown:
        raise ValidationError(f"Campi non modificabili: {', '.join(sorted(unknown))}")
    cleaned = dict(values)
    for key in DATE_FIELDS & cleaned.keys():
        cleaned[key] = parse_iso_date(cleaned[key])
    return cleaned


class SqlDeliveryStore:
    """Gateway SQLAlchemy per logistica_entregas, items_base e folhas_obras."""

    def fetch_by_date(self, dispatch_date: date) -> Result:
        def _run() -> List[Record]:
            with UnitOfWork() as uow:
                rows = uow.delivery_records.list_by_dispatch_date(dispatch_date)
                return [serialize_delivery_record(r) for r in rows]

        return guarded("fetch_by_date", _run)

    def fetch_one(self, record_id: int) -> Result:
        def _run() -> Record:
            with UnitOfWork() as uow:
                record = uow.delivery_records.get_with_relations(record_id)
                if record is None:
                    raise NoResultFound(f"Record logistica {record_id} non trovato")
                return serialize_delivery_record(record)

        return guarded("fetch_one", _run)

    def update_record(self, record_id: int, values: Mapping[str, Any]) -> Result:
        def _run() -> None:
            cleaned = _checked_values(values, RECORD_FIELDS)
            with UnitOfWork() as uow:
                record = uow.delivery_records.get_by_id(record_id)
                if record is None:
                    raise NoResultFound(f"Record logistica {record_id} non trovato")
                for key, value in cleaned.items():
                    setattr(record, key, value)
                uow.commit()

        return guarded("update_record", _run)

    def update_item(self, item_id: int, values: Mapping[str, Any]) -> Result:
        def _run() -> None:
            cleaned = _checked_values(values, ITEM_FIELDS)
            with UnitOfWork() as uow:
                item = uow.items.get_by_id(item_id)
                if item is None:
                    raise NoResultFound(f"Item {item_id} non trovato")
                for key, value in cleaned.items():
                    setattr(item, key, value)
                uow.commit()

        return guarded("update_item", _run)

    def update_work_order(self, work_order_id: int, values: Mapping[str, Any]) -> Result:
        def _run() -> None:
            cleaned = _checked_values(values, WORK_ORDER_FIELDS)
            with UnitOfWork() as uow:
                work_order = uow.work_orders.get_by_id(work_order_id)
                if work_order is None:
                    raise NoResultFound(f"Folha de obra {work_order_id} non trovata")
                # Controllo preventivo sul numero FO; il vincolo UNIQUE resta
                # comunque l'ultima parola (IntegrityError -> UNIQUE_VIOLATION).
                number = cleaned.get("work_order_number")
                if number and uow.work_orders.number_taken(number, exclude_id=work_order_id):
                    raise ServiceError(
                        ErrorKind.UNIQUE_VIOLATION, f"Numero FO {number} già esistente"
                    )
                for key, value in cleaned.items():
                    setattr(work_order, key, value)
                uow.commit()

        return guarded("update_work_order", _run)

    def insert_record(self, values: Mapping[str, Any]) -> Result:
        def _run() -> Record:
            item_id = values.get("item_id")
            cleaned = _checked_values(
                {k: v for k, v in values.items() if k != "item_id"}, RECORD_FIELDS
            )
            with UnitOfWork() as uow:
                if item_id is None or uow.items.get_by_id(item_id) is None:
                    raise ValidationError("Item di riferimento mancante o inesistente")
                record = DeliveryRecord(item_id=item_id, **cleaned)
                uow.delivery_records.add(record)
                uow.commit()
                created = uow.delivery_records.get_with_relations(record.id)
                return serialize_delivery_record(created)

        return guarded("insert_record", _run)

    def delete_record(self, record_id: int) -> Result:
        def _run() -> bool:
            with UnitOfWork() as uow:
                record = uow.delivery_records.get_by_id(record_id)
                if record is None:
                    raise NoResultFound(f"Record logistica {record_id} non trovato")
                uow.delivery_records.delete(record)
                uow.commit()
                return True

        return guarded("delete_record", _run)
