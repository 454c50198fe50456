"""
Servizi per le tabelle di definizione (anagrafiche).

Magazzini, fornitori, clienti, trasportatori, macchine, festività ed
eccezioni IVA condividono lo stesso schema CRUD: ogni risorsa dichiara i
propri campi con la relativa funzione di pulizia/validazione e la ricerca
testuale del repository.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.exc import NoResultFound

from app.models import Carrier, Client, Holiday, Machine, Supplier, VatException, Warehouse
from app.services.logging import log_structured_event
from app.services.logistics_store import parse_iso_date
from app.services.results import Err, ErrorKind, Result, ValidationError, guarded
from app.services.unit_of_work import UnitOfWork


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _decimal(value: Any) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value).replace(",", "."))
    except InvalidOperation as exc:
        raise ValidationError(f"Valore numerico non valido: {value!r}") from exc


def _vat_rate(value: Any) -> Optional[Decimal]:
    rate = _decimal(value)
    if rate is not None and not (Decimal("0") <= rate <= Decimal("100")):
        raise ValidationError("L'aliquota IVA deve essere compresa tra 0 e 100")
    return rate


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "sim", "s", "on", "yes")
    return bool(value)


@dataclass(frozen=True)
class DefinitionResource:
    name: str
    model: type
    repo_attr: str
    search_method: str
    fields: Dict[str, Callable[[Any], Any]]
    required: Tuple[str, ...]

    def repository(self, uow: UnitOfWork):
        return getattr(uow, self.repo_attr)

    def serialize(self, entity) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": entity.id}
        for field_name in self.fields:
            value = getattr(entity, field_name)
            if isinstance(value, Decimal):
                value = float(value)
            elif isinstance(value, date):
                value = value.isoformat()
            data[field_name] = value
        return data

    def clean(self, data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
        unknown = set(data) - set(self.fields)
        if unknown:
            raise ValidationError(f"Campi sconosciuti: {', '.join(sorted(unknown))}")
        cleaned = {key: self.fields[key](value) for key, value in data.items()}
        required = [f for f in self.required if f in cleaned or not partial]
        missing = [f for f in required if cleaned.get(f) in (None, "")]
        if missing:
            raise ValidationError(f"Campi obbligatori mancanti: {', '.join(missing)}")
        return cleaned


_ADDRESS_FIELDS = {
    "phc_number": _text,
    "name": _text,
    "address": _text,
    "postal_code": _text,
}

RESOURCES: Dict[str, DefinitionResource] = {
    "warehouses": DefinitionResource(
        "warehouses", Warehouse, "warehouses", "search_by_name_or_phc",
        dict(_ADDRESS_FIELDS), ("name",),
    ),
    "suppliers": DefinitionResource(
        "suppliers", Supplier, "suppliers", "search_by_name_or_phc",
        {**_ADDRESS_FIELDS, "phone": _text, "email": _text, "main_contact": _text},
        ("name",),
    ),
    "clients": DefinitionResource(
        "clients", Client, "clients", "search_by_name_or_phc",
        dict(_ADDRESS_FIELDS), ("name",),
    ),
    "carriers": DefinitionResource(
        "carriers", Carrier, "carriers", "search_by_name",
        {"name": _text}, ("name",),
    ),
    "machines": DefinitionResource(
        "machines", Machine, "machines", "search_by_name",
        {"name": _text, "value_m2": _decimal}, ("name",),
    ),
    "holidays": DefinitionResource(
        "holidays", Holiday, "holidays", "list_ordered",
        {"holiday_date": parse_iso_date, "description": _text},
        ("holiday_date", "description"),
    ),
    "vat-exceptions": DefinitionResource(
        "vat-exceptions", VatException, "vat_exceptions", "search_by_supplier",
        {"supplier_name": _text, "vat_rate": _vat_rate, "is_active": _flag, "notes": _text},
        ("supplier_name", "vat_rate"),
    ),
}


def get_resource(name: str) -> Optional[DefinitionResource]:
    return RESOURCES.get(name)


def _unknown_resource(name: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, f"Risorsa sconosciuta: {name}")


def list_definitions(name: str, term: Optional[str] = None, year: Optional[int] = None) -> Result:
    """Elenco ordinato, filtrato per ``term`` (o per anno, per le festività)."""
    resource = get_resource(name)
    if resource is None:
        return _unknown_resource(name)

    def _run() -> List[Dict[str, Any]]:
        with UnitOfWork() as uow:
            search = getattr(resource.repository(uow), resource.search_method)
            rows = search(year) if resource.name == "holidays" else search(term)
            return [resource.serialize(r) for r in rows]

    return guarded(f"list_{name}", _run)


def create_definition(name: str, data: Mapping[str, Any]) -> Result:
    resource = get_resource(name)
    if resource is None:
        return _unknown_resource(name)

    def _run() -> Dict[str, Any]:
        cleaned = resource.clean(data)
        with UnitOfWork() as uow:
            entity = resource.model(**cleaned)
            resource.repository(uow).add(entity)
            uow.commit()
            log_structured_event(
                "definition_created",
                message=f"Creato record {name}",
                resource=name,
                entity_id=entity.id,
            )
            return resource.serialize(entity)

    return guarded(f"create_{name}", _run)


def update_definition(name: str, entity_id: int, data: Mapping[str, Any]) -> Result:
    """Aggiornamento parziale: solo i campi presenti in ``data``."""
    resource = get_resource(name)
    if resource is None:
        return _unknown_resource(name)

    def _run() -> Dict[str, Any]:
        cleaned = resource.clean(data, partial=True)
        with UnitOfWork() as uow:
            entity = resource.repository(uow).get_by_id(entity_id)
            if entity is None:
                raise NoResultFound(f"{name} {entity_id} non trovato")
            for key, value in cleaned.items():
                setattr(entity, key, value)
            uow.commit()
            return resource.serialize(entity)

    return guarded(f"update_{name}", _run)


def delete_definition(name: str, entity_id: int) -> Result:
    resource = get_resource(name)
    if resource is None:
        return _unknown_resource(name)

    def _run() -> bool:
        with UnitOfWork() as uow:
            repo = resource.repository(uow)
            entity = repo.get_by_id(entity_id)
            if entity is None:
                raise NoResultFound(f"{name} {entity_id} non trovato")
            repo.delete(entity)
            uow.commit()
            log_structured_event(
                "definition_deleted",
                message=f"Eliminato record {name}",
                resource=name,
                entity_id=entity_id,
            )
            return True

    return guarded(f"delete_{name}", _run)
