"""
Filtri e ordinamento della vista logistica, calcolati sui record in cache.

Tutti i filtri di testo sono sottostringhe case-insensitive e vanno
soddisfatti insieme; un filtro vuoto accetta tutto.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.services.dto.logistics_filters import DeliveryFilters, SortState
from app.services.logistics_records import Record

Lookup = Mapping[Any, str]

DEPARTED_YES = ("sim", "s")
DEPARTED_NO = ("não", "nao", "n")


def _item(record: Record) -> Record:
    return record.get("item") or {}


def _work_order(record: Record) -> Record:
    return _item(record).get("work_order") or {}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def kind_label(record: Record) -> str:
    return "Brindes" if _item(record).get("is_gift") else "Print"


def client_label(record: Record, clients: Lookup) -> str:
    work_order = _work_order(record)
    client_id = work_order.get("client_id")
    return (clients.get(client_id) if client_id else "") or work_order.get("client_name") or ""


def location_label(record: Record, kind: str, locations: Lookup) -> str:
    location_id = record.get(f"{kind}_location_id")
    return (locations.get(location_id) if location_id else "") or record.get(f"{kind}_location") or ""


def carrier_label(record: Record, carriers: Lookup) -> str:
    carrier_id = record.get("carrier_id")
    if not carrier_id:
        return ""
    return carriers.get(carrier_id) or _text(carrier_id)


def is_departed(record: Record) -> bool:
    return bool(_work_order(record).get("departed") or record.get("departed"))


def _bucket_date(bucket: str, today: date) -> Optional[str]:
    if bucket == "today":
        return today.isoformat()
    if bucket == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    return None


def apply_filters(
    records: List[Record],
    filters: DeliveryFilters,
    clients: Lookup = None,
    carriers: Lookup = None,
    locations: Lookup = None,
    today: Optional[date] = None,
) -> List[Record]:
    clients = clients or {}
    carriers = carriers or {}
    locations = locations if locations is not None else clients
    active = filters.active()
    wanted_date = _bucket_date(filters.date_bucket, today or date.today())

    extractors: Dict[str, Callable[[Record], str]] = {
        "budget_number": lambda r: _text(_work_order(r).get("budget_number")),
        "work_order_number": lambda r: _text(_work_order(r).get("work_order_number")),
        "tracking_number": lambda r: _text(r.get("tracking_number")),
        "kind": kind_label,
        "client": lambda r: client_label(r, clients),
        "campaign": lambda r: _text(_work_order(r).get("campaign_name")),
        "item": lambda r: _text(_item(r).get("description")),
        "code": lambda r: _text(_item(r).get("code")),
        "pickup": lambda r: location_label(r, "pickup", locations),
        "delivery": lambda r: location_label(r, "delivery", locations),
        "carrier": lambda r: carrier_label(r, carriers),
        "notes": lambda r: _text(r.get("notes")),
    }

    def matches(record: Record) -> bool:
        if wanted_date is not None and record.get("dispatch_date") != wanted_date:
            return False
        for name, value in active.items():
            if name == "departed":
                if value in DEPARTED_YES and not is_departed(record):
                    return False
                if value in DEPARTED_NO and is_departed(record):
                    return False
                continue
            if value not in extractors[name](record).lower():
                return False
        return True

    return [r for r in records if matches(r)]


def _numeric(value: Any) -> float:
    """Numeri prima, poi i valori non numerici (ordinati per primo carattere)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        return float(text)
    except ValueError:
        return 999999 + ord(text[0])


def sort_accessors(
    clients: Lookup, carriers: Lookup, locations: Lookup
) -> Dict[str, Callable[[Record], Any]]:
    """Colonne ordinabili -> accessor tipizzato (str, numero o bool)."""
    return {
        "budget_number": lambda r: _numeric(_work_order(r).get("budget_number")),
        "work_order_number": lambda r: _numeric(_work_order(r).get("work_order_number")),
        "kind": kind_label,
        "client": lambda r: client_label(r, clients).lower(),
        "campaign": lambda r: _text(_work_order(r).get("campaign_name")).lower(),
        "item": lambda r: _text(_item(r).get("description")).lower(),
        "code": lambda r: _text(_item(r).get("code")).lower(),
        "tracking_number": lambda r: _numeric(r.get("tracking_number")),
        "carrier": lambda r: carrier_label(r, carriers).lower(),
        "pickup": lambda r: location_label(r, "pickup", locations).lower(),
        "delivery": lambda r: location_label(r, "delivery", locations).lower(),
        "quantity": lambda r: r.get("quantity") or 0,
        "notes": lambda r: _text(r.get("notes")).lower(),
        "dispatch_date": lambda r: r.get("dispatch_date") or "",
        "departed": is_departed,
        "completed": lambda r: bool(r.get("completed")),
    }


SORT_COLUMNS = tuple(sort_accessors({}, {}, {}).keys())


def sort_records(
    records: List[Record],
    sort: SortState,
    clients: Lookup = None,
    carriers: Lookup = None,
    locations: Lookup = None,
) -> List[Record]:
    """Ordina per una sola colonna; senza colonna l'ordine resta quello di lettura."""
    clients = clients or {}
    carriers = carriers or {}
    locations = locations if locations is not None else clients
    if not sort.column:
        return list(records)
    accessor = sort_accessors(clients, carriers, locations).get(sort.column)
    if accessor is None:
        raise ValueError(f"Colonna di ordinamento sconosciuta: {sort.column}")
    return sorted(records, key=accessor, reverse=sort.direction == "desc")
