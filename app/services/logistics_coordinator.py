"""
Coordinatore della vista logistica.

Tiene per una sessione:
- la giornata attiva e la lista "viva" dei suoi record;
- la cache LRU delle giornate già lette;
- lo stato delle modifiche ottimistiche in corso (generazioni e snapshot).

Ogni modifica viene applicata subito in memoria (lista viva + bucket della
giornata attiva), poi inviata al database; in caso di errore il campo torna
all'ultimo valore confermato, a meno che una modifica più recente dello
stesso campo sia ancora in corso.
"""
from __future__ import annotations

import copy
import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional

from app.services.logistics_cache import DeliveryRecordCache
from app.services.logistics_records import (
    DATE_FIELDS,
    ITEM_FIELDS,
    RECORD_FIELDS,
    WORK_ORDER_FIELDS,
    Record,
    dedupe_by_id,
    effective_quantity,
    normalize_record,
)
from app.services.logistics_store import SqlDeliveryStore, parse_iso_date
from app.services.reference_service import ReferenceData
from app.services.results import Err, ErrorKind, Ok, Result, ValidationError

logger = logging.getLogger(__name__)

LOCATION_KINDS = ("pickup", "delivery")


class CancellationToken:
    """Segnale di annullamento legato alla vista attiva di una sessione."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def date_key(day: Any) -> str:
    """Chiave di cache ``YYYY-MM-DD`` per una data o stringa."""
    parsed = parse_iso_date(day)
    if parsed is None:
        raise ValidationError("Data obbligatoria")
    return parsed.isoformat()


def _parse_int(value: Any) -> Optional[int]:
    """Intero da input libero; ``None`` per valori vuoti o non numerici."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _parse_strict_int(value: Any, label: str) -> Optional[int]:
    """Come ``_parse_int`` ma un valore non numerico è un errore di validazione."""
    if value in (None, ""):
        return None
    parsed = _parse_int(value)
    if parsed is None:
        raise ValidationError(f"{label} non valido: {value!r}")
    return parsed


def _as_stored(field: str, value: Any) -> Any:
    if field in DATE_FIELDS:
        parsed = parse_iso_date(value)
        return parsed.isoformat() if parsed else None
    return value


class LogisticsCoordinator:
    def __init__(
        self,
        store: Optional[SqlDeliveryStore] = None,
        cache: Optional[DeliveryRecordCache] = None,
        references: Optional[ReferenceData] = None,
        today: Callable[[], date] = date.today,
    ):
        self.store = store or SqlDeliveryStore()
        self.cache = cache or DeliveryRecordCache()
        self.references = references or ReferenceData()
        self.active_date: Optional[str] = None
        self._records: List[Record] = []
        self._today = today
        self._lock = threading.RLock()
        self._generation = 0
        # row_id -> {generazione: campi toccati}
        self._pending: Dict[Any, Dict[int, FrozenSet[str]]] = {}
        # row_id -> ultima versione confermata dal database
        self._known_good: Dict[Any, Record] = {}
        self._view_token: Optional[CancellationToken] = None

    # ------------------------------------------------------------------
    # Vista e cancellazione
    # ------------------------------------------------------------------
    def begin_view(self) -> CancellationToken:
        """Nuovo token per la vista; quello precedente viene annullato."""
        with self._lock:
            if self._view_token is not None:
                self._view_token.cancel()
            self._view_token = CancellationToken()
            return self._view_token

    def close(self) -> None:
        with self._lock:
            if self._view_token is not None:
                self._view_token.cancel()
                self._view_token = None
            self.cache.clear()
            self._records = []
            self._pending.clear()
            self._known_good.clear()
            self.active_date = None

    @property
    def records(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._records)

    def set_references(self, references: ReferenceData) -> None:
        with self._lock:
            self.references = references

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    def get(self, day: Any, token: Optional[CancellationToken] = None) -> Result:
        """
        Record della giornata: dalla cache se presente, altrimenti dal database.

        Una lettura conclusa dopo l'annullamento del ``token`` non modifica né
        la cache né la lista viva e restituisce ``Err(CANCELLED)``.
        """
        try:
            key = date_key(day)
        except ValidationError as exc:
            return Err(ErrorKind.VALIDATION, str(exc))

        with self._lock:
            cached = self.cache.get(key)
            if cached is not None:
                self._activate(key, cached)
                logger.debug("Cache logistica: hit per %s", key)
                return Ok(copy.deepcopy(cached))

        result = self.store.fetch_by_date(parse_iso_date(key))
        if isinstance(result, Err):
            return result

        records = [normalize_record(r) for r in dedupe_by_id(result.value)]
        with self._lock:
            if token is not None and token.cancelled:
                logger.info("Lettura logistica per %s annullata", key)
                return Err(ErrorKind.CANCELLED, f"Lettura per {key} annullata")
            self.cache.put(key, records)
            self._activate(key, records)
        return Ok(copy.deepcopy(records))

    def put(self, day: Any, records: List[Record]) -> None:
        key = date_key(day)
        with self._lock:
            self.cache.put(key, copy.deepcopy(records))
            if key == self.active_date:
                self._records = copy.deepcopy(records)

    def invalidate(self, day: Any) -> bool:
        key = date_key(day)
        with self._lock:
            return self.cache.invalidate(key)

    def _activate(self, key: str, records: List[Record]) -> None:
        self.active_date = key
        self._records = copy.deepcopy(records)

    # ------------------------------------------------------------------
    # Ricerca e modifica in memoria
    # ------------------------------------------------------------------
    def _find(self, row_id: Any) -> Optional[Record]:
        for row in self._records:
            if row.get("id") == row_id:
                return row
        return None

    def _apply_local(self, row_id: Any, values: Mapping[str, Any]) -> None:
        def update(row: Record) -> Record:
            patched = dict(row)
            patched.update(copy.deepcopy(dict(values)))
            return patched

        for index, row in enumerate(self._records):
            if row.get("id") == row_id:
                self._records[index] = update(row)
        if self.active_date is not None:
            self.cache.update_rows(
                self.active_date, lambda r: r.get("id") == row_id, update
            )

    def _replace_local(self, row_id: Any, row: Record, key: Optional[str]) -> None:
        for index, existing in enumerate(self._records):
            if existing.get("id") == row_id:
                self._records[index] = copy.deepcopy(row)
        if key is not None:
            self.cache.replace_row(key, row_id, copy.deepcopy(row))

    def _place(self, row_id: Any, row: Record, key: Optional[str]) -> None:
        """
        Rimette la riga nella giornata ``key``; se la sua data di uscita è
        cambiata la toglie da lì e svuota il bucket della nuova giornata.
        """
        target = row.get("dispatch_date")
        if key is None or target == key:
            self._replace_local(row_id, row, key)
            return
        self.cache.remove_row(key, row_id)
        if key == self.active_date:
            self._records = [r for r in self._records if r.get("id") != row_id]
        if target:
            self.cache.invalidate(target)
        logger.info(
            "Record %s spostato da %s a %s",
            row_id,
            key,
            target,
            extra={"record_id": row_id, "from_date": key, "to_date": target},
        )

    def _patch_nested(self, match: Callable[[Record], bool], patch: Callable[[Record], Record]) -> None:
        self._records = [patch(r) if match(r) else r for r in self._records]
        if self.active_date is not None:
            self.cache.update_rows(self.active_date, match, patch)

    # ------------------------------------------------------------------
    # Modifiche ottimistiche
    # ------------------------------------------------------------------
    def patch_row(self, row_id: Any, field: str, value: Any) -> Result:
        return self.patch_fields(row_id, {field: value})

    def patch_fields(self, row_id: Any, values: Mapping[str, Any]) -> Result:
        """Applica subito ``values`` alla riga e li scrive nel database."""
        unknown = set(values) - RECORD_FIELDS
        if unknown:
            return Err(ErrorKind.VALIDATION, f"Campi non modificabili: {', '.join(sorted(unknown))}")
        try:
            local_values = {k: _as_stored(k, v) for k, v in values.items()}
        except ValidationError as exc:
            return Err(ErrorKind.VALIDATION, str(exc))

        fields = frozenset(values)
        with self._lock:
            row = self._find(row_id)
            if row is None:
                return Err(ErrorKind.NOT_FOUND, f"Record logistica {row_id} non presente nella vista")
            self._generation += 1
            generation = self._generation
            pending = self._pending.setdefault(row_id, {})
            if not pending:
                self._known_good[row_id] = copy.deepcopy(row)
            pending[generation] = fields
            self._apply_local(row_id, local_values)

        result = self.store.update_record(row_id, values)

        with self._lock:
            pending = self._pending.get(row_id, {})
            pending.pop(generation, None)
            known = self._known_good.get(row_id)
            if isinstance(result, Ok):
                if known is not None:
                    known.update(copy.deepcopy(local_values))
            elif known is not None:
                newer = set()
                for other_generation, other_fields in pending.items():
                    if other_generation > generation:
                        newer |= other_fields
                restore = {f: known.get(f) for f in fields - newer}
                if restore:
                    logger.warning(
                        "Ripristino del record %s dopo errore (%s)",
                        row_id,
                        result.kind.value,
                        extra={"record_id": row_id, "fields": sorted(restore)},
                    )
                    self._apply_local(row_id, restore)
            if not pending:
                self._pending.pop(row_id, None)
                self._known_good.pop(row_id, None)
        return result

    def refetch_row(self, row_id: Any, day: Any = None) -> Result:
        """
        Rilegge la riga dal database e la sostituisce in lista e cache.

        Una riga che nel frattempo ha cambiato data di uscita esce dalla
        giornata ``day`` (o da quella attiva).
        """
        try:
            key = date_key(day) if day is not None else self.active_date
        except ValidationError as exc:
            return Err(ErrorKind.VALIDATION, str(exc))
        with self._lock:
            current = copy.deepcopy(self._find(row_id))

        result = self.store.fetch_one(row_id)
        if isinstance(result, Err):
            return result

        row = normalize_record(result.value, current)
        with self._lock:
            if row_id in self._known_good:
                self._known_good[row_id] = copy.deepcopy(row)
            self._place(row_id, row, key)
        return Ok(copy.deepcopy(row))

    def _confirm(self, row_id: Any) -> Result:
        """
        Rilettura dopo una scrittura riuscita.

        Se la rilettura fallisce la modifica resta comunque salvata: si
        restituisce la copia locale già aggiornata.
        """
        refreshed = self.refetch_row(row_id)
        if isinstance(refreshed, Ok):
            return refreshed
        logger.warning(
            "Record %s salvato ma non riletto (%s)",
            row_id,
            refreshed.kind.value,
            extra={"record_id": row_id, "error_kind": refreshed.kind.value},
        )
        with self._lock:
            row = copy.deepcopy(self._find(row_id))
            if row is None:
                return refreshed
            self._place(row_id, row, self.active_date)
        return Ok(row)

    # ------------------------------------------------------------------
    # Operazioni della vista
    # ------------------------------------------------------------------
    def update_record_field(self, row_id: Any, field: str, value: Any) -> Result:
        if field not in RECORD_FIELDS:
            return Err(ErrorKind.VALIDATION, f"Campo non modificabile: {field}")

        values: Dict[str, Any] = {field: value}
        if field == "tracking_number":
            values[field] = _parse_int(value)
        elif field == "quantity":
            try:
                values[field] = _parse_strict_int(value, "Quantità")
            except ValidationError as exc:
                return Err(ErrorKind.VALIDATION, str(exc))
        elif field in ("completed", "departed", "is_delivery"):
            values[field] = bool(value)

        with self._lock:
            row = self._find(row_id)
            previous_date = row.get("dispatch_date") if row else None
            has_completed_date = bool(row and row.get("completed_date"))

        if field == "completed":
            if values["completed"] and not has_completed_date:
                values["completed_date"] = self._today().isoformat()
            elif not values["completed"]:
                values["completed_date"] = None

        result = self.patch_fields(row_id, values)
        if isinstance(result, Err):
            return result
        confirmed = self._confirm(row_id)
        if field == "dispatch_date" and previous_date:
            with self._lock:
                if previous_date != self.active_date:
                    self.cache.invalidate(previous_date)
        return confirmed

    def update_location(self, row_id: Any, kind: str, location_id: Any) -> Result:
        """Imposta luogo di ritiro o consegna: id ed etichetta insieme."""
        if kind not in LOCATION_KINDS:
            return Err(ErrorKind.VALIDATION, f"Tipo di luogo non valido: {kind}")

        label = None
        parsed_id = _parse_int(location_id)
        if location_id not in (None, "") and parsed_id is None:
            return Err(ErrorKind.VALIDATION, f"Id luogo non valido: {location_id!r}")
        if parsed_id is not None:
            option = self.references.find_location(parsed_id)
            if option is None:
                return Err(ErrorKind.VALIDATION, f"Luogo {parsed_id} sconosciuto")
            label = option.label

        values = {f"{kind}_location_id": parsed_id, f"{kind}_location": label}
        result = self.patch_fields(row_id, values)
        if isinstance(result, Err):
            return result
        return self._confirm(row_id)

    def update_item_field(self, item_id: Any, field: str, value: Any) -> Result:
        if field not in ITEM_FIELDS:
            return Err(ErrorKind.VALIDATION, f"Campo item non modificabile: {field}")
        if field == "quantity":
            try:
                value = _parse_strict_int(value, "Quantità")
            except ValidationError as exc:
                return Err(ErrorKind.VALIDATION, str(exc))
        elif field == "is_gift":
            value = bool(value)

        result = self.store.update_item(item_id, {field: value})
        if isinstance(result, Err):
            return result

        def match(row: Record) -> bool:
            return (row.get("item") or {}).get("id") == item_id

        def patch(row: Record) -> Record:
            patched = copy.deepcopy(row)
            patched["item"][field] = value
            return patched

        with self._lock:
            self._patch_nested(match, patch)
        return Ok(None)

    def update_work_order_field(self, work_order_id: Any, field: str, value: Any) -> Result:
        if field not in WORK_ORDER_FIELDS:
            return Err(ErrorKind.VALIDATION, f"Campo FO non modificabile: {field}")

        if field == "budget_number":
            try:
                value = _parse_strict_int(value, "Numero ORC")
            except ValidationError as exc:
                return Err(ErrorKind.VALIDATION, str(exc))
        elif field == "work_order_number":
            value = str(value).strip() if value is not None else None
            value = value or None
        elif field == "departed":
            value = bool(value)

        result = self.store.update_work_order(work_order_id, {field: value})
        if isinstance(result, Err):
            return result

        def match(row: Record) -> bool:
            item = row.get("item") or {}
            work_order = item.get("work_order") or {}
            return work_order.get("id") == work_order_id or item.get("work_order_id") == work_order_id

        def patch(row: Record) -> Record:
            patched = copy.deepcopy(row)
            patched["item"]["work_order"][field] = value if value is not None else (
                "" if field == "work_order_number" else None
            )
            return patched

        with self._lock:
            self._patch_nested(match, patch)
        return Ok(None)

    def delete_row(self, row_id: Any) -> Result:
        result = self.store.delete_record(row_id)
        if isinstance(result, Err):
            return result
        with self._lock:
            self._records = [r for r in self._records if r.get("id") != row_id]
            if self.active_date is not None:
                self.cache.remove_row(self.active_date, row_id)
            self._pending.pop(row_id, None)
            self._known_good.pop(row_id, None)
        return Ok(True)

    def duplicate_row(self, row_id: Any, token: Optional[CancellationToken] = None) -> Result:
        """
        Crea una nuova spedizione per lo stesso item della riga.

        La copia ha guia vuota, la quantità della riga (o quella base
        dell'item) e data di spedizione uguale alla giornata attiva.
        """
        with self._lock:
            source = copy.deepcopy(self._find(row_id))
            key = self.active_date or self._today().isoformat()
        if source is None:
            return Err(ErrorKind.NOT_FOUND, f"Record logistica {row_id} non presente nella vista")

        item_id = source.get("item_id") or (source.get("item") or {}).get("id")
        if item_id is None:
            return Err(ErrorKind.VALIDATION, "La riga non ha un item di riferimento")

        values = {
            "item_id": item_id,
            "description": source.get("description"),
            "tracking_number": None,
            "pickup_location_id": source.get("pickup_location_id"),
            "pickup_location": source.get("pickup_location"),
            "delivery_location_id": source.get("delivery_location_id"),
            "delivery_location": source.get("delivery_location"),
            "carrier_id": source.get("carrier_id"),
            "notes": source.get("notes"),
            "pickup_contact": source.get("pickup_contact"),
            "pickup_phone": source.get("pickup_phone"),
            "delivery_contact": source.get("delivery_contact"),
            "delivery_phone": source.get("delivery_phone"),
            "quantity": effective_quantity(source),
            "delivery_date": key,
            "dispatch_date": key,
            "completed": False,
            "departed": False,
            "is_delivery": True,
        }
        result = self.store.insert_record(values)
        if isinstance(result, Err):
            return result

        created = normalize_record(result.value, source)
        with self._lock:
            self.cache.invalidate(key)
        refreshed = self.get(key, token)
        if isinstance(refreshed, Err):
            return refreshed
        return Ok(created)
