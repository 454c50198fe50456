"""
Dati di riferimento per la logistica: clienti, trasportatori, magazzini.

Vengono caricati una volta per sessione di logistica; in caso di errore il
caricamento viene ritentato con backoff esponenziale (0.3s, 0.9s, 2.7s).
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from flask import current_app

from app.services.results import Ok, Result, guarded
from app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceOption:
    value: int
    label: str
    address: Optional[str] = None
    postal_code: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "value": self.value,
            "label": self.label,
            "address": self.address,
            "postal_code": self.postal_code,
        }


@dataclass
class ReferenceData:
    clients: List[ReferenceOption] = field(default_factory=list)
    carriers: List[ReferenceOption] = field(default_factory=list)
    warehouses: List[ReferenceOption] = field(default_factory=list)

    @staticmethod
    def _lookup(options: List[ReferenceOption]) -> Dict[int, str]:
        return {o.value: o.label for o in options}

    @property
    def client_lookup(self) -> Dict[int, str]:
        return self._lookup(self.clients)

    @property
    def carrier_lookup(self) -> Dict[int, str]:
        return self._lookup(self.carriers)

    @property
    def warehouse_lookup(self) -> Dict[int, str]:
        return self._lookup(self.warehouses)

    def location_lookup(self) -> Dict[int, str]:
        """Luoghi di ritiro/consegna: magazzini, poi clienti per gli id non coperti."""
        lookup = self.client_lookup
        lookup.update(self.warehouse_lookup)
        return lookup

    def find_location(self, location_id: int) -> Optional[ReferenceOption]:
        for option in self.warehouses + self.clients:
            if option.value == location_id:
                return option
        return None

    def to_dict(self) -> Dict[str, List[Dict[str, object]]]:
        return {
            "clients": [o.to_dict() for o in self.clients],
            "carriers": [o.to_dict() for o in self.carriers],
            "warehouses": [o.to_dict() for o in self.warehouses],
        }


def fetch_reference_data() -> Result:
    """Singolo tentativo di lettura delle tre tabelle."""

    def _run() -> ReferenceData:
        with UnitOfWork() as uow:
            clients = [
                ReferenceOption(c.id, c.name, c.address, c.postal_code)
                for c in uow.clients.list_all_ordered()
            ]
            carriers = [
                ReferenceOption(t.id, t.name)
                for t in uow.carriers.list_all_ordered()
            ]
            warehouses = [
                ReferenceOption(a.id, a.name, a.address, a.postal_code)
                for a in uow.warehouses.search_by_name_or_phc(None)
            ]
            return ReferenceData(clients=clients, carriers=carriers, warehouses=warehouses)

    return guarded("fetch_reference_data", _run)


def load_reference_data(
    fetch: Callable[[], Result] = fetch_reference_data,
    *,
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Result:
    """
    Carica i dati di riferimento con al massimo ``max_retries`` tentativi extra.

    Il ritardo prima del tentativo n (1-based) è ``base_delay * 3 ** (n - 1)``.
    """
    if max_retries is None:
        max_retries = current_app.config.get("REFERENCE_MAX_RETRIES", 3)
    if base_delay is None:
        base_delay = current_app.config.get("REFERENCE_RETRY_BASE_DELAY", 0.3)

    attempt = 0
    while True:
        result = fetch()
        if isinstance(result, Ok):
            return result

        logger.error(
            "Errore nel caricamento dei dati di riferimento (tentativo %s): %s",
            attempt + 1,
            result.message,
            extra={"attempt": attempt + 1, "error_kind": result.kind.value},
        )
        if attempt >= max_retries:
            return result

        attempt += 1
        sleep(base_delay * 3 ** (attempt - 1))


__all__ = [
    "ReferenceOption",
    "ReferenceData",
    "fetch_reference_data",
    "load_reference_data",
]
