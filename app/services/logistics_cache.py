"""
Cache LRU dei record di logistica, per giornata (chiave ``YYYY-MM-DD``).

Nessuna scadenza temporale: un bucket esce dalla cache solo per capacità
(il meno usato di recente) o per invalidazione esplicita.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, List, Optional

from app.services.logistics_records import Record

logger = logging.getLogger(__name__)

MAX_CACHE_ENTRIES = 10


class DeliveryRecordCache:
    """
    Cache giornate -> lista ordinata di record.

    L'ordine di accesso è quello dell'``OrderedDict``: in fondo il più recente,
    in testa il prossimo da espellere. Ogni ``get``/``put`` sposta la chiave
    in fondo.
    """

    def __init__(self, capacity: int = MAX_CACHE_ENTRIES):
        if capacity < 1:
            raise ValueError("La capacità della cache deve essere almeno 1")
        self.capacity = capacity
        self._buckets: "OrderedDict[str, List[Record]]" = OrderedDict()

    def __contains__(self, date_key: str) -> bool:
        return date_key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def keys(self) -> List[str]:
        """Chiavi dalla meno recente alla più recente."""
        return list(self._buckets.keys())

    def get(self, date_key: str) -> Optional[List[Record]]:
        bucket = self._buckets.get(date_key)
        if bucket is None:
            return None
        self._buckets.move_to_end(date_key)
        return bucket

    def peek(self, date_key: str) -> Optional[List[Record]]:
        """Come ``get`` ma senza toccare l'ordine LRU."""
        return self._buckets.get(date_key)

    def put(self, date_key: str, records: List[Record]) -> None:
        self._buckets[date_key] = records
        self._buckets.move_to_end(date_key)
        while len(self._buckets) > self.capacity:
            evicted, _ = self._buckets.popitem(last=False)
            logger.debug("Cache logistica: espulsa la giornata %s", evicted)

    def invalidate(self, date_key: str) -> bool:
        return self._buckets.pop(date_key, None) is not None

    def clear(self) -> None:
        self._buckets.clear()

    def replace_row(self, date_key: str, row_id, row: Record) -> bool:
        """Sostituisce la riga ``row_id`` nel bucket, se presente."""
        bucket = self._buckets.get(date_key)
        if bucket is None:
            return False
        for index, existing in enumerate(bucket):
            if existing.get("id") == row_id:
                bucket[index] = row
                return True
        return False

    def update_rows(
        self,
        date_key: str,
        match: Callable[[Record], bool],
        update: Callable[[Record], Record],
    ) -> int:
        bucket = self._buckets.get(date_key)
        if bucket is None:
            return 0
        count = 0
        for index, existing in enumerate(bucket):
            if match(existing):
                bucket[index] = update(existing)
                count += 1
        return count

    def remove_row(self, date_key: str, row_id) -> bool:
        bucket = self._buckets.get(date_key)
        if bucket is None:
            return False
        kept = [r for r in bucket if r.get("id") != row_id]
        removed = len(kept) != len(bucket)
        self._buckets[date_key] = kept
        return removed
