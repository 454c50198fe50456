"""DTO per i filtri della vista logistica."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

DATE_BUCKETS = ("today", "tomorrow", "all")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class DeliveryFilters:
    budget_number: str = ""
    work_order_number: str = ""
    tracking_number: str = ""
    kind: str = ""
    client: str = ""
    campaign: str = ""
    item: str = ""
    code: str = ""
    pickup: str = ""
    delivery: str = ""
    carrier: str = ""
    notes: str = ""
    departed: str = ""
    date_bucket: str = "all"

    @staticmethod
    def _clean(value: Any) -> str:
        return str(value or "").strip()

    @classmethod
    def text_fields(cls) -> tuple:
        return tuple(f.name for f in fields(cls) if f.name != "date_bucket")

    @classmethod
    def from_query_args(cls, args: Mapping[str, Any]) -> "DeliveryFilters":
        values: Dict[str, str] = {
            name: cls._clean(args.get(name)) for name in cls.text_fields()
        }
        bucket = cls._clean(args.get("date_bucket") or args.get("bucket")).lower()
        if bucket not in DATE_BUCKETS:
            bucket = "all"
        return cls(date_bucket=bucket, **values)

    def active(self) -> Dict[str, str]:
        """Filtri di testo non vuoti, in minuscolo."""
        return {
            name: getattr(self, name).lower()
            for name in self.text_fields()
            if getattr(self, name)
        }

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class SortState:
    column: Optional[str] = None
    direction: str = "asc"

    @classmethod
    def from_query_args(cls, args: Mapping[str, Any]) -> "SortState":
        column = (args.get("sort") or "").strip() or None
        direction = (args.get("dir") or "asc").strip().lower()
        if direction not in SORT_DIRECTIONS:
            direction = "asc"
        return cls(column=column, direction=direction)

    def toggle(self, column: str) -> "SortState":
        """Stessa colonna: inverte la direzione; nuova colonna: ascendente."""
        if column == self.column:
            return SortState(column, "desc" if self.direction == "asc" else "asc")
        return SortState(column, "asc")
