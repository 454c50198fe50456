"""
Repository specifico per DeliveryRecord (logistica_entregas).
Le letture caricano sempre item e folha de obra collegati.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import joinedload

from app.models import DeliveryRecord, Item
from app.repositories.base import SqlAlchemyRepository


class DeliveryRecordRepository(SqlAlchemyRepository[DeliveryRecord]):
    def __init__(self, session):
        super().__init__(session, DeliveryRecord)

    def _with_relations(self):
        return self.session.query(DeliveryRecord).options(
            joinedload(DeliveryRecord.item).joinedload(Item.work_order),
        )

    def get_with_relations(self, record_id: int) -> Optional[DeliveryRecord]:
        return (
            self._with_relations()
            .filter(DeliveryRecord.id == record_id)
            .one_or_none()
        )

    def list_by_dispatch_date(self, dispatch_date: date) -> List[DeliveryRecord]:
        """Record con data di uscita indicata, in ordine di inserimento."""
        return (
            self._with_relations()
            .filter(DeliveryRecord.dispatch_date == dispatch_date)
            .order_by(DeliveryRecord.id.asc())
            .all()
        )
