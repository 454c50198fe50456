"""
Repository specifico per WorkOrder (folhas_obras).
"""
from __future__ import annotations

from typing import Optional

from app.models import WorkOrder
from app.repositories.base import SqlAlchemyRepository


class WorkOrderRepository(SqlAlchemyRepository[WorkOrder]):
    def __init__(self, session):
        super().__init__(session, WorkOrder)

    def get_by_number(self, work_order_number: str) -> Optional[WorkOrder]:
        if not work_order_number:
            return None
        return (
            self.session.query(WorkOrder)
            .filter_by(work_order_number=work_order_number)
            .first()
        )

    def number_taken(self, work_order_number: str, exclude_id: Optional[int] = None) -> bool:
        """True se un'altra folha de obra usa già questo numero FO."""
        query = self.session.query(WorkOrder.id).filter(
            WorkOrder.work_order_number == work_order_number
        )
        if exclude_id is not None:
            query = query.filter(WorkOrder.id != exclude_id)
        return query.first() is not None
