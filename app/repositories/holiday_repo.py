"""
Repository specifico per Holiday.
"""
from datetime import date
from typing import List, Optional

from app.models import Holiday
from app.repositories.base import SqlAlchemyRepository


class HolidayRepository(SqlAlchemyRepository[Holiday]):
    def __init__(self, session):
        super().__init__(session, Holiday)

    def list_ordered(self, year: Optional[int] = None) -> List[Holiday]:
        """Festività in ordine di data, opzionalmente limitate a un anno."""
        query = self.session.query(Holiday)
        if year is not None:
            query = query.filter(
                Holiday.holiday_date >= date(year, 1, 1),
                Holiday.holiday_date <= date(year, 12, 31),
            )
        return query.order_by(Holiday.holiday_date.asc()).all()
