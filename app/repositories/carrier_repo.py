"""
Repository specifico per Carrier (transportadora).
"""
from typing import List, Optional

from app.models import Carrier
from app.repositories.base import SqlAlchemyRepository


class CarrierRepository(SqlAlchemyRepository[Carrier]):
    def __init__(self, session):
        super().__init__(session, Carrier)

    def search_by_name(self, term: Optional[str] = None) -> List[Carrier]:
        return self.search(term, [Carrier.name], Carrier.name.asc())

    def list_all_ordered(self) -> List[Carrier]:
        return self.session.query(Carrier).order_by(Carrier.name.asc()).all()
