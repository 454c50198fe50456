"""
Repository specifico per Warehouse.
"""
from typing import List, Optional

from app.models import Warehouse
from app.repositories.base import SqlAlchemyRepository


class WarehouseRepository(SqlAlchemyRepository[Warehouse]):
    def __init__(self, session):
        super().__init__(session, Warehouse)

    def search_by_name_or_phc(self, term: Optional[str] = None) -> List[Warehouse]:
        """Filtra per nome o numero PHC."""
        return self.search(
            term, [Warehouse.name, Warehouse.phc_number], Warehouse.name.asc()
        )
