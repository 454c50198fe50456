"""
Repository specifico per Supplier.
Eredita le funzioni base (add, get, list) da SqlAlchemyRepository.
"""
from typing import Optional, List

from app.models import Supplier
from app.repositories.base import SqlAlchemyRepository


class SupplierRepository(SqlAlchemyRepository[Supplier]):
    def __init__(self, session):
        super().__init__(session, Supplier)

    def search_by_name_or_phc(self, term: Optional[str] = None) -> List[Supplier]:
        """Filtra i fornitori per nome o numero PHC, ordinati per nome."""
        return self.search(
            term, [Supplier.name, Supplier.phc_number], Supplier.name.asc()
        )

    def list_all_ordered(self) -> List[Supplier]:
        """Restituisce tutti i fornitori ordinati per nome."""
        return self.session.query(Supplier).order_by(Supplier.name.asc()).all()
