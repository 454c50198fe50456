"""
Repository specifico per VatException.
"""
from typing import List, Optional

from app.models import VatException
from app.repositories.base import SqlAlchemyRepository


class VatExceptionRepository(SqlAlchemyRepository[VatException]):
    def __init__(self, session):
        super().__init__(session, VatException)

    def search_by_supplier(self, term: Optional[str] = None) -> List[VatException]:
        return self.search(
            term, [VatException.supplier_name], VatException.supplier_name.asc()
        )
