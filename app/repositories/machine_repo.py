"""
Repository specifico per Machine.
"""
from typing import List, Optional

from app.models import Machine
from app.repositories.base import SqlAlchemyRepository


class MachineRepository(SqlAlchemyRepository[Machine]):
    def __init__(self, session):
        super().__init__(session, Machine)

    def search_by_name(self, term: Optional[str] = None) -> List[Machine]:
        return self.search(term, [Machine.name], Machine.name.asc())
