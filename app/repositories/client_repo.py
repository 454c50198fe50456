"""
Repository specifico per Client.
"""
from typing import List, Optional

from app.models import Client
from app.repositories.base import SqlAlchemyRepository


class ClientRepository(SqlAlchemyRepository[Client]):
    def __init__(self, session):
        super().__init__(session, Client)

    def search_by_name_or_phc(self, term: Optional[str] = None) -> List[Client]:
        return self.search(term, [Client.name, Client.phc_number], Client.name.asc())

    def list_all_ordered(self) -> List[Client]:
        return self.session.query(Client).order_by(Client.name.asc()).all()
