"""
Repository specifico per Item (items_base).
"""
from app.models import Item
from app.repositories.base import SqlAlchemyRepository


class ItemRepository(SqlAlchemyRepository[Item]):
    def __init__(self, session):
        super().__init__(session, Item)
