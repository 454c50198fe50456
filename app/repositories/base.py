"""
Generic Repository Pattern.
Fornisce le operazioni CRUD base per qualsiasi modello SQLAlchemy.
"""
from typing import Type, TypeVar, Generic, Optional, List, Any

from sqlalchemy import or_

from app.extensions import db

# Definisce un tipo generico T che deve essere un modello SQLAlchemy
T = TypeVar("T", bound=db.Model)

class SqlAlchemyRepository(Generic[T]):
    def __init__(self, session, model_cls: Type[T]):
        self.session = session
        self.model_cls = model_cls

    def add(self, entity: T) -> T:
        """Aggiunge l'entità alla sessione."""
        self.session.add(entity)
        return entity

    def get_by_id(self, id: int) -> Optional[T]:
        """Recupera per Primary Key."""
        return self.session.get(self.model_cls, id)

    def list_all(self) -> List[T]:
        """Ritorna tutti i record."""
        return self.session.query(self.model_cls).all()

    def delete(self, entity: T) -> None:
        """Cancella l'entità."""
        self.session.delete(entity)

    def search(self, term: Optional[str], columns: List[Any], order_by: Any) -> List[T]:
        """
        Filtro testuale case-insensitive (ilike) in OR sulle colonne indicate.
        Senza termine restituisce tutto, ordinato.
        """
        query = self.session.query(self.model_cls)
        term = (term or "").strip()
        if term:
            like = f"%{term}%"
            query = query.filter(or_(*[col.ilike(like) for col in columns]))
        return query.order_by(order_by).all()
