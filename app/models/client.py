"""
Modello Client (tabella: clientes).

Cliente delle folhas de obra; usato anche come luogo di ritiro/consegna.
"""

from datetime import datetime

from app.extensions import db


class Client(db.Model):
    __tablename__ = "clientes"

    id = db.Column(db.Integer, primary_key=True)

    phc_number = db.Column(db.String(32), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    address = db.Column(db.String(255), nullable=True)
    postal_code = db.Column(db.String(16), nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Client id={self.id} name={self.name!r}>"
