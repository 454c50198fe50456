"""
Modello Warehouse (tabella: armazens).

Magazzino utilizzabile come luogo di ritiro o di consegna nella logistica.
"""

from datetime import datetime

from app.extensions import db


class Warehouse(db.Model):
    __tablename__ = "armazens"

    id = db.Column(db.Integer, primary_key=True)

    # Codice nel gestionale esterno PHC
    phc_number = db.Column(db.String(32), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    address = db.Column(db.String(255), nullable=True)
    postal_code = db.Column(db.String(16), nullable=True)

    # Timestamps
    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Warehouse id={self.id} name={self.name!r}>"
