"""
Modello Supplier (tabella: fornecedores).

Rappresenta un fornitore di materiali e servizi per la produzione.
"""

from datetime import datetime

from app.extensions import db


class Supplier(db.Model):
    __tablename__ = "fornecedores"

    id = db.Column(db.Integer, primary_key=True)

    # Dati anagrafici base
    phc_number = db.Column(db.String(32), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)

    # Contatti / indirizzo
    address = db.Column(db.String(255), nullable=True)
    postal_code = db.Column(db.String(16), nullable=True)
    phone = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    main_contact = db.Column(db.String(128), nullable=True)

    # Timestamps
    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"
