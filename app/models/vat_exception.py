"""
Modello VatException (tabella: iva_excepcoes).

Aliquota IVA speciale applicata a un fornitore (una sola eccezione per nome).
"""

from datetime import datetime

from app.extensions import db


class VatException(db.Model):
    __tablename__ = "iva_excepcoes"

    id = db.Column(db.Integer, primary_key=True)

    supplier_name = db.Column(db.String(255), nullable=False, unique=True, index=True)
    # Percentuale 0..100
    vat_rate = db.Column(db.Numeric(5, 2), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<VatException id={self.id} supplier={self.supplier_name!r} rate={self.vat_rate}>"
