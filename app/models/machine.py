"""
Modello Machine (tabella: maquinas).

Macchina di stampa con il relativo costo al metro quadro.
"""

from datetime import datetime

from app.extensions import db


class Machine(db.Model):
    __tablename__ = "maquinas"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, index=True)
    value_m2 = db.Column(db.Numeric(10, 2), nullable=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Machine id={self.id} name={self.name!r}>"
