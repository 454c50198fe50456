"""
Modello Carrier (tabella: transportadora).
"""

from datetime import datetime

from app.extensions import db


class Carrier(db.Model):
    __tablename__ = "transportadora"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Carrier id={self.id} name={self.name!r}>"
