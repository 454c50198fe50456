"""
Modello WorkOrder (tabella: folhas_obras).

Folha de obra: lavoro di un cliente che raggruppa uno o più item.
"""

from datetime import datetime

from app.extensions import db


class WorkOrder(db.Model):
    __tablename__ = "folhas_obras"

    id = db.Column(db.Integer, primary_key=True)

    # Numero preventivo (ORC), numerico
    budget_number = db.Column(db.Integer, nullable=True, index=True)
    # Numero FO: testo, univoco quando valorizzato
    work_order_number = db.Column(db.String(32), nullable=True, unique=True, index=True)
    campaign_name = db.Column(db.String(255), nullable=True)

    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clientes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    # Denormalizzato per le viste di logistica
    client_name = db.Column(db.String(255), nullable=True)

    departed = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    client = db.relationship("Client")
    items = db.relationship(
        "Item",
        back_populates="work_order",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<WorkOrder id={self.id} fo={self.work_order_number!r}>"
