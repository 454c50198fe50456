"""
Modello Item (tabella: items_base).

Riga di una folha de obra con descrizione, codice e quantità base.
"""

from datetime import datetime

from app.extensions import db


class Item(db.Model):
    __tablename__ = "items_base"

    id = db.Column(db.Integer, primary_key=True)

    work_order_id = db.Column(
        db.Integer,
        db.ForeignKey("folhas_obras.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    description = db.Column(db.String(255), nullable=True)
    code = db.Column(db.String(64), nullable=True, index=True)
    quantity = db.Column(db.Integer, nullable=True)
    # "brindes": articoli promozionali, altrimenti stampa
    is_gift = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    work_order = db.relationship("WorkOrder", back_populates="items")
    delivery_records = db.relationship(
        "DeliveryRecord",
        back_populates="item",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Item id={self.id} description={self.description!r}>"
