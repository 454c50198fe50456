"""
Modello DeliveryRecord (tabella: logistica_entregas).

Singolo evento di spedizione di un item, tracciabile in modo indipendente
(guia, trasportatore, date). La vista logistica raggruppa i record per
data di uscita (dispatch_date).
"""

from datetime import datetime

from app.extensions import db


class DeliveryRecord(db.Model):
    __tablename__ = "logistica_entregas"

    id = db.Column(db.Integer, primary_key=True)

    item_id = db.Column(
        db.Integer,
        db.ForeignKey("items_base.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Copia diretta della descrizione dell'item
    description = db.Column(db.String(255), nullable=True)

    # Guia di trasporto (numero)
    tracking_number = db.Column(db.Integer, nullable=True, index=True)

    # Luoghi: coppia id + etichetta, sempre scritte insieme
    pickup_location_id = db.Column(db.Integer, nullable=True)
    pickup_location = db.Column(db.String(255), nullable=True)
    delivery_location_id = db.Column(db.Integer, nullable=True)
    delivery_location = db.Column(db.String(255), nullable=True)

    carrier_id = db.Column(
        db.Integer,
        db.ForeignKey("transportadora.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    notes = db.Column(db.Text, nullable=True)

    # Contatti ritiro / consegna
    pickup_contact = db.Column(db.String(128), nullable=True)
    pickup_phone = db.Column(db.String(64), nullable=True)
    delivery_contact = db.Column(db.String(128), nullable=True)
    delivery_phone = db.Column(db.String(64), nullable=True)

    # Override della quantità base dell'item
    quantity = db.Column(db.Integer, nullable=True)

    delivery_date = db.Column(db.Date, nullable=True)
    dispatch_date = db.Column(db.Date, nullable=True, index=True)

    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_date = db.Column(db.Date, nullable=True)
    departed = db.Column(db.Boolean, nullable=False, default=False)
    is_delivery = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    item = db.relationship("Item", back_populates="delivery_records")
    carrier = db.relationship("Carrier")

    def __repr__(self) -> str:
        return (
            f"<DeliveryRecord id={self.id} item_id={self.item_id} "
            f"dispatch_date={self.dispatch_date} departed={self.departed!r}>"
        )
