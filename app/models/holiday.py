"""
Modello Holiday (tabella: feriados).
"""

from datetime import datetime

from app.extensions import db


class Holiday(db.Model):
    __tablename__ = "feriados"

    id = db.Column(db.Integer, primary_key=True)
    holiday_date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.String(255), nullable=False)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    def __repr__(self) -> str:
        return f"<Holiday id={self.id} date={self.holiday_date}>"
