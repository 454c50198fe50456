"""
Modello UserProfile (tabella: profiles).

Profilo applicativo di un utente con il relativo ruolo.
L'autenticazione vera e propria è esterna all'applicazione.
"""

from datetime import datetime

from app.extensions import db


class UserProfile(db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)

    first_name = db.Column(db.String(128), nullable=True)
    last_name = db.Column(db.String(128), nullable=True)
    email = db.Column(db.String(255), nullable=True, unique=True)

    role_id = db.Column(
        db.Integer,
        db.ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    role = db.relationship("Role")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def __repr__(self) -> str:
        return f"<UserProfile id={self.id} email={self.email!r}>"
