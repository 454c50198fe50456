"""
Modelli Role e RolePermission (tabelle: roles, role_permissions).

Mappa ruolo -> pagine accessibili.
"""

from datetime import datetime

from app.extensions import db


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False, unique=True)
    description = db.Column(db.String(255), nullable=True)

    permissions = db.relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Role id={self.id} name={self.name!r}>"


class RolePermission(db.Model):
    __tablename__ = "role_permissions"
    __table_args__ = (
        db.UniqueConstraint("role_id", "page_path", name="uq_role_page"),
    )

    id = db.Column(db.Integer, primary_key=True)

    role_id = db.Column(
        db.Integer,
        db.ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    page_path = db.Column(db.String(191), nullable=False)
    can_access = db.Column(db.Boolean, nullable=False, default=False)

    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    role = db.relationship("Role", back_populates="permissions")

    def __repr__(self) -> str:
        return f"<RolePermission role_id={self.role_id} {self.page_path}={self.can_access}>"
