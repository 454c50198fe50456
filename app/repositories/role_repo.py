"""
Repository per Role e RolePermission.
"""
from typing import Dict, List, Optional

from app.models import Role, RolePermission
from app.repositories.base import SqlAlchemyRepository


class RoleRepository(SqlAlchemyRepository[Role]):
    def __init__(self, session):
        super().__init__(session, Role)

    def get_by_name(self, name: str) -> Optional[Role]:
        if not name:
            return None
        return self.session.query(Role).filter_by(name=name).first()

    def list_permissions(self, role_id: int) -> List[RolePermission]:
        return (
            self.session.query(RolePermission)
            .filter(RolePermission.role_id == role_id)
            .order_by(RolePermission.page_path.asc())
            .all()
        )

    def permissions_map(self, role_id: int) -> Dict[str, bool]:
        """page_path -> can_access per il ruolo."""
        return {p.page_path: bool(p.can_access) for p in self.list_permissions(role_id)}

    def upsert_permission(self, role_id: int, page_path: str, can_access: bool) -> RolePermission:
        permission = (
            self.session.query(RolePermission)
            .filter_by(role_id=role_id, page_path=page_path)
            .first()
        )
        if permission is None:
            permission = RolePermission(role_id=role_id, page_path=page_path)
            self.session.add(permission)
        permission.can_access = bool(can_access)
        return permission
