"""
Servizi di amministrazione: elenco utenti e permessi ruolo -> pagina.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import NoResultFound

from app.models import Role
from app.services.logging import log_structured_event
from app.services.results import Result, ValidationError, guarded
from app.services.unit_of_work import UnitOfWork


def list_users() -> Result:
    def _run() -> List[Dict[str, Any]]:
        with UnitOfWork() as uow:
            return [
                {
                    "id": u.id,
                    "first_name": u.first_name,
                    "last_name": u.last_name,
                    "full_name": u.full_name,
                    "email": u.email,
                    "role_id": u.role_id,
                    "role_name": u.role.name if u.role else None,
                    "is_active": bool(u.is_active),
                }
                for u in uow.users.list_with_roles()
            ]

    return guarded("list_users", _run)


def get_role_permissions(role_id: int) -> Result:
    """Mappa ``page_path -> can_access`` per il ruolo."""

    def _run() -> Dict[str, bool]:
        with UnitOfWork() as uow:
            if uow.roles.get_by_id(role_id) is None:
                raise NoResultFound(f"Ruolo {role_id} non trovato")
            return uow.roles.permissions_map(role_id)

    return guarded("get_role_permissions", _run)


def set_role_permissions(role_id: int, permissions: Mapping[str, Any]) -> Result:
    """Upsert di tutti i permessi indicati in un'unica transazione."""

    def _run() -> Dict[str, bool]:
        if not isinstance(permissions, Mapping) or not permissions:
            raise ValidationError("Permessi mancanti")
        with UnitOfWork() as uow:
            if uow.roles.get_by_id(role_id) is None:
                raise NoResultFound(f"Ruolo {role_id} non trovato")
            for page_path, can_access in permissions.items():
                page_path = str(page_path).strip()
                if not page_path:
                    raise ValidationError("Percorso pagina vuoto")
                uow.roles.upsert_permission(role_id, page_path, bool(can_access))
            uow.commit()
            log_structured_event(
                "role_permissions_updated",
                message="Permessi ruolo aggiornati",
                role_id=role_id,
                pages=len(permissions),
            )
            return uow.roles.permissions_map(role_id)

    return guarded("set_role_permissions", _run)


# Pagine dell'applicazione soggette a permesso
PAGE_PATHS = (
    "/producao",
    "/producao/logistica",
    "/definicoes/armazens",
    "/definicoes/clientes",
    "/definicoes/feriados",
    "/definicoes/fornecedores",
    "/definicoes/iva-excepcoes",
    "/definicoes/maquinas",
    "/definicoes/transportadoras",
    "/definicoes/utilizadores",
)

DEFAULT_ROLES = {
    "ADMIN": lambda path: True,
    "PRODUCAO": lambda path: path.startswith("/producao"),
}


def seed_default_roles() -> Result:
    """Crea i ruoli di default (se mancanti) e i relativi permessi."""

    def _run() -> Dict[str, int]:
        created: Dict[str, int] = {}
        with UnitOfWork() as uow:
            for name, allowed in DEFAULT_ROLES.items():
                role = uow.roles.get_by_name(name)
                if role is None:
                    role = Role(name=name)
                    uow.roles.add(role)
                    uow.session.flush()
                for path in PAGE_PATHS:
                    uow.roles.upsert_permission(role.id, path, allowed(path))
                created[name] = role.id
            uow.commit()
        log_structured_event("roles_seeded", message="Ruoli di default creati", roles=sorted(created))
        return created

    return guarded("seed_default_roles", _run)
