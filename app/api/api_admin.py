"""
API JSON di amministrazione.

GET /api/admin/users
GET /api/admin/role-permissions?roleId=<id>
PUT /api/admin/role-permissions   {"roleId": <id>, "permissions": {"/path": true}}
"""
from __future__ import annotations

from flask import Blueprint, request

from app.api.responses import error_response, result_response
from app.services.admin_service import get_role_permissions, list_users, set_role_permissions
from app.services.results import ErrorKind

api_admin_bp = Blueprint("api_admin", __name__)


def _role_id(raw):
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@api_admin_bp.route("/users", methods=["GET"])
def api_list_users():
    return result_response(list_users(), "Utenti caricati.")


@api_admin_bp.route("/role-permissions", methods=["GET"])
def api_get_role_permissions():
    role_id = _role_id(request.args.get("roleId"))
    if role_id is None:
        return error_response("roleId obbligatorio.", 400, ErrorKind.VALIDATION)
    result = get_role_permissions(role_id)
    return result_response(result, "Permessi caricati.")


@api_admin_bp.route("/role-permissions", methods=["PUT"])
def api_put_role_permissions():
    data = request.get_json(silent=True) or {}
    role_id = _role_id(data.get("roleId"))
    permissions = data.get("permissions")
    if role_id is None or not permissions:
        return error_response("roleId e permissions obbligatori.", 400, ErrorKind.VALIDATION)
    result = set_role_permissions(role_id, permissions)
    return result_response(result, "Permessi aggiornati.")
