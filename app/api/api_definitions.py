"""
API JSON per le tabelle di definizione.

GET    /api/definitions/<resource>?q=...      elenco (festività: ?year=)
POST   /api/definitions/<resource>            creazione
PATCH  /api/definitions/<resource>/<id>       aggiornamento parziale
DELETE /api/definitions/<resource>/<id>       eliminazione

Risorse: warehouses, suppliers, clients, carriers, machines, holidays,
vat-exceptions.
"""
from __future__ import annotations

from flask import Blueprint, request

from app.api.responses import error_response, result_response
from app.services.definitions_service import (
    create_definition,
    delete_definition,
    list_definitions,
    update_definition,
)
from app.services.results import ErrorKind

api_definitions_bp = Blueprint("api_definitions", __name__)


@api_definitions_bp.route("/<resource>", methods=["GET"])
def api_list(resource: str):
    year_raw = request.args.get("year")
    year = None
    if year_raw:
        try:
            year = int(year_raw)
        except ValueError:
            return error_response("Anno non valido.", 400, ErrorKind.VALIDATION)
    result = list_definitions(resource, request.args.get("q"), year)
    return result_response(result, "Elenco caricato.")


@api_definitions_bp.route("/<resource>", methods=["POST"])
def api_create(resource: str):
    data = request.get_json(silent=True) or {}
    result = create_definition(resource, data)
    return result_response(result, "Record creato.", 201)


@api_definitions_bp.route("/<resource>/<int:entity_id>", methods=["PATCH"])
def api_update(resource: str, entity_id: int):
    data = request.get_json(silent=True) or {}
    result = update_definition(resource, entity_id, data)
    return result_response(result, "Record aggiornato.")


@api_definitions_bp.route("/<resource>/<int:entity_id>", methods=["DELETE"])
def api_delete(resource: str, entity_id: int):
    result = delete_definition(resource, entity_id)
    return result_response(result, "Record eliminato.")
