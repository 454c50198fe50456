"""
API JSON della vista logistica.

Sessioni:
    POST   /api/logistics/sessions
    DELETE /api/logistics/sessions/<sid>

Lettura (filtri e ordinamento come query string):
    GET /api/logistics/<sid>/records?date=YYYY-MM-DD&client=...&sort=...&dir=asc
    GET /api/logistics/<sid>/references
    GET /api/logistics/<sid>/export?date=YYYY-MM-DD

Modifiche:
    PATCH  /api/logistics/<sid>/records/<id>            {"field", "value"}
    PUT    /api/logistics/<sid>/records/<id>/location   {"kind", "warehouse_id"}
    POST   /api/logistics/<sid>/records/<id>/refresh
    POST   /api/logistics/<sid>/records/<id>/duplicate
    DELETE /api/logistics/<sid>/records/<id>
    PATCH  /api/logistics/<sid>/work-orders/<id>        {"field", "value"}
    PATCH  /api/logistics/<sid>/items/<id>              {"field", "value"}
    POST   /api/logistics/dispatches
"""
from __future__ import annotations

import io
from datetime import date

from flask import Blueprint, current_app, g, request, send_file
from werkzeug.utils import secure_filename

from app.api.responses import envelope, error_response, result_response
from app.services.dispatch_service import create_dispatch
from app.services.dto.logistics_filters import DeliveryFilters, SortState
from app.services.logistics_coordinator import date_key
from app.services.logistics_export import export_to_bytes
from app.services.logistics_filters import SORT_COLUMNS, apply_filters, sort_records
from app.services.logistics_sessions import get_session_registry
from app.services.logistics_store import parse_iso_date
from app.services.reference_service import load_reference_data
from app.services.results import Err, ErrorKind, ValidationError

api_logistics_bp = Blueprint("api_logistics", __name__)


def _session_or_404(session_id: str):
    session = get_session_registry().get(session_id)
    if session is None:
        return None, error_response("Sessione logistica inesistente.", 404, ErrorKind.NOT_FOUND)
    return session, None


def _ensure_references(session):
    """Carica i dati di riferimento alla prima richiesta che li usa."""
    if session.references_loaded:
        return None
    result = load_reference_data()
    if isinstance(result, Err):
        return result
    session.coordinator.set_references(result.value)
    session.references_loaded = True
    return None


def _requested_day():
    raw = request.args.get("date") or date.today().isoformat()
    return date_key(raw)


def _filtered_view(session, records):
    references = session.coordinator.references
    filters = DeliveryFilters.from_query_args(request.args)
    sort = SortState.from_query_args(request.args)
    if sort.column and sort.column not in SORT_COLUMNS:
        raise ValidationError(f"Colonna di ordinamento sconosciuta: {sort.column}")
    view = apply_filters(
        records,
        filters,
        clients=references.client_lookup,
        carriers=references.carrier_lookup,
        locations=references.location_lookup(),
    )
    view = sort_records(
        view,
        sort,
        clients=references.client_lookup,
        carriers=references.carrier_lookup,
        locations=references.location_lookup(),
    )
    return view, filters, sort


def _field_body():
    data = request.get_json(silent=True) or {}
    field = data.get("field")
    if not field:
        return None, None, error_response("Campo 'field' obbligatorio.", 400, ErrorKind.VALIDATION)
    return field, data.get("value"), None


@api_logistics_bp.route("/sessions", methods=["POST"])
def api_open_session():
    user = getattr(g, "current_user", None)
    owner = user.username if user else None
    session = get_session_registry().open(owner)
    return envelope(True, "Sessione logistica aperta.", session.to_dict(), 201)


@api_logistics_bp.route("/sessions/<session_id>", methods=["DELETE"])
def api_close_session(session_id: str):
    if not get_session_registry().close(session_id):
        return error_response("Sessione logistica inesistente.", 404, ErrorKind.NOT_FOUND)
    return envelope(True, "Sessione logistica chiusa.", {"id": session_id})


@api_logistics_bp.route("/<session_id>/references", methods=["GET"])
def api_references(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    failure = _ensure_references(session)
    if failure is not None:
        return result_response(failure, "")
    return envelope(True, "Dati di riferimento.", session.coordinator.references.to_dict())


@api_logistics_bp.route("/<session_id>/records", methods=["GET"])
def api_list_records(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    try:
        day = _requested_day()
    except ValidationError as exc:
        return error_response(str(exc), 400, ErrorKind.VALIDATION)

    failure = _ensure_references(session)
    if failure is not None:
        return result_response(failure, "")

    token = session.coordinator.begin_view()
    result = session.coordinator.get(day, token)
    if isinstance(result, Err):
        return result_response(result, "")

    try:
        view, filters, sort = _filtered_view(session, result.value)
    except ValidationError as exc:
        return error_response(str(exc), 400, ErrorKind.VALIDATION)

    return envelope(
        True,
        f"{len(view)} record per {day}.",
        {
            "date": day,
            "total": len(result.value),
            "filters": filters.to_dict(),
            "sort": {"column": sort.column, "direction": sort.direction},
            "records": view,
        },
    )


@api_logistics_bp.route("/<session_id>/records/<int:record_id>", methods=["PATCH"])
def api_update_record(session_id: str, record_id: int):
    """
    Aggiorna un campo del record e restituisce la riga riletta.

    Se la scrittura riesce ma la rilettura no, la risposta contiene la
    copia locale già aggiornata (la modifica è salvata).
    """
    session, error = _session_or_404(session_id)
    if error:
        return error
    field, value, error = _field_body()
    if error:
        return error
    result = session.coordinator.update_record_field(record_id, field, value)
    return result_response(result, "Record aggiornato.")


@api_logistics_bp.route("/<session_id>/records/<int:record_id>/location", methods=["PUT"])
def api_update_location(session_id: str, record_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    failure = _ensure_references(session)
    if failure is not None:
        return result_response(failure, "")
    data = request.get_json(silent=True) or {}
    result = session.coordinator.update_location(
        record_id, data.get("kind"), data.get("warehouse_id")
    )
    return result_response(result, "Luogo aggiornato.")


@api_logistics_bp.route("/<session_id>/records/<int:record_id>/refresh", methods=["POST"])
def api_refresh_record(session_id: str, record_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    result = session.coordinator.refetch_row(record_id, request.args.get("date"))
    return result_response(result, "Record riletto.")


@api_logistics_bp.route("/<session_id>/records/<int:record_id>/duplicate", methods=["POST"])
def api_duplicate_record(session_id: str, record_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    token = session.coordinator.begin_view()
    result = session.coordinator.duplicate_row(record_id, token)
    return result_response(result, "Record duplicato.", 201)


@api_logistics_bp.route("/<session_id>/records/<int:record_id>", methods=["DELETE"])
def api_delete_record(session_id: str, record_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    result = session.coordinator.delete_row(record_id)
    return result_response(result, "Record eliminato.")


@api_logistics_bp.route("/<session_id>/work-orders/<int:work_order_id>", methods=["PATCH"])
def api_update_work_order(session_id: str, work_order_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    field, value, error = _field_body()
    if error:
        return error
    result = session.coordinator.update_work_order_field(work_order_id, field, value)
    return result_response(result, "Folha de obra aggiornata.")


@api_logistics_bp.route("/<session_id>/items/<int:item_id>", methods=["PATCH"])
def api_update_item(session_id: str, item_id: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    field, value, error = _field_body()
    if error:
        return error
    result = session.coordinator.update_item_field(item_id, field, value)
    return result_response(result, "Item aggiornato.")


@api_logistics_bp.route("/dispatches", methods=["POST"])
def api_create_dispatch():
    data = request.get_json(silent=True) or {}
    result = create_dispatch(data)
    return result_response(result, "Spedizione creata.", 201)


@api_logistics_bp.route("/<session_id>/export", methods=["GET"])
def api_export(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    try:
        day = _requested_day()
    except ValidationError as exc:
        return error_response(str(exc), 400, ErrorKind.VALIDATION)

    failure = _ensure_references(session)
    if failure is not None:
        return result_response(failure, "")

    token = session.coordinator.begin_view()
    result = session.coordinator.get(day, token)
    if isinstance(result, Err):
        return result_response(result, "")
    try:
        view, _, _ = _filtered_view(session, result.value)
    except ValidationError as exc:
        return error_response(str(exc), 400, ErrorKind.VALIDATION)

    content = export_to_bytes(view, parse_iso_date(day), session.coordinator.references)
    current_app.logger.info("Export logistica %s: %s righe", day, len(view))
    return send_file(
        io.BytesIO(content),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=secure_filename(f"logistica_{day}.xlsx"),
    )
