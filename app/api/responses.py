"""
Helper per le risposte JSON delle API.

Formato comune: ``{"success": bool, "message": str, "payload": ...}``.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import jsonify

from app.services.results import Err, ErrorKind, Result

STATUS_BY_KIND = {
    ErrorKind.UNIQUE_VIOLATION: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NETWORK: 503,
    ErrorKind.CANCELLED: 409,
    ErrorKind.UNKNOWN: 500,
}


def envelope(success: bool, message: str, payload: Any = None, status: int = 200):
    return jsonify({"success": success, "message": message, "payload": payload}), status


def error_response(message: str, status: int = 400, kind: Optional[ErrorKind] = None):
    payload = {"error_kind": kind.value} if kind is not None else None
    return envelope(False, message, payload, status)


def result_response(result: Result, message: str, status: int = 200):
    """Converte un ``Ok``/``Err`` nella risposta HTTP corrispondente."""
    if isinstance(result, Err):
        return error_response(
            result.message or "Operazione non riuscita.",
            STATUS_BY_KIND[result.kind],
            result.kind,
        )
    return envelope(True, message, result.value, status)
