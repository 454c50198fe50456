"""
Middleware di identificazione fittizia dell'operatore (stub).

Obiettivo:
- Fornire un oggetto `current_user` per tutte le richieste, accessibile
  tramite `flask.g.current_user`; il suo `username` diventa il proprietario
  delle sessioni logistiche aperte.
- NON bloccare nessuna route: l'autenticazione è esterna all'applicazione.

Il nome operatore viene letto dall'header `X-Operator`; in sua assenza si
usa l'operatore di default.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, g, request

OPERATOR_HEADER = "X-Operator"
DEFAULT_OPERATOR = "operatore"


@dataclass
class CurrentUserStub:
    """
    Operatore fittizio.

    - username: nome utente (header X-Operator o default)
    - is_admin: flag per eventuali controlli futuri
    """

    username: str
    is_admin: bool = False


def init_auth_stub(app: Flask) -> None:
    """Registra l'hook ``before_request`` che imposta ``g.current_user``."""

    @app.before_request
    def inject_current_user_stub() -> None:
        username = (request.headers.get(OPERATOR_HEADER) or "").strip()
        g.current_user = CurrentUserStub(
            username=username or DEFAULT_OPERATOR,
            is_admin=not username,
        )
