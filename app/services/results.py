"""
Risultato "taggato" per le chiamate al database: ``Ok(value)`` oppure
``Err(kind, message)``.

Il tipo di errore viene deciso dal codice strutturato restituito dal driver
(SQLSTATE / errno / codice esteso SQLite) e dalla classe dell'eccezione
SQLAlchemy, mai dal testo del messaggio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar, Union

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
)

from app.extensions import db

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(Enum):
    """Categorie di errore restituite dai servizi."""

    UNIQUE_VIOLATION = "unique_violation"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    NETWORK = "network"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str = ""

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


class ValidationError(ValueError):
    """Dati di input non validi, rilevati prima della chiamata al database."""


class ServiceError(Exception):
    """Errore applicativo con categoria già nota (es. numero FO duplicato)."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        super().__init__(message)
        self.kind = kind


# Codici "unique violation" per driver
SQLITE_CONSTRAINT_UNIQUE = 2067
SQLITE_CONSTRAINT_PRIMARYKEY = 1555
MYSQL_ER_DUP_ENTRY = 1062
PG_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if orig is None:
        return False

    sqlite_code = getattr(orig, "sqlite_errorcode", None)
    if sqlite_code is not None:
        return sqlite_code in (SQLITE_CONSTRAINT_UNIQUE, SQLITE_CONSTRAINT_PRIMARYKEY)

    # psycopg2 -> pgcode, psycopg 3 -> sqlstate
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate is not None:
        return sqlstate == PG_UNIQUE_VIOLATION

    # PyMySQL: args = (errno, message)
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0] == MYSQL_ER_DUP_ENTRY

    return False


def classify_exception(exc: BaseException) -> ErrorKind:
    """Mappa un'eccezione su un ``ErrorKind``."""
    if isinstance(exc, ServiceError):
        return exc.kind
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, NoResultFound):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, IntegrityError):
        if _is_unique_violation(exc):
            return ErrorKind.UNIQUE_VIOLATION
        return ErrorKind.VALIDATION
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        return ErrorKind.NETWORK
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def guarded(action: str, fn: Callable[[], T]) -> Result:
    """
    Esegue ``fn`` e converte le eccezioni di database/validazione in ``Err``.

    In caso di errore la sessione viene riportata in uno stato pulito
    (rollback) e l'errore viene registrato nel log.
    """
    try:
        return Ok(fn())
    except (SQLAlchemyError, ValidationError, ServiceError) as exc:
        kind = classify_exception(exc)
        log_method = logger.warning
        if isinstance(exc, SQLAlchemyError):
            db.session.rollback()
            log_method = logger.error
        log_method(
            "Operazione %s fallita (%s): %s",
            action,
            kind.value,
            exc,
            extra={"action": action, "error_kind": kind.value},
        )
        return Err(kind, str(exc))
