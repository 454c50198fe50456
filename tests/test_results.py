"""Unit tests per la classificazione degli errori e guarded()."""

from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from app.services.results import (
    Err,
    ErrorKind,
    Ok,
    ServiceError,
    ValidationError,
    classify_exception,
    guarded,
)


class _DriverError(Exception):
    """Eccezione DBAPI fittizia con attributi strutturati."""

    def __init__(self, *args, **attrs):
        super().__init__(*args)
        for key, value in attrs.items():
            setattr(self, key, value)


def _integrity(orig):
    return IntegrityError("INSERT ...", {}, orig)


class TestClassification:
    @pytest.mark.parametrize(
        "orig",
        [
            _DriverError("UNIQUE constraint failed", sqlite_errorcode=2067),
            _DriverError("PRIMARY KEY", sqlite_errorcode=1555),
            _DriverError(1062, "Duplicate entry"),
            _DriverError("duplicate key", pgcode="23505"),
            _DriverError("duplicate key", sqlstate="23505"),
        ],
    )
    def test_unique_violation_by_driver_code(self, orig):
        assert classify_exception(_integrity(orig)) is ErrorKind.UNIQUE_VIOLATION

    def test_message_text_is_not_used(self):
        orig = _DriverError("duplicate key value violates unique constraint", sqlite_errorcode=787)
        assert classify_exception(_integrity(orig)) is ErrorKind.VALIDATION

    def test_other_mysql_integrity_error(self):
        assert classify_exception(_integrity(_DriverError(1452, "FK fails"))) is ErrorKind.VALIDATION

    def test_operational_error_is_network(self):
        exc = OperationalError("SELECT 1", {}, _DriverError("gone away"))
        assert classify_exception(exc) is ErrorKind.NETWORK

    def test_no_result_is_not_found(self):
        assert classify_exception(NoResultFound()) is ErrorKind.NOT_FOUND

    def test_application_errors(self):
        assert classify_exception(ValidationError("x")) is ErrorKind.VALIDATION
        assert classify_exception(ServiceError(ErrorKind.CANCELLED)) is ErrorKind.CANCELLED
        assert classify_exception(RuntimeError()) is ErrorKind.UNKNOWN


class TestGuarded:
    def test_ok_value(self):
        assert guarded("noop", lambda: 5) == Ok(5)

    def test_validation_error_becomes_err(self):
        def fail():
            raise ValidationError("data mancante")

        result = guarded("fail", fail)
        assert result == Err(ErrorKind.VALIDATION, "data mancante")
        assert not result.is_ok

    def test_database_error_rolls_back_session(self, app, monkeypatch):
        calls = []
        from app.extensions import db

        monkeypatch.setattr(db.session, "rollback", lambda: calls.append("rollback"))

        def fail():
            raise OperationalError("SELECT 1", {}, _DriverError("timeout"))

        result = guarded("fail", fail)
        assert result.kind is ErrorKind.NETWORK
        assert calls == ["rollback"]

    def test_unexpected_errors_propagate(self):
        def fail():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            guarded("fail", fail)
