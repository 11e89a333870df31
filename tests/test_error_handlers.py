"""
Tests for database constraint error rendering
"""
import asyncio
import json

from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from app.main import integrity_exception_handler, is_unique_violation


class PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def _request():
    return Request({"type": "http", "method": "POST", "path": "/api/admin/quizzes", "headers": []})


def _integrity_error(orig):
    return IntegrityError("INSERT INTO quiz_questions ...", {}, orig)


def _render(exc):
    response = asyncio.run(integrity_exception_handler(_request(), exc))
    return response.status_code, json.loads(response.body)


def test_sqlite_unique_failure_is_a_duplicate():
    exc = _integrity_error(Exception("UNIQUE constraint failed: questions.id"))

    status, body = _render(exc)

    assert status == 400
    assert body["error"] == "duplicate_key"
    assert body["message"] == "Duplicate field value"


def test_postgres_unique_code_is_a_duplicate():
    exc = _integrity_error(PgError("duplicate key value violates unique constraint", "23505"))

    assert is_unique_violation(exc)


def test_foreign_key_failure_is_not_called_a_duplicate():
    sqlite_fk = _integrity_error(Exception("FOREIGN KEY constraint failed"))
    postgres_fk = _integrity_error(PgError("insert or update violates foreign key constraint", "23503"))

    for exc in (sqlite_fk, postgres_fk):
        status, body = _render(exc)
        assert status == 400
        assert body["error"] == "constraint_violation"
        assert body["message"] != "Duplicate field value"
