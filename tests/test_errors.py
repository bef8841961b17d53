from sqlalchemy.exc import IntegrityError

import librarium.models  # noqa: F401
from librarium.exceptions.errors import (
    CheckViolation,
    ConstraintViolation,
    ForeignKeyViolation,
    InvalidStateTransition,
    NotFound,
    NotNullViolation,
    UniqueViolation,
    translate_integrity_error,
)


class FakeSQLiteError(Exception):
    pass


class FakeAsyncpgCause(Exception):
    def __init__(self, sqlstate, constraint_name=None, column_name=None, detail=None):
        super().__init__(detail)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name
        self.column_name = column_name
        self.detail = detail


class FakeAdaptedError(Exception):
    pass


def integrity_error(orig):
    return IntegrityError("INSERT ...", {}, orig)


def pg_error(sqlstate, **kwargs):
    orig = FakeAdaptedError("adapted")
    orig.__cause__ = FakeAsyncpgCause(sqlstate, **kwargs)
    return integrity_error(orig)


def test_sqlite_unique_reports_column():
    exc = integrity_error(FakeSQLiteError("UNIQUE constraint failed: books.isbn"))

    violation = translate_integrity_error(exc)

    assert isinstance(violation, UniqueViolation)
    assert violation.kind == "unique"
    assert violation.field == "isbn"


def test_sqlite_composite_unique_reports_all_columns():
    exc = integrity_error(
        FakeSQLiteError(
            "UNIQUE constraint failed: book_authors.book_id, book_authors.author_id",
        ),
    )

    violation = translate_integrity_error(exc)

    assert isinstance(violation, UniqueViolation)
    assert violation.field == "book_id, author_id"


def test_sqlite_named_check_resolves_field():
    exc = integrity_error(
        FakeSQLiteError("CHECK constraint failed: ck_loans_renewed_times"),
    )

    violation = translate_integrity_error(exc)

    assert isinstance(violation, CheckViolation)
    assert violation.field == "renewed_times"
    assert violation.constraint == "ck_loans_renewed_times"


def test_sqlite_not_null_and_foreign_key():
    not_null = translate_integrity_error(
        integrity_error(FakeSQLiteError("NOT NULL constraint failed: tasks.title")),
    )
    foreign_key = translate_integrity_error(
        integrity_error(FakeSQLiteError("FOREIGN KEY constraint failed")),
    )

    assert isinstance(not_null, NotNullViolation)
    assert not_null.field == "title"
    assert isinstance(foreign_key, ForeignKeyViolation)
    assert foreign_key.field is None


def test_postgres_sqlstate_unique_uses_constraint_name():
    violation = translate_integrity_error(
        pg_error(
            "23505",
            constraint_name="uq_member_cards_member_id",
            detail="Key (member_id)=(1) already exists.",
        ),
    )

    assert isinstance(violation, UniqueViolation)
    assert violation.field == "member_id"
    assert violation.constraint == "uq_member_cards_member_id"


def test_postgres_sqlstate_foreign_key_resolves_column():
    violation = translate_integrity_error(
        pg_error(
            "23503",
            constraint_name="fk_loans_copy_id_book_copies",
            detail="Key (copy_id)=(99) is not present in table \"book_copies\".",
        ),
    )

    assert isinstance(violation, ForeignKeyViolation)
    assert violation.field == "copy_id"
    assert violation.constraint == "fk_loans_copy_id_book_copies"


def test_postgres_sqlstate_check_and_not_null():
    check = translate_integrity_error(
        pg_error("23514", constraint_name="ck_fines_amount"),
    )
    not_null = translate_integrity_error(
        pg_error("23502", column_name="title"),
    )

    assert isinstance(check, CheckViolation)
    assert check.field == "amount"
    assert isinstance(not_null, NotNullViolation)
    assert not_null.field == "title"


def test_unknown_integrity_error_is_generic_violation():
    violation = translate_integrity_error(
        integrity_error(FakeSQLiteError("something odd")),
    )

    assert type(violation) is ConstraintViolation
    assert violation.to_dict()["error"] == "constraint"


def test_error_payloads_are_machine_readable():
    assert NotFound("Task", 7).to_dict() == {
        "error": "not_found",
        "message": "Task not found",
        "entity": "Task",
        "key": 7,
    }

    payload = InvalidStateTransition("Fine", "Paid", "Waived").to_dict()
    assert payload["error"] == "invalid_state"
    assert payload["current"] == "Paid"
    assert payload["target"] == "Waived"
