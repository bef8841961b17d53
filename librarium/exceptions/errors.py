import re
from typing import Any, Optional

from sqlalchemy import CheckConstraint, ForeignKeyConstraint, Index, UniqueConstraint
from sqlalchemy.exc import IntegrityError


class LibraryError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class NotFound(LibraryError):
    kind = "not_found"

    def __init__(self, entity: str, key: Any = None):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "entity": self.entity, "key": self.key}


class ConstraintViolation(LibraryError):
    kind = "constraint"

    def __init__(
        self,
        field: Optional[str],
        constraint: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.field = field
        self.constraint = constraint
        super().__init__(message or f"{self.kind} constraint violated on {field}")

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "field": self.field,
            "constraint": self.constraint,
        }


class UniqueViolation(ConstraintViolation):
    kind = "unique"


class ForeignKeyViolation(ConstraintViolation):
    kind = "foreign_key"


class CheckViolation(ConstraintViolation):
    kind = "check"


class NotNullViolation(ConstraintViolation):
    kind = "not_null"


class InvalidStateTransition(LibraryError):
    kind = "invalid_state"

    def __init__(self, entity: str, current: Any, target: Any, message: Optional[str] = None):
        self.entity = entity
        self.current = getattr(current, "value", current)
        self.target = getattr(target, "value", target)
        super().__init__(
            message
            or f"{entity} cannot move from '{self.current}' to '{self.target}'",
        )

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "entity": self.entity,
            "current": self.current,
            "target": self.target,
        }


class ConnectionFailure(LibraryError):
    kind = "connection_failure"


_SQLSTATE_KINDS = {
    "23505": UniqueViolation,
    "23503": ForeignKeyViolation,
    "23514": CheckViolation,
    "23502": NotNullViolation,
}

_SQLITE_PATTERNS = [
    (re.compile(r"UNIQUE constraint failed: (?P<target>.+)$"), UniqueViolation),
    (re.compile(r"NOT NULL constraint failed: (?P<target>.+)$"), NotNullViolation),
    (re.compile(r"CHECK constraint failed: (?P<target>.+)$"), CheckViolation),
    (re.compile(r"FOREIGN KEY constraint failed"), ForeignKeyViolation),
]


def _known_constraints() -> dict:
    """Map every named constraint and index of the schema to its field."""
    from librarium.dependencies.database import Base

    fields = {}
    for table in Base.metadata.tables.values():
        for item in list(table.constraints) + list(table.indexes):
            name = item.name
            if not isinstance(name, str):
                continue
            if isinstance(item, (UniqueConstraint, ForeignKeyConstraint, Index)) and len(item.columns):
                fields[name] = ", ".join(column.name for column in item.columns)
            elif isinstance(item, CheckConstraint):
                prefix = f"ck_{table.name}_"
                fields[name] = name[len(prefix):] if name.startswith(prefix) else name
    return fields


def _field_from_target(target: str) -> tuple[Optional[str], Optional[str]]:
    target = target.strip()
    known = _known_constraints()
    if target in known:
        return known[target], target
    # SQLite reports "table.column[, table.column]" for UNIQUE and NOT NULL
    columns = [part.strip().split(".")[-1] for part in target.split(",")]
    return ", ".join(columns), None


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolation:
    orig = exc.orig
    cause = getattr(orig, "__cause__", None)
    sqlstate = (
        getattr(orig, "sqlstate", None)
        or getattr(orig, "pgcode", None)
        or getattr(cause, "sqlstate", None)
    )

    if sqlstate in _SQLSTATE_KINDS:
        error_cls = _SQLSTATE_KINDS[sqlstate]
        constraint = getattr(cause, "constraint_name", None)
        field = getattr(cause, "column_name", None)
        if constraint and not field:
            field = _known_constraints().get(constraint, constraint)
        return error_cls(field, constraint, getattr(cause, "detail", None) or None)

    text = str(orig)
    for pattern, error_cls in _SQLITE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        if "target" in match.groupdict():
            field, constraint = _field_from_target(match.group("target"))
            return error_cls(field, constraint)
        return error_cls(None)

    return ConstraintViolation(None, message="Integrity constraint violated")
