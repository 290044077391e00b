import logging
import re
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import Index, Table, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hospital.core.exceptions import (
    RecordStoreError,
    ReferenceViolation,
    RequiredFieldMissing,
    UniquenessViolation,
)
from hospital.db.base_class import Base, mapped_class

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes for integrity failures
PG_NOT_NULL_VIOLATION = "23502"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_UNIQUE_VIOLATION = "23505"

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>.+)")
_SQLITE_NOT_NULL = re.compile(r"NOT NULL constraint failed: (?P<table>\w+)\.(?P<column>\w+)")
_PG_KEY_DETAIL = re.compile(r"Key \((?P<columns>[^)]*)\)=\((?P<values>.*)\) already exists")


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Runs the enclosed block as one transaction.

    Commits when the block finishes, rolls back on any exception. Storage-level
    IntegrityErrors are re-raised as the matching RecordStoreError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        translated = translate_integrity_error(exc)
        logger.warning(f"Write rejected by the database: {translated}")
        raise translated from exc
    except Exception:
        db.rollback()
        raise


def _entity_name(table: Optional[Table]) -> str:
    if table is None:
        return "Record"
    model = mapped_class(table)
    return model.__name__ if model is not None else table.name


def _find_constraint(name: str) -> Tuple[Optional[Table], List[str]]:
    for table in Base.metadata.tables.values():
        for constraint in list(table.constraints) + list(table.indexes):
            if constraint.name == name and isinstance(constraint, (UniqueConstraint, Index)):
                return table, [column.name for column in constraint.columns]
    return None, []


def translate_integrity_error(exc: IntegrityError) -> RecordStoreError:
    """Maps a driver IntegrityError onto the store's typed errors."""
    orig = exc.orig
    pgcode = getattr(orig, "pgcode", None)
    if pgcode:
        return _translate_postgres(orig, pgcode)
    return _translate_sqlite(str(orig))


def _translate_postgres(orig, pgcode: str) -> RecordStoreError:
    diag = getattr(orig, "diag", None)
    table_name = getattr(diag, "table_name", None)
    table = Base.metadata.tables.get(table_name) if table_name else None

    if pgcode == PG_UNIQUE_VIOLATION:
        constraint_table, columns = _find_constraint(getattr(diag, "constraint_name", None) or "")
        values: List[str] = []
        match = _PG_KEY_DETAIL.search(getattr(diag, "message_detail", None) or "")
        if match:
            columns = columns or [c.strip() for c in match.group("columns").split(",")]
            values = [v.strip() for v in match.group("values").split(",")]
        if constraint_table is not None:
            table = constraint_table
        return UniquenessViolation(_entity_name(table), columns, values)

    if pgcode == PG_NOT_NULL_VIOLATION:
        return RequiredFieldMissing(_entity_name(table), getattr(diag, "column_name", None) or "unknown")

    if pgcode == PG_FOREIGN_KEY_VIOLATION:
        return ReferenceViolation(_entity_name(table), getattr(diag, "message_detail", None) or str(orig))

    return RecordStoreError(str(orig))


def _translate_sqlite(message: str) -> RecordStoreError:
    match = _SQLITE_UNIQUE.search(message)
    if match:
        qualified = [part.strip() for part in match.group("columns").split(",")]
        table = Base.metadata.tables.get(qualified[0].split(".")[0])
        return UniquenessViolation(_entity_name(table), [part.split(".")[-1] for part in qualified])

    match = _SQLITE_NOT_NULL.search(message)
    if match:
        table = Base.metadata.tables.get(match.group("table"))
        return RequiredFieldMissing(_entity_name(table), match.group("column"))

    if "FOREIGN KEY constraint failed" in message:
        return ReferenceViolation("Record", "a referenced row is missing or still referenced")

    return RecordStoreError(message)
