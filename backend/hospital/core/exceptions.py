"""
Typed errors raised by the records store.

The CRUD layer raises these and never returns ``None`` in place of a
failure. The HTTP layer maps each class onto a status code in
``hospital.main``.
"""
from typing import Any, Sequence


class RecordStoreError(Exception):
    """Base class for every error surfaced by the records store."""


class NotFound(RecordStoreError):
    def __init__(self, entity: str, record_id: Any, field: str = "id"):
        self.entity = entity
        self.record_id = record_id
        self.field = field
        super().__init__(f"{entity} with {field} {record_id} not found.")


class UniquenessViolation(RecordStoreError):
    def __init__(self, entity: str, fields: Sequence[str], values: Sequence[Any] = ()):
        self.entity = entity
        self.fields = tuple(fields)
        self.values = tuple(values)
        message = f"{entity} with the same {', '.join(self.fields)} already exists"
        if self.values:
            message += f" ({', '.join(str(v) for v in self.values)})"
        super().__init__(message + ".")


class RequiredFieldMissing(RecordStoreError):
    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(f"{entity}.{field} is required.")


class ReferenceViolation(RecordStoreError):
    """A write would leave a row pointing at a row that no longer exists."""

    def __init__(self, entity: str, detail: str):
        self.entity = entity
        self.detail = detail
        super().__init__(f"{entity}: {detail}")


class ImmutableFieldError(RecordStoreError):
    def __init__(self, entity: str, field: str):
        self.entity = entity
        self.field = field
        super().__init__(f"{entity}.{field} cannot be changed once set.")


class InvalidQuery(RecordStoreError):
    pass


class CascadeFailure(RecordStoreError):
    """A cascading delete could not remove every dependent; nothing was removed."""

    def __init__(self, entity: str, record_id: Any, detail: str):
        self.entity = entity
        self.record_id = record_id
        self.detail = detail
        super().__init__(f"Cascade delete of {entity} {record_id} failed: {detail}")
