import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import UniqueConstraint, delete, func, inspect, select
from sqlalchemy.orm import Session

from hospital.core.config import settings
from hospital.core.exceptions import (
    ImmutableFieldError,
    InvalidQuery,
    NotFound,
    RequiredFieldMissing,
    UniquenessViolation,
)
from hospital.db.base_class import Base, mapped_class
from hospital.db.transaction import atomic

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def _comparable(value: Any) -> Any:
    # Stored timestamps are UTC; SQLite hands them back without tzinfo.
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass
class Page(Generic[ModelType]):
    items: List[ModelType]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Create/read/update/delete and pagination for one mapped model.

    Every write runs inside ``atomic`` so it is one transaction. Before
    touching the database the values are checked against the table's own
    metadata (NOT NULL columns, unique constraints, foreign keys) so callers
    get a precise error; the constraints in the schema remain the final word
    when two writers race past the checks.
    """

    # Fields that may be set on create but never changed afterwards
    immutable_fields: Tuple[str, ...] = ()
    # Relationship keys accepted in input besides plain columns
    nested_fields: Tuple[str, ...] = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self._unique_groups: Optional[List[Tuple[str, ...]]] = None

    @property
    def entity(self) -> str:
        return self.model.__name__

    # --- Metadata helpers ---

    def _column_keys(self) -> Dict[str, str]:
        """Maps storage column names to mapped attribute names."""
        return {prop.columns[0].name: prop.key for prop in inspect(self.model).column_attrs}

    def unique_groups(self) -> List[Tuple[str, ...]]:
        """Column-name tuples that must be unique together, read from the table."""
        if self._unique_groups is None:
            table = self.model.__table__
            groups = []
            for constraint in table.constraints:
                if isinstance(constraint, UniqueConstraint):
                    groups.append(tuple(column.name for column in constraint.columns))
            for index in table.indexes:
                if index.unique:
                    groups.append(tuple(column.name for column in index.columns))
            for column in table.columns:
                if column.unique and (column.name,) not in groups:
                    groups.append((column.name,))
            self._unique_groups = groups
        return self._unique_groups

    def _values(self, obj_in: Union[BaseModel, Dict[str, Any]], exclude_unset: bool = False) -> Dict[str, Any]:
        if isinstance(obj_in, dict):
            values = dict(obj_in)
        else:
            values = obj_in.model_dump(exclude_unset=exclude_unset)
        allowed = set(self._column_keys().values()) | set(self.nested_fields)
        unknown = sorted(set(values) - allowed)
        if unknown:
            raise InvalidQuery(f"Unknown {self.entity} field(s): {', '.join(unknown)}")
        values.pop("id", None)
        return values

    # --- Checks ---

    def _check_required(self, values: Dict[str, Any], partial: bool = False) -> None:
        keys = self._column_keys()
        for column in self.model.__table__.columns:
            if column.primary_key or column.nullable:
                continue
            if column.default is not None or column.server_default is not None:
                continue
            key = keys[column.name]
            if partial and key not in values:
                continue
            if values.get(key) is None:
                logger.warning(f"Rejected {self.entity} write: {key} is missing")
                raise RequiredFieldMissing(self.entity, key)

    def _check_references(self, db: Session, values: Dict[str, Any]) -> None:
        keys = self._column_keys()
        for column in self.model.__table__.columns:
            value = values.get(keys[column.name])
            if value is None:
                continue
            for foreign_key in column.foreign_keys:
                target = mapped_class(foreign_key.column.table)
                if target is not None and db.get(target, value) is None:
                    logger.warning(f"Rejected {self.entity} write: {target.__name__} {value} does not exist")
                    raise NotFound(target.__name__, value)

    def _check_unique(self, db: Session, values: Dict[str, Any], current: Optional[ModelType] = None) -> None:
        keys = self._column_keys()
        for columns in self.unique_groups():
            attrs = [keys[name] for name in columns]
            if current is not None and not any(attr in values for attr in attrs):
                continue
            group_values = [
                values[attr] if attr in values else getattr(current, attr, None)
                for attr in attrs
            ]
            # NULLs never collide in a SQL unique constraint
            if any(value is None for value in group_values):
                continue
            stmt = select(self.model.id).where(
                *[getattr(self.model, attr) == value for attr, value in zip(attrs, group_values)]
            )
            if current is not None:
                stmt = stmt.where(self.model.id != current.id)
            if db.execute(stmt.limit(1)).first() is not None:
                logger.warning(f"Rejected {self.entity} write: duplicate {columns} = {group_values}")
                raise UniquenessViolation(self.entity, columns, group_values)

    def _check_immutable(self, db_obj: ModelType, changes: Dict[str, Any]) -> None:
        for field in self.immutable_fields:
            if field in changes and _comparable(changes[field]) != _comparable(getattr(db_obj, field)):
                logger.warning(f"Rejected {self.entity} {db_obj.id} update: {field} is immutable")
                raise ImmutableFieldError(self.entity, field)

    # --- Queries ---

    def _load_options(self) -> Sequence[Any]:
        """Loader options applied to every read; subclasses add eager loads."""
        return ()

    def _select(self):
        return select(self.model).options(*self._load_options())

    def _order_by(self, sort: Optional[str]) -> List[Any]:
        if not sort:
            return [self.model.id]
        descending = sort.startswith("-")
        key = sort.lstrip("-")
        if key not in self._column_keys().values():
            raise InvalidQuery(f"Cannot sort {self.entity} by '{key}'")
        column = getattr(self.model, key)
        return [column.desc() if descending else column.asc(), self.model.id]

    def get(self, db: Session, id: Any) -> ModelType:
        db_obj = db.execute(self._select().where(self.model.id == id)).scalars().first()
        if db_obj is None:
            raise NotFound(self.entity, id)
        return db_obj

    def get_all(
        self,
        db: Session,
        page: int = 0,
        size: int = settings.DEFAULT_PAGE_SIZE,
        sort: Optional[str] = None,
    ) -> Page[ModelType]:
        if page < 0:
            raise InvalidQuery("page must be zero or positive")
        if size < 1:
            raise InvalidQuery("size must be at least 1")
        order_by = self._order_by(sort)
        total = db.scalar(select(func.count()).select_from(self.model))
        stmt = self._select().order_by(*order_by).offset(page * size).limit(size)
        items = list(db.execute(stmt).scalars().all())
        return Page(items=items, total=total, page=page, size=size)

    # --- Writes ---

    def _prepare_create(self, db: Session, values: Dict[str, Any]) -> ModelType:
        """Validates ``values`` and adds the new row to the session without committing."""
        self._check_required(values)
        self._check_references(db, values)
        self._check_unique(db, values)
        db_obj = self.model(**values)
        db.add(db_obj)
        return db_obj

    def _apply_update(self, db: Session, db_obj: ModelType, changes: Dict[str, Any]) -> None:
        self._check_immutable(db_obj, changes)
        self._check_required(changes, partial=True)
        self._check_references(db, changes)
        self._check_unique(db, changes, current=db_obj)
        for field, value in changes.items():
            setattr(db_obj, field, value)
        db.add(db_obj)

    def create(self, db: Session, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        values = self._values(obj_in)
        with atomic(db):
            db_obj = self._prepare_create(db, values)
        logger.info(f"Created {self.entity} {db_obj.id}")
        return self.get(db, db_obj.id)

    def update(self, db: Session, id: Any, obj_in: Union[UpdateSchemaType, Dict[str, Any]]) -> ModelType:
        changes = self._values(obj_in, exclude_unset=True)
        with atomic(db):
            db_obj = self.get(db, id)
            self._apply_update(db, db_obj, changes)
        logger.info(f"Updated {self.entity} {id}: {sorted(changes)}")
        return self.get(db, id)

    def delete(self, db: Session, id: Any) -> None:
        with atomic(db):
            self.get(db, id)
            db.execute(delete(self.model).where(self.model.id == id))
        logger.info(f"Deleted {self.entity} {id}")
