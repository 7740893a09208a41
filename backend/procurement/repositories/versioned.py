"""Generic persistence for an entity row plus its append-only history table.

A ``VersionedStore`` is bound to an entity model, its history model and the
names of the attributes a snapshot captures. Every change to the entity goes
through :meth:`VersionedStore.mutate`, which archives the current row into
history and writes the new attributes with ``version + 1`` in one transaction.

The UPDATE is guarded by the version read at the start of the transaction.
Two writers starting from the same version cannot both succeed: the loser
either collides on the ``(id, version)`` history key or matches zero rows on
the guarded UPDATE, and gets :class:`~procurement.errors.Conflict`.
"""
import logging
from typing import Any, Callable, Iterable

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from procurement.errors import Conflict, NotFound, PersistenceError, ProcurementError, VERSION_NOT_FOUND

logger = logging.getLogger(__name__)

Snapshot = dict[str, Any]
MutationFn = Callable[[Snapshot], Snapshot]


class VersionedStore:
    def __init__(self, model, history_model, fields: Iterable[str], not_found_reason: str):
        self.model = model
        self.history_model = history_model
        self.fields = tuple(fields)
        self.not_found_reason = not_found_reason
        self.label = model.__tablename__

    def snapshot(self, row) -> Snapshot:
        """Versioned attributes of an entity or history row."""
        return {field: getattr(row, field) for field in self.fields}

    def create(self, db: Session, **attrs):
        entity = self.model(**attrs)
        db.add(entity)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise PersistenceError(f"can not create {self.label}", constraint=True) from e
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"can not create {self.label}") from e
        db.refresh(entity)
        logger.info("%s %s created at version %s", self.label, entity.id, entity.version)
        return entity

    def get_by_id(self, db: Session, entity_id):
        entity = db.query(self.model).filter(self.model.id == entity_id).first()
        if entity is None:
            raise NotFound(self.not_found_reason)
        return entity

    def list_by(self, db: Session, filters: dict[str, Any] | None = None, offset: int = 0, limit: int = 0) -> list:
        """Entities matching every filter, ordered by name.

        A list/tuple/set value means "column IN values"; ``None`` values are
        ignored. ``limit <= 0`` is unbounded and ``offset <= 0`` skips nothing.
        """
        query = db.query(self.model)
        for column, value in (filters or {}).items():
            if value is None:
                continue
            attr = getattr(self.model, column)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.filter(attr.in_(list(value)))
            else:
                query = query.filter(attr == value)
        query = query.order_by(self.model.name.asc(), self.model.id.asc())
        if offset and offset > 0:
            query = query.offset(offset)
        if limit and limit > 0:
            query = query.limit(limit)
        return query.all()

    def stage_mutation(self, db: Session, entity_id, mutation_fn: MutationFn):
        """Archive the current row and write the mutated one, without committing.

        The caller owns the transaction: it must commit, or roll back on any
        exception raised from here.
        """
        entity = self.get_by_id(db, entity_id)
        base_version = entity.version
        current = self.snapshot(entity)

        db.add(self.history_model(id=entity.id, version=base_version, **current))
        try:
            db.flush()
        except IntegrityError as e:
            raise Conflict() from e

        changes = mutation_fn(dict(current)) or {}
        values = {field: changes.get(field, current[field]) for field in self.fields}
        stmt = (
            update(self.model)
            .where(self.model.id == entity.id, self.model.version == base_version)
            .values(**values, version=base_version + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            result = db.execute(stmt)
        except IntegrityError as e:
            raise PersistenceError(f"can not update {self.label}", constraint=True) from e
        if result.rowcount != 1:
            raise Conflict()
        db.expire(entity)
        logger.info("%s %s archived version %s, now at %s", self.label, entity.id, base_version, base_version + 1)
        return entity

    def mutate(self, db: Session, entity_id, mutation_fn: MutationFn):
        try:
            self.stage_mutation(db, entity_id, mutation_fn)
            db.commit()
        except ProcurementError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"can not update {self.label}") from e
        return self.get_by_id(db, entity_id)

    def get_version(self, db: Session, entity_id, version: int):
        record = (
            db.query(self.history_model)
            .filter(self.history_model.id == entity_id, self.history_model.version == version)
            .first()
        )
        if record is None:
            raise NotFound(VERSION_NOT_FOUND)
        return record

    def rollback(self, db: Session, entity_id, target_version: int):
        """Write a new version whose content equals the archived ``target_version``.

        The live version was never archived, so rolling back to it is NotFound.
        """
        self.get_by_id(db, entity_id)
        restored = self.snapshot(self.get_version(db, entity_id, target_version))
        entity = self.mutate(db, entity_id, lambda _current: restored)
        logger.info("%s %s rolled back to content of version %s", self.label, entity_id, target_version)
        return entity

    def history(self, db: Session, entity_id) -> list:
        self.get_by_id(db, entity_id)
        return (
            db.query(self.history_model)
            .filter(self.history_model.id == entity_id)
            .order_by(self.history_model.version.asc())
            .all()
        )
