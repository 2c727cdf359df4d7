"""
Versioned record store shared by tenders and bids.

Every change to an entity's versioned fields bumps ``entity.version`` and
writes a snapshot row for the new version in the same transaction, so the
snapshots of an entity always cover 1..entity.version without gaps.
Rollback is forward-only: it copies an old snapshot into a new version.
``status`` is deliberately not part of any snapshot.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tender_api.models.base import Base
from tender_api.models.bid import Bid
from tender_api.models.bid_version import BidVersion
from tender_api.models.tender import Tender
from tender_api.models.tender_version import TenderVersion
from tender_api.services.exceptions import (
    ConflictError,
    InternalFailureError,
    InvalidInputError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str) -> Iterator[None]:
    """Commit everything written inside the block, or nothing."""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s: integrity error, rolled back: %s", action, e.orig)
        raise ConflictError("The record was modified concurrently, retry the request") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s: storage failure, rolled back", action)
        raise InternalFailureError("Failed to save changes") from e


class VersionedStore:
    def __init__(self, model: type[Base], snapshot_model: type[Base], owner_column: str, fields: tuple[str, ...]):
        self.model = model
        self.snapshot_model = snapshot_model
        self.owner_column = owner_column
        self.fields = fields

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _snapshot(self, entity) -> Base:
        values = {f: getattr(entity, f) for f in self.fields}
        return self.snapshot_model(**{self.owner_column: entity.id, "version": entity.version}, **values)

    def create(self, db: Session, entity):
        """Persist a new entity at version 1 together with snapshot #1."""
        entity.version = 1
        with atomic(db, f"create {self.name}"):
            db.add(entity)
            db.flush()
            db.add(self._snapshot(entity))
        db.refresh(entity)
        logger.info("%s %s created at version 1", self.name, entity.id)
        return entity

    def edit(self, db: Session, entity, patch: BaseModel):
        """Apply the fields present in ``patch`` and record the result as a new version.

        The caller has already checked existence and authorization. An empty
        patch still produces a new version.
        """
        changes = patch.model_dump(exclude_unset=True)
        unknown = set(changes) - set(self.fields)
        if unknown:
            raise InvalidInputError(f"Fields are not editable: {', '.join(sorted(unknown))}")
        for field, value in changes.items():
            setattr(entity, field, value)
        entity.version += 1
        with atomic(db, f"edit {self.name} {entity.id}"):
            db.add(self._snapshot(entity))
        db.refresh(entity)
        logger.info("%s %s edited, now version %s", self.name, entity.id, entity.version)
        return entity

    def get_snapshot(self, db: Session, entity_id, version: int):
        owner = getattr(self.snapshot_model, self.owner_column)
        return (
            db.query(self.snapshot_model)
            .filter(owner == entity_id, self.snapshot_model.version == version)
            .first()
        )

    def rollback(self, db: Session, entity, target_version: int):
        """Restore the content of ``target_version`` as version ``entity.version + 1``."""
        if target_version < 1:
            raise InvalidInputError("Invalid version number")
        snapshot = self.get_snapshot(db, entity.id, target_version)
        if snapshot is None:
            raise NotFoundError("Version not found")
        for field in self.fields:
            setattr(entity, field, getattr(snapshot, field))
        entity.version += 1
        with atomic(db, f"rollback {self.name} {entity.id}"):
            db.add(self._snapshot(entity))
        db.refresh(entity)
        logger.info(
            "%s %s rolled back to content of version %s, now version %s",
            self.name, entity.id, target_version, entity.version,
        )
        return entity

    def history(self, db: Session, entity_id) -> list:
        owner = getattr(self.snapshot_model, self.owner_column)
        return (
            db.query(self.snapshot_model)
            .filter(owner == entity_id)
            .order_by(self.snapshot_model.version)
            .all()
        )


tender_store = VersionedStore(Tender, TenderVersion, "tender_id", ("name", "description", "service_type"))
bid_store = VersionedStore(Bid, BidVersion, "bid_id", ("name", "description"))
