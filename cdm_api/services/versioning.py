"""
Identity and versioning for CDM entities.

Each entity has a logical ``uuid`` (stable across edits) and, per edit, a new
``meta`` row whose autoincrement id is its sequence number. The row with the
greatest sequence number for a (kind, uuid) is the current version.

Lookups on unknown uuids return None / False / [] rather than raising; callers
branch on presence.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from cdm_api.models_db import MetaRecord
from cdm_shared.schemas import Meta

logger = logging.getLogger(__name__)


def meta_to_record(meta: Meta, kind: str) -> MetaRecord:
    return MetaRecord(
        kind=kind,
        uuid=meta.uuid,
        name=meta.name,
        summary=meta.summary,
        documentation=meta.documentation,
        version=meta.version,
        draft=meta.draft,
        creator=meta.creator,
        created_date=meta.created_date,
        updator=meta.updator,
        updated_date=meta.updated_date,
    )


def record_to_meta(record: MetaRecord) -> Meta:
    return Meta(
        uuid=record.uuid,
        name=record.name,
        summary=record.summary,
        documentation=record.documentation,
        version=record.version,
        draft=bool(record.draft),
        creator=record.creator,
        created_date=record.created_date,
        updator=record.updator,
        updated_date=record.updated_date,
    )


def current_meta(db: Session, uuid: str, kind: str) -> Optional[MetaRecord]:
    """Return the current (greatest sequence number) meta row for uuid, or None."""
    return (
        db.query(MetaRecord)
        .filter(MetaRecord.kind == kind, MetaRecord.uuid == uuid)
        .order_by(MetaRecord.id.desc())
        .first()
    )


def exists(db: Session, uuid: str, kind: str) -> bool:
    """True iff at least one physical record exists for uuid."""
    return (
        db.query(MetaRecord.id)
        .filter(MetaRecord.kind == kind, MetaRecord.uuid == uuid)
        .first()
        is not None
    )


def insert_meta(db: Session, meta: Meta, kind: str) -> MetaRecord:
    """Append a new version record for meta.uuid. Flushes so the sequence number is assigned."""
    record = meta_to_record(meta, kind)
    db.add(record)
    db.flush()
    logger.debug("Inserted %s meta uuid=%s seq=%s", kind, record.uuid, record.id)
    return record


def list_current_by_kind(db: Session, kind: str, limit: int) -> list[MetaRecord]:
    """
    Current meta row of up to ``limit`` distinct uuids of the given kind.

    Groups all rows of the kind by uuid, keeps MAX(id) per group, then fetches
    those rows, so each uuid appears once and reflects its latest edit.
    """
    latest = (
        db.query(func.max(MetaRecord.id).label("id"))
        .filter(MetaRecord.kind == kind)
        .group_by(MetaRecord.uuid)
        .subquery()
    )
    return (
        db.query(MetaRecord)
        .join(latest, MetaRecord.id == latest.c.id)
        .order_by(MetaRecord.id)
        .limit(limit)
        .all()
    )


def list_versions(db: Session, uuid: str, kind: str) -> list[MetaRecord]:
    """All retained meta rows for uuid, oldest first."""
    return (
        db.query(MetaRecord)
        .filter(MetaRecord.kind == kind, MetaRecord.uuid == uuid)
        .order_by(MetaRecord.id)
        .all()
    )


def sequence_numbers(db: Session, uuid: str, kind: str) -> list[int]:
    return [
        row.id
        for row in db.query(MetaRecord.id)
        .filter(MetaRecord.kind == kind, MetaRecord.uuid == uuid)
        .order_by(MetaRecord.id)
    ]


def purge(db: Session, uuid: str, kind: str) -> list[int]:
    """Delete every meta row for uuid. Returns the removed sequence numbers."""
    ids = sequence_numbers(db, uuid, kind)
    if ids:
        db.query(MetaRecord).filter(MetaRecord.id.in_(ids)).delete(synchronize_session=False)
    return ids
