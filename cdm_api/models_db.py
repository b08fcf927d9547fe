"""
SQLAlchemy ORM models for the CDM store.

Every addressable entity row points at its own ``meta`` row. The autoincrement
``meta.id`` is the physical sequence number: for a given (kind, uuid) the meta
row with the greatest id is the current version. Rows are only ever inserted,
never updated in place.

Child rows reference the row that owns them (``owner_id``) and their position in
the owner's array. ``owner_id`` is NULL for orphans (owner model deleted).
"""

import json
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects import mysql
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cdm_api.database import Base


class OpaqueJSON(TypeDecorator):
    """
    JSON stored as plain text.

    Native JSON types (MySQL) normalise object key order on write; opaque
    payloads must come back exactly as they were submitted.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "mysql":
            return dialect.type_descriptor(mysql.LONGTEXT())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)


class MetaRecord(Base):
    """One physical version of an entity's identity envelope."""

    __tablename__ = "meta"
    # Never reuse ids of purged rows
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False, index=True)  # model, diagram, element, ...
    uuid: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    documentation: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)
    version: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    creator: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    created_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    updator: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    updated_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class _EntityColumns:
    """Columns shared by every entity table."""

    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class CausalDecisionModelRecord(_EntityColumns, Base):
    __tablename__ = "causal_decision_models"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # roots have no owner
    schema_tag: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class DiagramRecord(_EntityColumns, Base):
    __tablename__ = "diagrams"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class DiagramElementRecord(_EntityColumns, Base):
    __tablename__ = "diagram_elements"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("diagrams.id"), nullable=True, index=True)
    causal_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    position_data: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)  # 'position' is the array index
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class DisplayRecord(_EntityColumns, Base):
    __tablename__ = "diagram_displays"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("diagram_elements.id"), nullable=True, index=True)
    display_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    content: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class CausalDependencyRecord(_EntityColumns, Base):
    __tablename__ = "causal_dependencies"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("diagrams.id"), nullable=True, index=True)
    source: Mapped[str] = mapped_column(String(64), nullable=False)
    target: Mapped[str] = mapped_column(String(64), nullable=False)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class InputOutputValueRecord(_EntityColumns, Base):
    __tablename__ = "input_output_values"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    data: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class ControlRecord(_EntityColumns, Base):
    __tablename__ = "controls"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    input_output_values: Mapped[Optional[list]] = mapped_column(OpaqueJSON, nullable=True)  # list of uuids
    displays: Mapped[Optional[list]] = mapped_column(OpaqueJSON, nullable=True)  # list of uuids

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class RunnableModelRecord(_EntityColumns, Base):
    __tablename__ = "runnable_models"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class EvalElementRecord(_EntityColumns, Base):
    __tablename__ = "eval_elements"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("runnable_models.id"), nullable=True, index=True)
    inputs: Mapped[Optional[list]] = mapped_column(OpaqueJSON, nullable=True)
    outputs: Mapped[Optional[list]] = mapped_column(OpaqueJSON, nullable=True)
    function_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    evaluatable_asset: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)  # EvalAsset uuid
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class EvalAssetRecord(_EntityColumns, Base):
    __tablename__ = "eval_assets"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    eval_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    content: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class EvaluatableRecord(_EntityColumns, Base):
    __tablename__ = "evaluatables"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("causal_decision_models.id"), nullable=True, index=True)
    addons: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")


class EvaluatableElementRecord(_EntityColumns, Base):
    __tablename__ = "evaluatable_elements"

    meta_id: Mapped[int] = mapped_column(ForeignKey("meta.id"), nullable=False, index=True)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("evaluatables.id"), nullable=True, index=True)
    causal_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    eval_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    content: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)
    default_value: Mapped[Optional[Any]] = mapped_column(OpaqueJSON, nullable=True)

    meta: Mapped[MetaRecord] = relationship(lazy="joined")
