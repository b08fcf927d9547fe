"""
Graph assembly: persist a nested CDM document as rows, and rebuild it from rows.

The document tree is described once, declaratively, in ``KINDS``: for each
entity kind, its ORM record, its Pydantic schema, the scalar columns it maps and
its owned child collections in declared order. ``persist_tree`` and
``assemble`` walk that description depth-first, so every kind (model, diagram,
element, ...) is written and read the same way.

Ownership is "copy per parent": each owner row has its own child rows, returned
in array position order. Every write creates fresh owner rows, so the children
under one owner are exactly the array that was submitted, duplicates included.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from cdm_api.models_db import (
    CausalDecisionModelRecord,
    CausalDependencyRecord,
    ControlRecord,
    DiagramElementRecord,
    DiagramRecord,
    DisplayRecord,
    EvalAssetRecord,
    EvalElementRecord,
    EvaluatableElementRecord,
    EvaluatableRecord,
    InputOutputValueRecord,
    RunnableModelRecord,
)
from cdm_api.services.versioning import current_meta, insert_meta, record_to_meta
from cdm_shared.schemas import (
    CausalDecisionModel,
    CausalDependency,
    Control,
    Diagram,
    DiagramElement,
    Display,
    EvalAsset,
    EvalElement,
    Evaluatable,
    EvaluatableElement,
    InputOutputValue,
    RunnableModel,
)

logger = logging.getLogger(__name__)

MODEL_KIND = "model"


@dataclass(frozen=True)
class EntityKind:
    """How one entity kind maps between its schema and its table."""

    name: str
    record: type
    schema: type[BaseModel]
    # (schema attribute, record column)
    columns: tuple[tuple[str, str], ...] = ()
    # (schema attribute, child kind name), in declared order
    children: tuple[tuple[str, str], ...] = ()


KINDS: dict[str, EntityKind] = {
    kind.name: kind
    for kind in (
        EntityKind(
            MODEL_KIND,
            CausalDecisionModelRecord,
            CausalDecisionModel,
            columns=(("schema_tag", "schema_tag"), ("addons", "addons")),
            children=(
                ("diagrams", "diagram"),
                ("input_output_values", "io-value"),
                ("controls", "control"),
                ("runnable_models", "runnable-model"),
                ("evaluatable_assets", "eval-asset"),
                ("evaluatables", "evaluatable"),
            ),
        ),
        EntityKind(
            "diagram",
            DiagramRecord,
            Diagram,
            columns=(("addons", "addons"),),
            children=(("elements", "element"), ("dependencies", "dependency")),
        ),
        EntityKind(
            "element",
            DiagramElementRecord,
            DiagramElement,
            columns=(("causal_type", "causal_type"), ("position", "position_data"), ("addons", "addons")),
            children=(("displays", "display"),),
        ),
        EntityKind(
            "display",
            DisplayRecord,
            Display,
            columns=(("display_type", "display_type"), ("content", "content")),
        ),
        EntityKind(
            "dependency",
            CausalDependencyRecord,
            CausalDependency,
            columns=(("source", "source"), ("target", "target")),
        ),
        EntityKind("io-value", InputOutputValueRecord, InputOutputValue, columns=(("data", "data"),)),
        EntityKind(
            "control",
            ControlRecord,
            Control,
            columns=(("input_output_values", "input_output_values"), ("displays", "displays")),
        ),
        EntityKind(
            "runnable-model",
            RunnableModelRecord,
            RunnableModel,
            columns=(("addons", "addons"),),
            children=(("elements", "eval-element"),),
        ),
        EntityKind(
            "eval-element",
            EvalElementRecord,
            EvalElement,
            columns=(
                ("inputs", "inputs"),
                ("outputs", "outputs"),
                ("function_name", "function_name"),
                ("evaluatable_asset", "evaluatable_asset"),
                ("addons", "addons"),
            ),
        ),
        EntityKind(
            "eval-asset",
            EvalAssetRecord,
            EvalAsset,
            columns=(("eval_type", "eval_type"), ("content", "content")),
        ),
        EntityKind(
            "evaluatable",
            EvaluatableRecord,
            Evaluatable,
            columns=(("addons", "addons"),),
            children=(("elements", "evaluatable-element"),),
        ),
        EntityKind(
            "evaluatable-element",
            EvaluatableElementRecord,
            EvaluatableElement,
            columns=(
                ("causal_type", "causal_type"),
                ("eval_type", "eval_type"),
                ("content", "content"),
                ("default_value", "default_value"),
            ),
        ),
    )
}


def _to_column(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value


# -----------------------------------------------------------------------------
# Write path
# -----------------------------------------------------------------------------


def persist_tree(
    db: Session,
    kind: str,
    entity: BaseModel,
    owner_id: Optional[int] = None,
    position: int = 0,
):
    """
    Insert ``entity`` and its whole owned subtree as new physical records.

    Every node gets a fresh meta row (new sequence number, same uuid). Flushes
    but does not commit: the caller owns the transaction.
    """
    spec = KINDS[kind]
    meta = insert_meta(db, entity.meta, kind)
    row = spec.record(
        meta=meta,
        owner_id=owner_id,
        position=position,
        **{column: _to_column(getattr(entity, attr)) for attr, column in spec.columns},
    )
    db.add(row)
    db.flush()
    for attr, child_kind in spec.children:
        for index, child in enumerate(getattr(entity, attr)):
            persist_tree(db, child_kind, child, owner_id=row.id, position=index)
    return row


def detach_and_delete(db: Session, kind: str, meta_ids: list[int]) -> int:
    """
    Delete the rows of ``kind`` bound to ``meta_ids``.

    Direct children are detached (owner_id set to NULL), not deleted: they stay
    addressable by their own uuid. Returns the number of rows deleted.
    """
    spec = KINDS[kind]
    if not meta_ids:
        return 0
    row_ids = [r.id for r in db.query(spec.record.id).filter(spec.record.meta_id.in_(meta_ids))]
    if row_ids:
        for _, child_kind in spec.children:
            child = KINDS[child_kind].record
            db.query(child).filter(child.owner_id.in_(row_ids)).update(
                {child.owner_id: None}, synchronize_session=False
            )
    return db.query(spec.record).filter(spec.record.meta_id.in_(meta_ids)).delete(synchronize_session=False)


# -----------------------------------------------------------------------------
# Read path
# -----------------------------------------------------------------------------


def load_children(db: Session, kind: str, owner_id: int) -> list:
    """Rows of ``kind`` owned by ``owner_id``, in array position order."""
    record = KINDS[kind].record
    return (
        db.query(record)
        .filter(record.owner_id == owner_id)
        .order_by(record.position, record.id)
        .all()
    )


def assemble(db: Session, kind: str, row) -> BaseModel:
    """Materialize ``row`` and, recursively, everything it owns."""
    spec = KINDS[kind]
    data: dict[str, Any] = {"meta": record_to_meta(row.meta)}
    for attr, column in spec.columns:
        value = getattr(row, column)
        if value is not None:
            data[attr] = value
    for attr, child_kind in spec.children:
        data[attr] = [assemble(db, child_kind, child) for child in load_children(db, child_kind, row.id)]
    return spec.schema.model_validate(data)


def load_current(db: Session, kind: str, uuid: str) -> Optional[BaseModel]:
    """Full current version of the entity ``uuid`` of ``kind``, or None."""
    meta = current_meta(db, uuid, kind)
    if meta is None:
        return None
    record = KINDS[kind].record
    row = db.query(record).filter(record.meta_id == meta.id).first()
    if row is None:
        logger.warning("Meta seq=%s for %s %s has no entity row", meta.id, kind, uuid)
        return None
    return assemble(db, kind, row)
