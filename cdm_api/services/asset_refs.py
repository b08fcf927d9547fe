"""
Reference-based, in-memory representation of CDMs.

The stored/wire form embeds one copy of every sub-entity per model. When
several models should share a diagram, evaluatable or element instead, hold
them in an ``AssetCollection`` and point at them with ``AssetRef``s:

- AssetCollection[T]: owns every entity of one kind, keyed by meta.uuid
- AssetRef[T]: uuid + weak handle to a collection; holds no ownership
- resolve(ref): pure lookup; None once the entity (or the collection) is gone
- AssetRegistry: one collection per shareable kind, injected into
  share_model / inline_model
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, Optional, TypeVar

from cdm_shared.schemas import (
    CausalDecisionModel,
    CausalDependency,
    Control,
    Diagram,
    DiagramElement,
    EvalAsset,
    Evaluatable,
    InputOutputValue,
    Meta,
    RunnableModel,
)

T = TypeVar("T")


class AssetCollection(Generic[T]):
    """Exclusive owner of all entities of one kind. Adding an existing uuid replaces it."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._items: dict[str, T] = {}

    def add(self, item: T) -> "AssetRef[T]":
        uuid = item.meta.uuid
        self._items[uuid] = item
        return AssetRef(uuid, self)

    def remove(self, uuid: str) -> Optional[T]:
        return self._items.pop(uuid, None)

    def get(self, uuid: str) -> Optional[T]:
        return self._items.get(uuid)

    def ref(self, uuid: str) -> "AssetRef[T]":
        """Reference ``uuid`` in this collection. Does not check that it is present."""
        return AssetRef(uuid, self)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"AssetCollection(kind={self.kind!r}, size={len(self._items)})"


class AssetRef(Generic[T]):
    """Non-owning reference to the entity ``uuid`` in a collection."""

    __slots__ = ("uuid", "_collection")

    def __init__(self, uuid: str, collection: AssetCollection[T]) -> None:
        self.uuid = uuid
        self._collection = weakref.ref(collection)

    @property
    def collection(self) -> Optional[AssetCollection[T]]:
        return self._collection()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetRef):
            return NotImplemented
        return self.uuid == other.uuid and self.collection is other.collection

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __repr__(self) -> str:
        collection = self.collection
        kind = collection.kind if collection is not None else None
        return f"AssetRef(uuid={self.uuid!r}, kind={kind!r})"


def resolve(ref: AssetRef[T]) -> Optional[T]:
    """Look ``ref.uuid`` up in the collection it is bound to."""
    collection = ref.collection
    if collection is None:
        return None
    return collection.get(ref.uuid)


# -----------------------------------------------------------------------------
# Referenced document shapes
# -----------------------------------------------------------------------------


@dataclass
class RefsDiagram:
    meta: Meta
    elements: list[AssetRef[DiagramElement]] = field(default_factory=list)
    dependencies: list[AssetRef[CausalDependency]] = field(default_factory=list)
    addons: Any = None


@dataclass
class RefsCausalDecisionModel:
    """CDM whose diagrams and evaluatables are references instead of copies."""

    meta: Meta
    schema_tag: str = ""
    diagrams: list[AssetRef[RefsDiagram]] = field(default_factory=list)
    evaluatables: list[AssetRef[Evaluatable]] = field(default_factory=list)
    # Not shareable; carried inline
    input_output_values: list[InputOutputValue] = field(default_factory=list)
    controls: list[Control] = field(default_factory=list)
    runnable_models: list[RunnableModel] = field(default_factory=list)
    evaluatable_assets: list[EvalAsset] = field(default_factory=list)
    addons: Any = None


class AssetRegistry:
    """Shared collections, one per shareable kind."""

    def __init__(self) -> None:
        self.diagrams: AssetCollection[RefsDiagram] = AssetCollection("diagram")
        self.elements: AssetCollection[DiagramElement] = AssetCollection("element")
        self.dependencies: AssetCollection[CausalDependency] = AssetCollection("dependency")
        self.evaluatables: AssetCollection[Evaluatable] = AssetCollection("evaluatable")


def share_model(model: CausalDecisionModel, registry: AssetRegistry) -> RefsCausalDecisionModel:
    """Move the model's diagrams, elements, dependencies and evaluatables into ``registry``."""
    diagram_refs = []
    for diagram in model.diagrams:
        refs_diagram = RefsDiagram(
            meta=diagram.meta,
            elements=[registry.elements.add(e) for e in diagram.elements],
            dependencies=[registry.dependencies.add(d) for d in diagram.dependencies],
            addons=diagram.addons,
        )
        diagram_refs.append(registry.diagrams.add(refs_diagram))
    return RefsCausalDecisionModel(
        meta=model.meta,
        schema_tag=model.schema_tag,
        diagrams=diagram_refs,
        evaluatables=[registry.evaluatables.add(e) for e in model.evaluatables],
        input_output_values=list(model.input_output_values),
        controls=list(model.controls),
        runnable_models=list(model.runnable_models),
        evaluatable_assets=list(model.evaluatable_assets),
        addons=model.addons,
    )


def inline_diagram(refs_diagram: RefsDiagram) -> Diagram:
    """Materialize a referenced diagram; references that no longer resolve are dropped."""
    elements = [e for e in (resolve(r) for r in refs_diagram.elements) if e is not None]
    dependencies = [d for d in (resolve(r) for r in refs_diagram.dependencies) if d is not None]
    return Diagram(
        meta=refs_diagram.meta,
        elements=elements,
        dependencies=dependencies,
        addons=refs_diagram.addons,
    )


def inline_model(refs_model: RefsCausalDecisionModel) -> CausalDecisionModel:
    """Materialize a referenced model into the inline (stored/wire) shape."""
    diagrams = [inline_diagram(d) for d in (resolve(r) for r in refs_model.diagrams) if d is not None]
    evaluatables = [e for e in (resolve(r) for r in refs_model.evaluatables) if e is not None]
    return CausalDecisionModel(
        schema_tag=refs_model.schema_tag,
        meta=refs_model.meta,
        diagrams=diagrams,
        input_output_values=refs_model.input_output_values,
        controls=refs_model.controls,
        runnable_models=refs_model.runnable_models,
        evaluatable_assets=refs_model.evaluatable_assets,
        evaluatables=evaluatables,
        addons=refs_model.addons,
    )
