"""Tests for AssetRef resolution and the shared (reference-based) model shape."""

import gc

from cdm_api.services.asset_refs import (
    AssetCollection,
    AssetRef,
    AssetRegistry,
    inline_model,
    resolve,
    share_model,
)
from cdm_api.services.test_data import build_test_model
from cdm_shared.schemas import DiagramElement, Meta


def _element(uuid, name="E"):
    return DiagramElement(meta=Meta(uuid=uuid, name=name), causal_type="Lever")


def test_resolve_returns_same_object():
    elements = AssetCollection("element")
    e = _element("e1")
    ref = elements.add(e)
    assert resolve(ref) is e


def test_ref_construction_is_lazy():
    elements = AssetCollection("element")
    ref = elements.ref("not-yet")
    assert len(elements) == 0
    assert resolve(ref) is None
    e = _element("not-yet")
    elements.add(e)
    assert resolve(ref) is e


def test_removed_entity_resolves_to_none():
    elements = AssetCollection("element")
    ref = elements.add(_element("e1"))
    assert "e1" in elements
    elements.remove("e1")
    assert "e1" not in elements
    assert resolve(ref) is None


def test_ref_does_not_keep_collection_alive():
    elements = AssetCollection("element")
    ref = elements.add(_element("e1"))
    del elements
    gc.collect()
    assert ref.collection is None
    assert resolve(ref) is None


def test_ref_stays_findable_after_collection_is_collected():
    elements = AssetCollection("element")
    ref = elements.add(_element("e1"))
    seen = {ref}
    before = hash(ref)
    del elements
    gc.collect()
    assert hash(ref) == before
    assert ref in seen


def test_ref_equality():
    a = AssetCollection("element")
    b = AssetCollection("element")
    assert a.ref("x") == a.ref("x")
    assert a.ref("x") != b.ref("x")
    assert a.ref("x") != a.ref("y")
    assert len({a.ref("x"), a.ref("x")}) == 1
    assert isinstance(a.ref("x"), AssetRef)


def test_two_models_share_one_diagram():
    registry = AssetRegistry()
    first = build_test_model()
    second = first.model_copy(update={"meta": Meta(uuid="other-model", name="Other")})

    refs_first = share_model(first, registry)
    refs_second = share_model(second, registry)

    assert len(registry.diagrams) == 1
    assert len(registry.elements) == 3
    assert resolve(refs_first.diagrams[0]) is resolve(refs_second.diagrams[0])


def test_share_then_inline_restores_model():
    registry = AssetRegistry()
    model = build_test_model()
    assert inline_model(share_model(model, registry)) == model


def test_inline_drops_unresolvable_refs():
    registry = AssetRegistry()
    model = build_test_model()
    refs = share_model(model, registry)
    removed = model.diagrams[0].elements[0].meta.uuid
    registry.elements.remove(removed)

    inlined = inline_model(refs)
    assert [e.meta.uuid for e in inlined.diagrams[0].elements] == [
        e.meta.uuid for e in model.diagrams[0].elements[1:]
    ]
