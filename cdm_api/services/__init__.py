"""Backend services: versioning, graph assembly, asset references, model store."""

from cdm_api.services.asset_refs import (
    AssetCollection,
    AssetRef,
    AssetRegistry,
    RefsCausalDecisionModel,
    RefsDiagram,
    inline_model,
    resolve,
    share_model,
)
from cdm_api.services.model_store import ModelStore, validate_dependencies

__all__ = [
    "AssetCollection",
    "AssetRef",
    "AssetRegistry",
    "RefsCausalDecisionModel",
    "RefsDiagram",
    "inline_model",
    "resolve",
    "share_model",
    "ModelStore",
    "validate_dependencies",
]
