"""
CRUD routes for Causal Decision Models.

GET returns the current version; PUT inserts a new version; DELETE removes every
version of the model (sub-entities are left in place).
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cdm_api.database import get_db
from cdm_api.errors import CDMError
from cdm_api.services.model_store import ModelStore
from cdm_shared.schemas import CausalDecisionModel, Meta

router = APIRouter()


def get_store(db: Session = Depends(get_db)) -> ModelStore:
    return ModelStore(db)


def _http_error(e: CDMError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail={"error": e.message, "code": e.code, **e.details})


@router.get("", response_model=list[Meta])
def list_models(store: ModelStore = Depends(get_store)):
    """Current meta of each stored model (no pagination; capped at CDM_MODEL_LIST_LIMIT)."""
    return store.get_summary()


@router.get("/{model_id}", response_model=Meta)
def get_model_meta(model_id: str, store: ModelStore = Depends(get_store)):
    """Meta of the current version of a model."""
    try:
        return store.get_meta(model_id)
    except CDMError as e:
        raise _http_error(e) from e


@router.get("/{model_id}/full", response_model=CausalDecisionModel)
def get_model_full(model_id: str, store: ModelStore = Depends(get_store)):
    """The full current model: diagrams, elements, dependencies, runnable logic."""
    try:
        return store.get_full(model_id)
    except CDMError as e:
        raise _http_error(e) from e


@router.get("/{model_id}/versions", response_model=list[Meta])
def get_model_versions(model_id: str, store: ModelStore = Depends(get_store)):
    """Meta of every retained version, oldest first."""
    try:
        return store.get_history(model_id)
    except CDMError as e:
        raise _http_error(e) from e


@router.post("", response_model=CausalDecisionModel, status_code=201)
def create_model(model: CausalDecisionModel, store: ModelStore = Depends(get_store)):
    """Store a new model. 409 if a model with this uuid exists (use PUT)."""
    try:
        return store.create(model)
    except CDMError as e:
        raise _http_error(e) from e


@router.put("", response_model=CausalDecisionModel)
def update_model(model: CausalDecisionModel, store: ModelStore = Depends(get_store)):
    """Store the body as the new current version. 404 if the model does not exist (use POST)."""
    try:
        return store.update(model)
    except CDMError as e:
        raise _http_error(e) from e


@router.put("/{model_id}", response_model=CausalDecisionModel)
def update_model_by_id(model_id: str, model: CausalDecisionModel, store: ModelStore = Depends(get_store)):
    if model.meta.uuid != model_id:
        raise HTTPException(status_code=400, detail="ID in path and body must match")
    return update_model(model, store)


@router.delete("/{model_id}", status_code=204)
def delete_model(model_id: str, store: ModelStore = Depends(get_store)):
    """Delete every version of a model."""
    try:
        store.delete(model_id)
    except CDMError as e:
        raise _http_error(e) from e
    return None
