"""Read access to sub-entities (diagrams, elements, ...) by their own uuid."""

from fastapi import APIRouter, Depends

from cdm_api.errors import CDMError
from cdm_api.routes.models import _http_error, get_store
from cdm_api.services.graph import KINDS
from cdm_api.services.model_store import ModelStore

router = APIRouter()


@router.get("")
def list_asset_kinds():
    """Names accepted as {kind} below."""
    return sorted(KINDS)


@router.get("/{kind}/{asset_id}")
def get_asset(kind: str, asset_id: str, store: ModelStore = Depends(get_store)):
    """Current version of an entity, including ones orphaned by a model delete."""
    try:
        entity = store.get_asset(kind, asset_id)
    except CDMError as e:
        raise _http_error(e) from e
    return entity.model_dump(mode="json", by_alias=True)
