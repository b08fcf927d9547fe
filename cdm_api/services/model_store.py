"""
Model store: create / read / update / delete of whole Causal Decision Models.

Built on the versioning layer (which record is current) and the graph layer
(persist and assemble nested documents). Updates are full-tree replacements:
the submitted document is inserted as a new version and becomes current;
nothing is merged from the previous version.

Each write runs in one transaction on the caller's session: it commits once at
the end and rolls back on any error, so a failed create leaves no partial tree.
"""

import logging
import os
from typing import Optional

from sqlalchemy.orm import Session

from cdm_api.errors import ConflictError, ConsistencyError, NotFoundError, ValidationError
from cdm_api.services import versioning
from cdm_api.services.graph import MODEL_KIND, KINDS, assemble, detach_and_delete, load_current, persist_tree
from cdm_api.utils.logging import log_store_event
from cdm_shared.schemas import CausalDecisionModel, Meta

logger = logging.getLogger(__name__)

MODEL_LIST_LIMIT = int(os.getenv("CDM_MODEL_LIST_LIMIT", "10"))
STRICT_DEPENDENCIES = os.getenv("CDM_STRICT_DEPENDENCIES", "0").lower() in ("1", "true", "yes")


def validate_dependencies(model: CausalDecisionModel) -> list[str]:
    """Dependencies whose source or target is not an element of the same diagram."""
    errors = []
    for diagram in model.diagrams:
        element_ids = {e.meta.uuid for e in diagram.elements}
        for dep in diagram.dependencies:
            for end in ("source", "target"):
                value = getattr(dep, end)
                if value not in element_ids:
                    errors.append(
                        f"Dependency {dep.meta.uuid} in diagram {diagram.meta.uuid}: "
                        f"{end} {value} is not an element of the diagram"
                    )
    return errors


class ModelStore:
    """Façade over one SQLAlchemy session."""

    def __init__(self, db: Session, strict_dependencies: Optional[bool] = None) -> None:
        self.db = db
        self.strict_dependencies = STRICT_DEPENDENCIES if strict_dependencies is None else strict_dependencies

    # -- reads -----------------------------------------------------------------

    def exists(self, uuid: str) -> bool:
        return versioning.exists(self.db, uuid, MODEL_KIND)

    def get_summary(self, limit: int = MODEL_LIST_LIMIT) -> list[Meta]:
        """Current meta of up to ``limit`` distinct models."""
        limit = max(0, min(limit, MODEL_LIST_LIMIT))
        return [versioning.record_to_meta(r) for r in versioning.list_current_by_kind(self.db, MODEL_KIND, limit)]

    def get_meta(self, uuid: str) -> Meta:
        record = versioning.current_meta(self.db, uuid, MODEL_KIND)
        if record is None:
            raise NotFoundError(MODEL_KIND, uuid)
        return versioning.record_to_meta(record)

    def get_history(self, uuid: str) -> list[Meta]:
        """Meta of every retained version, oldest first."""
        records = versioning.list_versions(self.db, uuid, MODEL_KIND)
        if not records:
            raise NotFoundError(MODEL_KIND, uuid)
        return [versioning.record_to_meta(r) for r in records]

    def get_full(self, uuid: str) -> CausalDecisionModel:
        model = load_current(self.db, MODEL_KIND, uuid)
        if model is None:
            raise NotFoundError(MODEL_KIND, uuid)
        return model

    def get_asset(self, kind: str, uuid: str):
        """Current version of any entity kind by its own uuid (orphans included)."""
        if kind not in KINDS:
            raise NotFoundError(kind, uuid)
        entity = load_current(self.db, kind, uuid)
        if entity is None:
            raise NotFoundError(kind, uuid)
        return entity

    # -- writes ----------------------------------------------------------------

    def create(self, model: CausalDecisionModel) -> CausalDecisionModel:
        uuid = model.meta.uuid
        if self.exists(uuid):
            log_store_event(logger, "create", uuid, success=False, error="conflict")
            raise ConflictError(MODEL_KIND, uuid, hint="PUT /v0/models")
        created = self._write(model)
        log_store_event(logger, "create", uuid, extra={"diagrams": len(model.diagrams)})
        return created

    def update(self, model: CausalDecisionModel) -> CausalDecisionModel:
        """Insert ``model`` as the new current version of an existing model."""
        uuid = model.meta.uuid
        if not self.exists(uuid):
            log_store_event(logger, "update", uuid, success=False, error="not_found")
            raise NotFoundError(MODEL_KIND, uuid)
        updated = self._write(model)
        log_store_event(logger, "update", uuid, extra={"diagrams": len(model.diagrams)})
        return updated

    def delete(self, uuid: str) -> None:
        """
        Remove every version of the model. Owned sub-entities are detached, not
        deleted, and stay retrievable by their own uuid.
        """
        if versioning.current_meta(self.db, uuid, MODEL_KIND) is None:
            raise NotFoundError(MODEL_KIND, uuid)
        try:
            meta_ids = versioning.sequence_numbers(self.db, uuid, MODEL_KIND)
            removed = detach_and_delete(self.db, MODEL_KIND, meta_ids)
            versioning.purge(self.db, uuid, MODEL_KIND)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if self.exists(uuid):
            log_store_event(logger, "delete", uuid, success=False, error="still_exists")
            raise ConsistencyError("Model failed to delete.", uuid=uuid)
        log_store_event(logger, "delete", uuid, extra={"versions": len(meta_ids), "rows": removed})

    def _write(self, model: CausalDecisionModel) -> CausalDecisionModel:
        if self.strict_dependencies:
            errors = validate_dependencies(model)
            if errors:
                raise ValidationError("Invalid causal dependencies", errors=errors)
        try:
            row = persist_tree(self.db, MODEL_KIND, model)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to persist model %s", model.meta.uuid)
            raise
        return assemble(self.db, MODEL_KIND, row)
