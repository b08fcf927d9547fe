"""
Causal Decision Model (CDM) JSON documents as Pydantic models.

Used by the API (request/response bodies), the store (persist/assemble) and the
test-data generator. Keys on the wire are camelCase; Python attributes are
snake_case and either form is accepted on input.

Fields typed ``Any`` (addons, position, content, data, documentation) are opaque
blobs: they are stored and returned as-is, never interpreted.
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

SCHEMA_VERSION = "0.1.0"

_CONFIG = {"populate_by_name": True, "extra": "ignore"}


# -----------------------------------------------------------------------------
# Meta (identity envelope)
# -----------------------------------------------------------------------------


class Meta(BaseModel):
    """Identity and provenance envelope carried by every addressable entity."""

    uuid: str = Field(..., min_length=1, description="Logical identity, stable across versions")
    name: Optional[str] = Field(None, description="Human-readable name")
    summary: Optional[str] = Field(None, description="Short description")
    documentation: Optional[Any] = Field(None, description="Full documentation blob (content, MIMEType)")
    version: Optional[str] = Field(None, description="Author-supplied version label; not used for ordering")
    draft: bool = Field(False, description="Draft flag")
    creator: Optional[str] = None
    created_date: Optional[str] = Field(None, alias="createdDate")
    updator: Optional[str] = None
    updated_date: Optional[str] = Field(None, alias="updatedDate")

    model_config = _CONFIG


# -----------------------------------------------------------------------------
# Diagrams
# -----------------------------------------------------------------------------


class Display(BaseModel):
    """A display (slider, label, ...) attached to a diagram element."""

    meta: Meta
    display_type: Optional[str] = Field(None, alias="displayType")
    content: Optional[Any] = None

    model_config = _CONFIG


class DiagramElement(BaseModel):
    """Node in the causal graph (Lever, Outcome, External, Intermediate, ...)."""

    meta: Meta
    causal_type: Optional[str] = Field(None, alias="causalType")
    position: Optional[Any] = Field(None, description="Rendering/position payload")
    displays: list[Display] = Field(default_factory=list)
    addons: Optional[Any] = None

    model_config = _CONFIG


class CausalDependency(BaseModel):
    """Directed edge between two diagram elements, by element uuid."""

    meta: Meta
    source: str
    target: str

    model_config = _CONFIG


class Diagram(BaseModel):
    meta: Meta
    elements: list[DiagramElement] = Field(default_factory=list)
    dependencies: list[CausalDependency] = Field(default_factory=list)
    addons: Optional[Any] = None

    model_config = _CONFIG


# -----------------------------------------------------------------------------
# Values, controls, runnable logic
# -----------------------------------------------------------------------------


class InputOutputValue(BaseModel):
    meta: Meta
    data: Optional[Any] = None

    model_config = _CONFIG


class Control(BaseModel):
    """Binds input/output values to displays (uuids of each)."""

    meta: Meta
    input_output_values: list[str] = Field(default_factory=list, alias="inputOutputValues")
    displays: list[str] = Field(default_factory=list)

    model_config = _CONFIG


class EvalElement(BaseModel):
    """One function call of a runnable model: inputs -> function -> outputs."""

    meta: Meta
    inputs: list[str] = Field(default_factory=list, description="InputOutputValue uuids")
    outputs: list[str] = Field(default_factory=list, description="InputOutputValue uuids")
    function_name: Optional[str] = Field(None, alias="functionName")
    evaluatable_asset: Optional[str] = Field(None, alias="evaluatableAsset", description="EvalAsset uuid")
    addons: Optional[Any] = None

    model_config = _CONFIG


class RunnableModel(BaseModel):
    meta: Meta
    elements: list[EvalElement] = Field(default_factory=list)
    addons: Optional[Any] = None

    model_config = _CONFIG


class EvalAsset(BaseModel):
    """Executable logic (script, API call, binary) referenced by eval elements."""

    meta: Meta
    eval_type: Optional[str] = Field(None, alias="evalType")
    content: Optional[Any] = None

    model_config = _CONFIG


class EvaluatableContent(BaseModel):
    """Grab bag for a Script, API call, or Base64 binary element."""

    script: Optional[str] = None
    language: Optional[str] = None
    uri_endpoint: Optional[str] = Field(None, alias="uriEndpoint")
    payload: Optional[Any] = None
    base64_string: Optional[str] = Field(None, alias="base64String")

    model_config = _CONFIG


class EvaluatableElement(BaseModel):
    meta: Meta
    causal_type: Optional[str] = Field(None, alias="causalType")
    eval_type: Optional[str] = Field(None, alias="evalType")
    content: EvaluatableContent = Field(default_factory=EvaluatableContent)
    default_value: Optional[Any] = Field(None, alias="defaultValue")

    model_config = _CONFIG


class Evaluatable(BaseModel):
    meta: Meta
    elements: list[EvaluatableElement] = Field(default_factory=list)
    addons: Optional[Any] = None

    model_config = _CONFIG


# -----------------------------------------------------------------------------
# Root document
# -----------------------------------------------------------------------------


class CausalDecisionModel(BaseModel):
    """
    Root CDM document.

    Sub-entities are embedded inline (one copy per model). For a shared,
    reference-based in-memory shape see cdm_api.services.asset_refs.
    """

    schema_tag: str = Field("", alias="$schema", description="Schema tag of the document")
    meta: Meta
    diagrams: list[Diagram] = Field(default_factory=list)
    input_output_values: list[InputOutputValue] = Field(default_factory=list, alias="inputOutputValues")
    controls: list[Control] = Field(default_factory=list)
    runnable_models: list[RunnableModel] = Field(default_factory=list, alias="runnableModels")
    evaluatable_assets: list[EvalAsset] = Field(default_factory=list, alias="evaluatableAssets")
    evaluatables: list[Evaluatable] = Field(default_factory=list)
    addons: Optional[Any] = None

    model_config = _CONFIG


# -----------------------------------------------------------------------------
# JSON Schema export
# -----------------------------------------------------------------------------


def get_cdm_json_schema() -> dict[str, Any]:
    """Return the JSON schema of a CausalDecisionModel document (wire/alias form)."""
    schema = CausalDecisionModel.model_json_schema(by_alias=True)
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Causal Decision Model",
        "version": SCHEMA_VERSION,
        **{k: v for k, v in schema.items() if k != "title"},
    }


def write_cdm_schema_to_file(path: Optional[Union[str, Path]] = None) -> Path:
    """Write the CDM JSON schema to a file. Default: cdm_shared/schemas/cdm_schema.json"""
    if path is None:
        path = Path(__file__).resolve().parent / "cdm_schema.json"
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(get_cdm_json_schema(), indent=2), encoding="utf-8")
    return path
