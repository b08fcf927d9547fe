"""Shared schemas and types for the CDM store (backend and client contract)."""

from cdm_shared.schemas.cdm import (
    CausalDecisionModel,
    CausalDependency,
    Control,
    Diagram,
    DiagramElement,
    Display,
    EvalAsset,
    EvalElement,
    Evaluatable,
    EvaluatableContent,
    EvaluatableElement,
    InputOutputValue,
    Meta,
    RunnableModel,
    get_cdm_json_schema,
    write_cdm_schema_to_file,
)

__all__ = [
    "CausalDecisionModel",
    "CausalDependency",
    "Control",
    "Diagram",
    "DiagramElement",
    "Display",
    "EvalAsset",
    "EvalElement",
    "Evaluatable",
    "EvaluatableContent",
    "EvaluatableElement",
    "InputOutputValue",
    "Meta",
    "RunnableModel",
    "get_cdm_json_schema",
    "write_cdm_schema_to_file",
]
