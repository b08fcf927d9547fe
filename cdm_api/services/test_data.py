"""
Sample CDMs for seeding and for exercising the store end to end.

- build_test_model: a simple adder. Two Levers with interactive sliders feed
  one Outcome showing their sum. Every call mints fresh UUIDs.
- build_placeholder_model: a minimal Lever --> Outcome model with fixed UUIDs,
  used to seed an empty database.
"""

import base64
import uuid

from cdm_shared.schemas import (
    CausalDecisionModel,
    CausalDependency,
    Control,
    Diagram,
    DiagramElement,
    Display,
    EvalAsset,
    EvalElement,
    InputOutputValue,
    Meta,
    RunnableModel,
)

PLACEHOLDER_MODEL_UUID = "18c731e4-6215-4908-b094-7be07ef17c98"

ADD_SCRIPT = """(function () {
  const add = function (vals) {
    let sum = 0;
    vals.forEach((val) => {
      sum += val;
    });
    return [sum];
  };

  return { funcMap: { "add": add } };
})();"""


def _new_id() -> str:
    return str(uuid.uuid4())


def _slider(min_value: int, max_value: int, value: int, interactive: bool) -> dict:
    return {
        "controlParameters": {
            "min": min_value,
            "max": max_value,
            "step": 1,
            "value": value,
            "isInteractive": interactive,
        }
    }


def build_test_model() -> CausalDecisionModel:
    """Adder CDM touching every stored component type."""
    model_id = _new_id()
    diagram_id = _new_id()
    input1, input2, output = _new_id(), _new_id(), _new_id()
    display1, display2, display_out = _new_id(), _new_id(), _new_id()
    asset_id = _new_id()

    # IO values and the diagram elements that show them share uuids
    elements = [
        DiagramElement(
            meta=Meta(uuid=input1, name="Sum Input 1"),
            causal_type="Lever",
            position={"x": 87.5, "y": 256.5},
            displays=[Display(meta=Meta(uuid=display1, name=""), display_type="controlRange", content=_slider(0, 50, 25, True))],
        ),
        DiagramElement(
            meta=Meta(uuid=input2, name="Sum Input 2"),
            causal_type="Lever",
            position={"x": 89.5, "y": 439.5},
            displays=[Display(meta=Meta(uuid=display2, name=""), display_type="controlRange", content=_slider(0, 50, 25, True))],
        ),
        DiagramElement(
            meta=Meta(uuid=output, name="Sum Output"),
            causal_type="Outcome",
            position={"x": 500, "y": 348},
            displays=[Display(meta=Meta(uuid=display_out, name="Sum:"), display_type="controlRange", content=_slider(0, 100, 50, False))],
        ),
    ]
    dependencies = [
        CausalDependency(meta=Meta(uuid=_new_id(), name="Sum input 1 --> Sum output"), source=input1, target=output),
        CausalDependency(meta=Meta(uuid=_new_id(), name="Sum input 2 --> Sum output"), source=input2, target=output),
    ]

    return CausalDecisionModel(
        schema_tag="Placeholder",
        meta=Meta(
            uuid=model_id,
            name="Test Model",
            summary="Adder model exercising diagrams, displays, runnable models, eval assets, controls and IO values.",
            version="0.1",
            draft=True,
            created_date="2025-04-29T12:31:37-04:00",
        ),
        runnable_models=[
            RunnableModel(
                meta=Meta(uuid=_new_id(), name="Test runnable model"),
                elements=[
                    EvalElement(
                        meta=Meta(uuid=_new_id(), name="Sum inputs"),
                        inputs=[input1, input2],
                        outputs=[output],
                        function_name="add",
                        evaluatable_asset=asset_id,
                    )
                ],
            )
        ],
        evaluatable_assets=[
            EvalAsset(
                meta=Meta(uuid=asset_id, name="Add script"),
                eval_type="Script",
                content={
                    "script": base64.b64encode(ADD_SCRIPT.encode("utf-8")).decode("ascii"),
                    "language": "javascript",
                },
            )
        ],
        input_output_values=[
            InputOutputValue(meta=Meta(uuid=input1, name="Add Input 1"), data=30),
            InputOutputValue(meta=Meta(uuid=input2, name="Add Input 2"), data=27),
            InputOutputValue(meta=Meta(uuid=output, name="Add Output"), data=None),
        ],
        controls=[
            Control(meta=Meta(uuid=_new_id(), name="Control: Sum Input 1"), input_output_values=[input1], displays=[display1]),
            Control(meta=Meta(uuid=_new_id(), name="Control: Sum Input 2"), input_output_values=[input2], displays=[display2]),
            Control(meta=Meta(uuid=_new_id(), name="Control: Sum Output"), input_output_values=[output], displays=[display_out]),
        ],
        diagrams=[
            Diagram(
                meta=Meta(uuid=diagram_id, name="Test Diagram", created_date="2025-04-29T12:31:37-04:00"),
                elements=elements,
                dependencies=dependencies,
            )
        ],
    )


def build_placeholder_model() -> CausalDecisionModel:
    """Minimal Lever --> Outcome model with fixed UUIDs."""
    lever = "ca843ab9-3058-4e9d-8633-18812c6a955b"
    outcome = "3bf61246-1473-4e70-beca-9d60275aaeb7"
    box = {"width": 400, "height": 200}
    return CausalDecisionModel(
        schema_tag="Placeholder",
        meta=Meta(
            uuid=PLACEHOLDER_MODEL_UUID,
            name="Test CDM Meta",
            summary="Placeholder model seeded into an empty database",
        ),
        diagrams=[
            Diagram(
                meta=Meta(uuid="5fcacd4f-d14e-45bf-b1f4-65cf9498f642", name="Test CDM Diagram"),
                elements=[
                    DiagramElement(
                        meta=Meta(uuid=lever, name="Test Lever"),
                        causal_type="Lever",
                        position={"position": {"x": 0, "y": 0}, "boundingBoxSize": box},
                    ),
                    DiagramElement(
                        meta=Meta(uuid=outcome, name="Test Outcome"),
                        causal_type="Outcome",
                        position={"position": {"x": 500, "y": 0}, "boundingBoxSize": box},
                    ),
                ],
                dependencies=[
                    CausalDependency(
                        meta=Meta(uuid="edfb963b-2031-426f-b8ab-393800dbd8ec", name="Test Lever --> Test Outcome"),
                        source=lever,
                        target=outcome,
                    )
                ],
            )
        ],
    )
