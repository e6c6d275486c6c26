"""Built-in ``core.constant`` node: emits a static value from its config."""

from typing import Any

from flownodes.nodes.plugin import node
from flownodes.types import ConfigField, NodeDescriptor, NodeMeta, PortSpec, RunContext

CONSTANT_META = NodeMeta(
    type="core.constant",
    label="Constant",
    description="A node that outputs a static value.",
    keywords=["number", "string", "constant", "value"],
    category="Core",
    outputs=[PortSpec(key="value", label="Value", type=["number", "string", "boolean", "object", "null"])],
    config=[ConfigField(key="value", label="Value", type="any", required=True, default=0)],
    initial_data={"value": 0},
    is_deterministic=True,
    has_side_effects=False,
)


@node(CONSTANT_META)
async def run_constant(ctx: RunContext, node: NodeDescriptor, inputs: dict, event: Any) -> dict:
    """Return ``{"value": node.data["value"]}``; dicts/lists are shallow-copied."""
    value = node.data.get("value")
    if isinstance(value, dict):
        value = dict(value)
    elif isinstance(value, list):
        value = list(value)
    return {"value": value}
