"""Built-in ``core.formatter`` node: renders upstream values into a template.

Contract:
  inputs:  merged upstream values keyed by handle (``{"value": 1, "json": {...}}``)
  data:    ``mode`` ("json" | "string"), ``template``, optional ``availableParams``
           hints ``[{name, src, type?, nodeId?, preview?}, ...]``
  context: ``incoming_values`` aligned with ``availableParams`` disambiguates
           several edges sharing a handle name

Returns ``{"value": ...}``: a string in string mode, the parsed structure in
json mode, or ``None`` when the json template is invalid.
"""

from typing import Any

from flownodes.nodes.plugin import node
from flownodes.template import render
from flownodes.template.engine import coerce_mode
from flownodes.types import ConfigField, NodeDescriptor, NodeMeta, PortSpec, RenderMode, RunContext

DEFAULT_JSON_TEMPLATE = "{\n  \n}"

FORMATTER_META = NodeMeta(
    type="core.formatter",
    label="Formatter",
    description="Formats connected inputs into a single JSON object or string using {{mustache}}-style variables.",
    keywords=["template", "json", "string", "format", "payload", "mustache"],
    category="Core",
    inputs=[PortSpec(key="in", label="Inputs", type="any")],
    outputs=[PortSpec(key="value", label="Value", type=["string", "object"])],
    config=[
        ConfigField(key="mode", label="Mode", type="enum", options=["json", "string"], default="json"),
        ConfigField(key="template", label="Template", type="string", default=DEFAULT_JSON_TEMPLATE),
    ],
    initial_data={"mode": "json", "template": DEFAULT_JSON_TEMPLATE},
    is_deterministic=True,
    has_side_effects=False,
)


@node(FORMATTER_META)
async def run_formatter(ctx: RunContext, node: NodeDescriptor, inputs: dict, event: Any) -> dict:
    data = node.data
    mode = coerce_mode(data.get("mode"))
    template = data.get("template")
    if not isinstance(template, str):
        template = "" if mode is RenderMode.STRING else "{}"

    value = render(
        template,
        mode=mode,
        inputs=inputs,
        hints=data.get("availableParams"),
        incoming_values=ctx.incoming_values,
    )
    if value is None and mode is RenderMode.JSON:
        ctx.logger.warning("[Formatter] node '%s' produced invalid JSON; emitting null", node.id)
    return {"value": value}
