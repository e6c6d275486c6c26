"""Built-in ``ethereum.listener`` node: emits decoded event arguments.

The trigger event carries the decoded log arguments keyed by ABI input
name; tuples are mappings and ``tuple[]`` are lists of mappings. The node
config holds the flattened argument list (``argsFlat``), which leaves are
visible (``argVisibility``) and whether each leaf also gets its own output
(``allValues``).

Outputs:
  - default:     ``{"event": {flat_name: value}}``
  - all values:  ``{"arg:<flat_name>": value, ..., "event": {...}}``

Leaves under a ``tuple[]`` come out as lists, one value per element.
"""

from collections.abc import Mapping
from typing import Any, Optional

from flownodes.nodes.plugin import node
from flownodes.paths import flatten_args, pick_leaf
from flownodes.sentinels import UNDEFINED
from flownodes.types import ConfigField, NodeDescriptor, NodeMeta, PortSpec, RunContext

ARG_OUTPUT_PREFIX = "arg:"

ETHEREUM_LISTENER_META = NodeMeta(
    type="ethereum.listener",
    label="Ethereum Event",
    description="Listen to a contract's event and emit its arguments.",
    keywords=["ethereum", "event", "listener", "abi", "logs"],
    category="Events",
    icon="⚡️",
    blockchains=["ethereum"],
    outputs=[PortSpec(key="event", label="Event (filtered)", type="object")],
    config=[
        ConfigField(key="address", label="Address", type="string", required=True, default=""),
        ConfigField(key="events", label="Events", type="json", default=[]),
        ConfigField(key="eventName", label="Event Name", type="string", default=""),
        ConfigField(key="argsRaw", label="Args (raw)", type="json", default=[]),
        ConfigField(key="argsFlat", label="Args (flat)", type="json", default=[]),
        ConfigField(key="argVisibility", label="Arg Visibility", type="json", default={}),
        ConfigField(key="allValues", label="All values", type="boolean", default=False),
    ],
    initial_data={
        "address": "",
        "events": [],
        "eventName": "",
        "argsRaw": [],
        "argsFlat": [],
        "argVisibility": {},
        "allValues": False,
    },
    is_deterministic=False,     # depends on chain events
    has_side_effects=False,     # listening only
)


def locate_payload(event: Any) -> Any:
    """Accept the decoded args directly or wrapped in ``payload``/``data``/``args``."""
    if isinstance(event, Mapping):
        for key in ("payload", "data", "args"):
            value = event.get(key)
            # an empty mapping or list still counts as the payload
            if isinstance(value, (Mapping, list)) or value:
                return value
        return event
    return event if event else {}


def select_event(events: Optional[list], name: str) -> dict[str, Any]:
    """Node-data patch for choosing ``name`` out of a contract's ABI events.

    Every flattened leaf starts visible.
    """
    evt = next((e for e in events or [] if isinstance(e, Mapping) and e.get("name") == name), None)
    inputs = list(evt.get("inputs") or []) if evt else []
    flat = [leaf.model_dump(by_alias=True, exclude_none=True) for leaf in flatten_args(inputs)]
    return {
        "eventName": name or "",
        "eventAbi": {"type": "event", "name": evt["name"], "inputs": inputs} if evt else None,
        "argsRaw": inputs,
        "argsFlat": flat,
        "argVisibility": {leaf["name"]: True for leaf in flat},
    }


@node(ETHEREUM_LISTENER_META)
async def run_ethereum_listener(ctx: RunContext, node: NodeDescriptor, inputs: dict, event: Any) -> dict:
    data = node.data
    args_flat = data.get("argsFlat") if isinstance(data.get("argsFlat"), list) else []
    visibility = data.get("argVisibility") or {}
    payload = locate_payload(event)

    filtered: dict[str, Any] = {}
    for leaf in args_flat:
        if not isinstance(leaf, Mapping):
            continue
        flat_name = leaf.get("name")
        if not flat_name or not visibility.get(flat_name):
            continue
        value = pick_leaf(payload, leaf)
        # None/False/0 are real values; only a missing path is dropped
        if value is not UNDEFINED:
            filtered[flat_name] = value

    if not data.get("allValues"):
        return {"event": filtered}

    out = {f"{ARG_OUTPUT_PREFIX}{k}": v for k, v in filtered.items()}
    out["event"] = filtered
    return out
