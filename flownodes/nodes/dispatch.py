"""Runs one node: lookup → invoke handler → check output shape → notify.

The scheduler calls ``dispatch`` once per node. Ordering, retries and
cancellation across the graph stay with the scheduler.
"""

import inspect
import logging
import time
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Union

from flownodes.exceptions import FlowNodesError, NodeExecutionError, NodeOutputError
from flownodes.nodes.registry import NodeRegistry, default_registry
from flownodes.types import NodeDescriptor, RunContext

logger = logging.getLogger(__name__)

Callback = Callable[[str, dict], Awaitable[None]]


def _as_descriptor(node: Union[NodeDescriptor, Mapping]) -> NodeDescriptor:
    if isinstance(node, NodeDescriptor):
        return node
    return NodeDescriptor.model_validate({
        "id": str(node.get("id") or ""),
        "type": node.get("type") or "",
        "data": node.get("data") or {},
    })


async def _notify(callbacks: Optional[list[Callback]], event: str, data: dict) -> None:
    for cb in callbacks or []:
        try:
            await cb(event, data)
        except Exception:
            logger.exception("Callback raised for event=%r", event)


async def dispatch(
    ctx: Optional[RunContext],
    node: Union[NodeDescriptor, Mapping],
    inputs: Optional[Mapping[str, Any]] = None,
    event: Any = None,
    registry: Optional[NodeRegistry] = None,
    callbacks: Optional[list[Callback]] = None,
) -> dict[str, Any]:
    """Execute ``node`` through its registered handler.

    Args:
        ctx: Run context (logger, cancel event, incoming values, http client)
        node: Node descriptor ``{id, type, data}``
        inputs: Merged upstream values keyed by input handle
        event: Original trigger event
        registry: Registry to resolve from; defaults to the shared one
        callbacks: Async callables ``cb(event, data)`` notified on
            ``node_started`` / ``node_completed`` / ``node_failed``

    Returns:
        The handler's output mapping.

    Raises:
        HandlerNotFound: no handler for ``node.type`` (caller decides fatal vs skip)
        NodeOutputError: result is not a mapping or lacks a declared output
        NodeExecutionError: the handler raised
    """
    ctx = ctx or RunContext()
    descriptor = _as_descriptor(node)
    registry = registry or default_registry()
    entry = registry.get(descriptor.type)

    info = {"node_id": descriptor.id, "node_type": descriptor.type}
    await _notify(callbacks, "node_started", {**info, "input_keys": list((inputs or {}).keys())})

    start = time.monotonic()
    try:
        result = entry.run(ctx, descriptor, dict(inputs or {}), event)
        if inspect.isawaitable(result):
            result = await result
        _check_outputs(result, entry.meta, descriptor)
    except FlowNodesError as exc:
        await _notify(callbacks, "node_failed", {**info, "error_type": type(exc).__name__, "error": str(exc)})
        raise
    except Exception as exc:
        logger.error("Node '%s' (%s) failed: %s", descriptor.id, descriptor.type, exc, exc_info=True)
        await _notify(callbacks, "node_failed", {**info, "error_type": type(exc).__name__, "error": str(exc)})
        raise NodeExecutionError(
            f"Node '{descriptor.id}' of type '{descriptor.type}' failed: {exc}",
            node_type=descriptor.type,
            node_id=descriptor.id,
        ) from exc

    elapsed_ms = int((time.monotonic() - start) * 1000)
    await _notify(callbacks, "node_completed", {**info, "output_keys": list(result.keys()), "elapsed_ms": elapsed_ms})
    return dict(result)


def _check_outputs(result: Any, meta, descriptor: NodeDescriptor) -> None:
    if not isinstance(result, Mapping):
        raise NodeOutputError(
            f"Node '{descriptor.id}' returned {type(result).__name__}, expected a mapping",
            node_type=descriptor.type,
            node_id=descriptor.id,
        )
    if meta is None:
        return
    missing = [k for k in meta.output_keys if k not in result]
    if missing:
        raise NodeOutputError(
            f"Node '{descriptor.id}' is missing declared outputs: {', '.join(missing)}",
            missing=missing,
            node_type=descriptor.type,
            node_id=descriptor.id,
        )
