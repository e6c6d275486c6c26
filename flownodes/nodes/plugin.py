"""@node decorator for declaring built-in node handlers.

Usage:
    META = NodeMeta(type="core.constant", label="Constant", ...)

    @node(META)
    async def run(ctx, node, inputs, event):
        ...

Decorated handlers are collected at import time; ``register_builtin_nodes``
installs them into a registry.
"""

import functools
import importlib
import inspect
from typing import Any, Callable

from flownodes.exceptions import InvalidHandler
from flownodes.types import HandlerEntry, NodeMeta

# Collected at import time: node type → (meta, run)
_registered_nodes: dict[str, tuple[NodeMeta, Callable[..., Any]]] = {}

# Modules that declare the built-in nodes
BUILTIN_MODULES = (
    "flownodes.nodes.builtin.constant",
    "flownodes.nodes.builtin.formatter",
    "flownodes.nodes.builtin.ethereum_listener",
    "flownodes.nodes.builtin.webhook",
)


def node(meta: NodeMeta):
    """Decorator to declare ``func`` as the run handler for ``meta.type``.

    Sync handlers are wrapped so every registered ``run`` is awaitable.
    """
    if not isinstance(meta, NodeMeta) or not meta.type:
        raise InvalidHandler("Invalid node handler: meta with a type is required")

    def decorator(func):
        if not callable(func):
            raise InvalidHandler(f"Invalid node handler for '{meta.type}'", node_type=meta.type)

        if inspect.iscoroutinefunction(func):
            wrapper = func
        else:
            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                return func(*args, **kwargs)

        _registered_nodes[meta.type] = (meta, wrapper)
        wrapper._flownodes_meta = meta
        return wrapper

    return decorator


def get_registered_nodes() -> dict[str, tuple[NodeMeta, Callable[..., Any]]]:
    """Return all nodes declared via @node."""
    return _registered_nodes.copy()


def register_builtin_nodes(registry) -> list[HandlerEntry]:
    """Import the built-in node modules and register every declared node."""
    for module in BUILTIN_MODULES:
        importlib.import_module(module)
    return [
        registry.register(node_type, run, meta)
        for node_type, (meta, run) in get_registered_nodes().items()
    ]
