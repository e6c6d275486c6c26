"""Node dispatch: registry, @node decorator and the single-node runner."""

from flownodes.nodes.dispatch import dispatch
from flownodes.nodes.plugin import get_registered_nodes, node, register_builtin_nodes
from flownodes.nodes.registry import NodeRegistry, default_registry, get_handler, lookup, register

__all__ = [
    "dispatch", "get_registered_nodes", "node", "register_builtin_nodes",
    "NodeRegistry", "default_registry", "get_handler", "lookup", "register",
]
