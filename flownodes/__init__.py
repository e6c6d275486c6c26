"""flownodes: node dispatch and template substitution for automation graphs.

Usage:
    from flownodes import dispatch, RunContext, NodeDescriptor

    node = NodeDescriptor(id="f1", type="core.formatter",
                          data={"mode": "json", "template": '{"a": {{x}}}'})
    out = await dispatch(RunContext(), node, {"x": 5})   # {"value": {"a": 5}}
"""

from flownodes.types import (
    RenderMode, PortSpec, ConfigField, NodeMeta, NodeDescriptor, HandlerEntry,
    RunContext, ParamHint, Token, ArgumentSpec, FlatLeaf,
)
from flownodes.exceptions import (
    FlowNodesError, InvalidHandler, HandlerNotFound, NodeExecutionError,
    NodeOutputError, WebhookConfigError,
)
from flownodes.sentinels import UNDEFINED
from flownodes.paths import flatten_args, pick, pick_leaf
from flownodes.template import render, validate_template, build_bindings, find_tokens
from flownodes.nodes import NodeRegistry, default_registry, dispatch, lookup, register
from flownodes.version import __version__

__all__ = [
    "RenderMode", "PortSpec", "ConfigField", "NodeMeta", "NodeDescriptor", "HandlerEntry",
    "RunContext", "ParamHint", "Token", "ArgumentSpec", "FlatLeaf",
    "FlowNodesError", "InvalidHandler", "HandlerNotFound", "NodeExecutionError",
    "NodeOutputError", "WebhookConfigError",
    "UNDEFINED",
    "flatten_args", "pick", "pick_leaf",
    "render", "validate_template", "build_bindings", "find_tokens",
    "NodeRegistry", "default_registry", "dispatch", "lookup", "register",
    "__version__",
]
