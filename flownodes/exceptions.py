"""Typed exception hierarchy. Every error flownodes can raise.

Template and extraction problems never raise: an invalid json
template renders to ``None`` and an unresolved variable or missing path
resolves to ``UNDEFINED``. Only configuration errors surface as exceptions.
"""


class FlowNodesError(Exception):
    """Base exception for all flownodes errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


# ── Registry ─────────────────────────────────────────────────────────────────


class InvalidHandler(FlowNodesError):
    """Registration with a missing node type or a non-callable run function."""
    def __init__(self, message: str, node_type: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.node_type = node_type


class HandlerNotFound(FlowNodesError):
    """No handler is registered for the requested node type."""
    def __init__(self, message: str, node_type: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.node_type = node_type


# ── Execution ────────────────────────────────────────────────────────────────


class NodeExecutionError(FlowNodesError):
    """A node handler raised while running."""
    def __init__(self, message: str, node_type: str = "", node_id: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.node_type = node_type
        self.node_id = node_id


class NodeOutputError(NodeExecutionError):
    """Handler result is not a mapping or lacks declared output keys."""
    def __init__(self, message: str, missing: list = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing = missing or []


class WebhookConfigError(NodeExecutionError):
    """Webhook node is misconfigured (e.g. no URL)."""
    pass
