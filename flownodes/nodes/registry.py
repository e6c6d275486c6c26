"""Central registry of node handlers: node type → run contract.

The table is process-wide state. It is filled during startup and read by
the scheduler afterwards. Writers take a lock and publish a new dict;
readers only dereference the current dict, so a lookup never waits on a
concurrent registration.
"""

import logging
import threading
from typing import Any, Callable, Optional

from flownodes.exceptions import HandlerNotFound, InvalidHandler
from flownodes.types import HandlerEntry, NodeMeta

logger = logging.getLogger(__name__)


class NodeRegistry:
    """Maps node types to their ``HandlerEntry``. Last registration wins."""

    def __init__(self):
        self._entries: dict[str, HandlerEntry] = {}
        self._write_lock = threading.Lock()

    def register(
        self,
        node_type: str,
        run: Callable[..., Any],
        meta: Optional[NodeMeta] = None,
    ) -> HandlerEntry:
        """Register (or replace) the handler for ``node_type``.

        Args:
            node_type: Declared node type, e.g. ``core.formatter``
            run: Callable ``run(ctx, node, inputs, event)``; may be async
            meta: Optional catalog metadata; its ``type`` must match

        Raises:
            InvalidHandler: if ``node_type`` is empty or ``run`` is not callable
        """
        if not isinstance(node_type, str) or not node_type.strip():
            raise InvalidHandler("Invalid node handler: node type is required", node_type=str(node_type or ""))
        if not callable(run):
            raise InvalidHandler(
                f"Invalid node handler for '{node_type}': run is not callable",
                node_type=node_type,
            )
        if meta is not None and meta.type != node_type:
            raise InvalidHandler(
                f"Invalid node handler: meta type '{meta.type}' does not match '{node_type}'",
                node_type=node_type,
            )

        entry = HandlerEntry(type=node_type, run=run, meta=meta)
        with self._write_lock:
            if node_type in self._entries:
                logger.debug("Replacing handler for node type '%s'", node_type)
            table = dict(self._entries)
            table[node_type] = entry
            self._entries = table
        return entry

    def unregister(self, node_type: str) -> bool:
        """Remove a handler. Returns False if none was registered."""
        with self._write_lock:
            if node_type not in self._entries:
                return False
            table = dict(self._entries)
            del table[node_type]
            self._entries = table
        return True

    def lookup(self, node_type: str) -> Optional[HandlerEntry]:
        """Return the entry for ``node_type`` or None. Never raises."""
        if not isinstance(node_type, str):
            return None
        return self._entries.get(node_type)

    def get(self, node_type: str) -> HandlerEntry:
        """Return the entry for ``node_type``.

        Raises:
            HandlerNotFound: if nothing is registered under that type
        """
        entry = self.lookup(node_type)
        if entry is None:
            raise HandlerNotFound(f"No handler for node type '{node_type}'", node_type=str(node_type))
        return entry

    def __contains__(self, node_type: str) -> bool:
        return self.lookup(node_type) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def list_types(self) -> list[str]:
        return sorted(self._entries)

    def list_meta(self) -> list[NodeMeta]:
        """Catalog metadata for every entry that carries it, sorted by type."""
        entries = self._entries
        return [entries[t].meta for t in sorted(entries) if entries[t].meta is not None]


# ── Process-wide default registry ─────────────────────────────────────────────

_default_registry = NodeRegistry()
_builtins_loaded = False
_builtins_lock = threading.Lock()


def default_registry(load_builtins: Optional[bool] = None) -> NodeRegistry:
    """The shared registry, with built-in nodes installed on first access.

    ``load_builtins`` defaults to ``config.autoload_builtin_nodes``.
    """
    global _builtins_loaded
    if load_builtins is None:
        from flownodes.config import config
        load_builtins = config.autoload_builtin_nodes
    if load_builtins and not _builtins_loaded:
        with _builtins_lock:
            if not _builtins_loaded:
                from flownodes.nodes.plugin import register_builtin_nodes
                register_builtin_nodes(_default_registry)
                _builtins_loaded = True
    return _default_registry


def register(node_type: str, run: Callable[..., Any], meta: Optional[NodeMeta] = None) -> HandlerEntry:
    """Register a handler on the shared registry (host-provided private nodes)."""
    return default_registry().register(node_type, run, meta)


def lookup(node_type: str) -> Optional[HandlerEntry]:
    return default_registry().lookup(node_type)


def get_handler(node_type: str) -> HandlerEntry:
    return default_registry().get(node_type)
