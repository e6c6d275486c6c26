"""All shared types, enums, and type aliases. Everything imports from here."""

from __future__ import annotations

import asyncio
import copy
import logging
from enum import Enum
from typing import Any, Callable, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from flownodes.sentinels import UNDEFINED


# ── Enums ──────────────────────────────────────────────────────────────

class RenderMode(str, Enum):
    STRING = "string"   # plain text, composites rendered as compact JSON
    JSON = "json"       # structured payload, parsed after substitution


# ── Node catalog ───────────────────────────────────────────────────────

class PortSpec(BaseModel):
    """A named input or output handle on a node."""
    key: str
    label: str = ""
    type: Union[str, list[str]] = "any"
    max_connections: Optional[int] = None   # None = unlimited


class ConfigField(BaseModel):
    """One entry of a node's inspector/config schema."""
    key: str
    label: str = ""
    type: str = "string"
    options: list[str] = Field(default_factory=list)
    default: Any = None
    required: bool = False


class NodeMeta(BaseModel):
    """Static description of a node type: identity, I/O, config, runtime hints."""
    type: str
    label: str
    version: str = "1.0.0"
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    category: str = "General"
    subcategory: str = ""
    icon: str = "🧩"
    blockchains: list[str] = Field(default_factory=lambda: ["all"])
    inputs: list[PortSpec] = Field(default_factory=list)
    outputs: list[PortSpec] = Field(default_factory=list)
    config: list[ConfigField] = Field(default_factory=list)
    initial_data: dict[str, Any] = Field(default_factory=dict)
    is_deterministic: bool = True
    has_side_effects: bool = False

    @property
    def output_keys(self) -> list[str]:
        return [p.key for p in self.outputs]

    def new_data(self) -> dict[str, Any]:
        """Fresh, independent copy of the defaults for a new node instance."""
        return copy.deepcopy(self.initial_data)


class NodeDescriptor(BaseModel):
    """A configured node in the graph. The core only reads ``data``."""
    id: str = ""
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class HandlerEntry(BaseModel):
    """Registry row: node type → run callable (+ optional catalog metadata)."""
    model_config = ConfigDict(frozen=True)

    type: str
    run: Callable[..., Any]
    meta: Optional[NodeMeta] = None


class RunContext(BaseModel):
    """Per-invocation context handed to every handler."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    logger: Any = Field(default_factory=lambda: logging.getLogger("flownodes.nodes"))
    cancel_event: Optional[asyncio.Event] = None
    # per-edge values aligned with the formatter's availableParams hints
    incoming_values: Optional[list[Any]] = None
    http_client: Optional[Any] = None   # httpx.AsyncClient; one is created per call if absent
    run_id: str = ""

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


# ── Template engine ────────────────────────────────────────────────────

class ParamHint(BaseModel):
    """An upstream edge as the editor knows it: ``{{source.name}}``."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = "value"
    source: str = Field(default="unknown", validation_alias=AliasChoices("source", "src"))
    value: Any = UNDEFINED
    type: str = "any"
    node_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("node_id", "nodeId"))
    preview: Any = None


class Token(BaseModel):
    """One ``{{ key }}`` occurrence in a template."""
    raw: str        # full match including braces
    key: str        # trimmed inner key
    start: int
    end: int


# ── Event arguments ────────────────────────────────────────────────────

class ArgumentSpec(BaseModel):
    """ABI-style argument description; tuples nest through ``components``."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None
    internal_type: Optional[str] = Field(default=None, alias="internalType")
    indexed: Optional[bool] = None
    components: list[ArgumentSpec] = Field(default_factory=list)


class FlatLeaf(BaseModel):
    """A flattened argument leaf: colon-joined display name + real path."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    source_path: list[str] = Field(alias="sourcePath")
    indexed: Optional[bool] = None
    internal_type: Optional[str] = Field(default=None, alias="internalType")
