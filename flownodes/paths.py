"""
Argument flattening and broadcast path extraction.

``flatten_args`` turns a nested ABI-style argument list into addressable
leaves (``consideration:itemType``); ``pick`` walks a decoded payload along a
leaf's path. Whenever the walk meets a sequence, the remaining path is
applied to every element, so a leaf under a ``tuple[]`` yields one value per
element.

All functions are pure (no I/O, no shared state).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Union

from flownodes.sentinels import UNDEFINED
from flownodes.types import ArgumentSpec, FlatLeaf

_INDEX_RE = re.compile(r"^[0-9]+$")

ArgLike = Union[ArgumentSpec, Mapping]


# ── Flattening ────────────────────────────────────────────────────────────────


def _is_tuple(type_name: str) -> bool:
    return type_name.startswith("tuple")


def _is_array(type_name: str) -> bool:
    return type_name.endswith("[]")


def flatten_args(
    args: Optional[Iterable[ArgLike]],
    prefix: str = "",
    parent_was_array: bool = False,
    parent_path: Optional[list[str]] = None,
) -> list[FlatLeaf]:
    """
    Depth-first flatten of an argument spec list.

    Tuples recurse into ``components`` with ``parent:child`` names. An array
    anywhere above a leaf marks the leaf's type with ``[]`` (unless it already
    ends in ``[]``). ``source_path`` is the list of real names from root to
    leaf and is what extraction uses.
    """
    out: list[FlatLeaf] = []
    base_path = list(parent_path or [])

    for raw in args or []:
        arg = raw if isinstance(raw, ArgumentSpec) else ArgumentSpec.model_validate(raw)
        base_name = arg.name or "(unnamed)"
        full_name = f"{prefix}:{base_name}" if prefix else base_name
        path = base_path + [base_name]
        type_name = arg.type or ""

        if _is_tuple(type_name):
            out.extend(flatten_args(
                arg.components,
                prefix=full_name,
                parent_was_array=parent_was_array or _is_array(type_name),
                parent_path=path,
            ))
            continue

        leaf_type = arg.type or arg.internal_type or "unknown"
        if parent_was_array and not _is_array(leaf_type):
            leaf_type = f"{leaf_type}[]"

        out.append(FlatLeaf(
            name=full_name,
            type=leaf_type,
            source_path=path,
            indexed=arg.indexed,
            internal_type=arg.internal_type,
        ))
    return out


# ── Extraction ────────────────────────────────────────────────────────────────


def pick(root: Any, path: list[str], numeric_index: bool = False) -> Any:
    """
    Walk ``root`` along ``path`` with broadcast semantics.

    - Sequence: apply the whole remaining path to every element and return
      the list of results. With ``numeric_index=True`` a purely numeric
      segment indexes into the sequence instead.
    - Mapping: descend by key; a missing key yields ``UNDEFINED`` for this
      branch only.
    - Anything else with path left over yields ``UNDEFINED``.
    """
    if not path:
        return root

    head, rest = path[0], path[1:]

    if isinstance(root, (list, tuple)):
        if numeric_index and _INDEX_RE.match(head):
            i = int(head)
            if i >= len(root):
                return UNDEFINED
            return pick(root[i], rest, numeric_index)
        return [pick(el, path, numeric_index) for el in root]

    if isinstance(root, Mapping):
        if head not in root:
            return UNDEFINED
        return pick(root[head], rest, numeric_index)

    return UNDEFINED


def materialize(value: Any) -> Any:
    """Replace branch misses nested inside broadcast results with ``None``.

    A top-level ``UNDEFINED`` is left alone so callers can still tell a miss.
    """
    if isinstance(value, list):
        return [None if v is UNDEFINED else materialize(v) for v in value]
    return value


def pick_leaf(payload: Any, leaf: Union[FlatLeaf, Mapping]) -> Any:
    """Extract a flattened leaf, falling back to splitting its name on ``:``."""
    if isinstance(leaf, FlatLeaf):
        name, source_path = leaf.name, leaf.source_path
    else:
        name = leaf.get("name") or ""
        source_path = leaf.get("sourcePath") or leaf.get("source_path")
    path = list(source_path) if source_path else name.split(":")
    return materialize(pick(payload, path))


def key_to_path(key: str) -> list[str]:
    """Split a template key on dots only.

    The first segment is kept whole as a literal root key, so flattened
    output names such as ``arg:items:itemType`` stay addressable.
    """
    return key.split(".")


def deep_get(root: Mapping, key: str) -> Any:
    """Dotted lookup used when a template key matched no binding."""
    return materialize(pick(root, key_to_path(key), numeric_index=True))
