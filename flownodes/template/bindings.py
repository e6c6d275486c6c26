"""
Variable binding table for template rendering.

Three layers, built fresh per render:

- ``simple``:    input handle name → value (``{{amount}}``)
- ``qualified``: ``source.name`` → value of its FIRST occurrence
- ``indexed``:   ``source.name[n]`` → value of its n-th occurrence, n ≥ 2

Occurrences are counted in hint-list order, so the list must be ordered.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from flownodes.paths import deep_get
from flownodes.sentinels import UNDEFINED
from flownodes.types import ParamHint

_INDEXED_KEY_RE = re.compile(r"\[[0-9]+\]$")

HintLike = Union[ParamHint, Mapping]


class BindingTable(BaseModel):
    simple: dict[str, Any] = Field(default_factory=dict)
    qualified: dict[str, Any] = Field(default_factory=dict)
    indexed: dict[str, Any] = Field(default_factory=dict)


def _coerce_hints(hints: Optional[Sequence[HintLike]]) -> list[ParamHint]:
    if not isinstance(hints, (list, tuple)):
        return []
    out = []
    for h in hints:
        if isinstance(h, ParamHint):
            out.append(h)
        elif isinstance(h, Mapping):
            data = dict(h)
            # blank name/source fall back to the model defaults
            for k in ("name", "source", "src"):
                if not data.get(k):
                    data.pop(k, None)
            out.append(ParamHint.model_validate(data))
    return out


def qualified_tokens(hints: Optional[Sequence[HintLike]]) -> list[str]:
    """Tokens an editor offers for each hint: ``{{src.name}}``, then ``{{src.name[2]}}``…"""
    counts: dict[str, int] = {}
    tokens = []
    for hint in _coerce_hints(hints):
        base = f"{hint.source}.{hint.name}"
        counts[base] = counts.get(base, 0) + 1
        suffix = f"[{counts[base]}]" if counts[base] > 1 else ""
        tokens.append(f"{{{{{base}{suffix}}}}}")
    return tokens


def build_bindings(
    inputs: Optional[Mapping[str, Any]] = None,
    hints: Optional[Sequence[HintLike]] = None,
    incoming_values: Optional[Sequence[Any]] = None,
) -> BindingTable:
    """
    Build the three-layer table.

    Per hint, the value is taken from (first match wins):
      1. ``incoming_values[i]`` when that list is given and long enough
      2. the hint's own ``value``
      3. ``inputs[name]``
    otherwise it is ``UNDEFINED``.
    """
    inputs = inputs if isinstance(inputs, Mapping) else {}
    table = BindingTable(simple=dict(inputs))

    explicit = list(incoming_values) if isinstance(incoming_values, (list, tuple)) else None
    counts: dict[str, int] = {}

    for idx, hint in enumerate(_coerce_hints(hints)):
        base = f"{hint.source}.{hint.name}"
        count = counts.get(base, 0) + 1
        counts[base] = count

        if explicit is not None and idx < len(explicit):
            value = explicit[idx]
        elif hint.value is not UNDEFINED:
            value = hint.value
        elif hint.name in inputs:
            value = inputs[hint.name]
        else:
            value = UNDEFINED

        if base not in table.qualified:
            table.qualified[base] = value
        if count > 1:
            table.indexed[f"{base}[{count}]"] = value

    return table


def resolve(key: str, table: BindingTable) -> Any:
    """indexed → qualified → simple → dotted deep path; ``UNDEFINED`` if nothing hits."""
    if _INDEXED_KEY_RE.search(key):
        value = table.indexed.get(key, UNDEFINED)
        if value is not UNDEFINED:
            return value

    if "." in key:
        value = table.qualified.get(key, UNDEFINED)
        if value is not UNDEFINED:
            return value

    if key in table.simple:
        return table.simple[key]

    return deep_get(table.simple, key)
