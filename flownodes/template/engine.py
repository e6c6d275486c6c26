"""
Template rendering: string mode and json mode.

Never raises for a bad template or an unbound variable. String mode renders
unbound tokens as ``""``; json mode returns ``None`` when the template (or
the text after substitution) is not valid JSON.

Token syntax::

    {{name}}            simple input handle
    {{src.name}}        first upstream edge named ``name`` from ``src``
    {{src.name[2]}}     second such edge (needs hints / incoming values)
    {{json.a.0.b}}      dotted path into an input value
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from flownodes.sentinels import UNDEFINED
from flownodes.template.bindings import BindingTable, HintLike, build_bindings, resolve
from flownodes.template.tokens import PLACEHOLDER_RE, find_tokens, quote_states
from flownodes.types import RenderMode

logger = logging.getLogger(__name__)

_OBJECT_OR_ARRAY_RE = re.compile(r"^(?:\{[\s\S]*\}|\[[\s\S]*\])$")


# ── Value formatting ──────────────────────────────────────────────────────────


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> tuple[bool, Any]:
    """Strict JSON parse (NaN/Infinity rejected). Returns (ok, value)."""
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def parse_json(text: str) -> Any:
    """Parsed value, or ``None`` when ``text`` is not valid JSON."""
    return _loads(text)[1]


def to_json(value: Any) -> str:
    """Compact JSON literal. ``UNDEFINED`` becomes ``null``."""
    if value is UNDEFINED:
        value = None
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def to_text(value: Any) -> str:
    """Native text form: strings as-is, JSON spelling for scalars, compact JSON for composites."""
    if value is UNDEFINED:
        return ""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # past 1e21 integral floats keep exponent notation
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return str(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (Mapping, list, tuple)):
        return to_json(value)
    return str(value)


def _quoted_fragment(value: Any) -> str:
    """Escaped string content for a token already sitting between quotes."""
    text = "" if value is None or value is UNDEFINED else to_text(value)
    return json.dumps(text, ensure_ascii=False)[1:-1]


# ── Rendering ─────────────────────────────────────────────────────────────────


def looks_like_object_or_array(template: str) -> bool:
    return isinstance(template, str) and bool(_OBJECT_OR_ARRAY_RE.match(template.strip()))


def render_string(template: str, table: BindingTable) -> str:
    """Replace every token textually; identical raw tokens share one value."""
    if not isinstance(template, str) or not template:
        return ""
    out = template
    for token in find_tokens(template):
        out = out.replace(token.raw, to_text(resolve(token.key, table)))
    return out


def render_json(template: str, table: BindingTable) -> Any:
    """
    Substitute tokens with JSON-safe fragments and parse.

    Inside quotes a token becomes escaped string content; outside it becomes
    the value's JSON literal. Quote context is decided on the original
    template at each token's first character.
    """
    if not isinstance(template, str) or not template:
        return None

    tokens = find_tokens(template)
    if not tokens:
        return parse_json(template)

    if not looks_like_object_or_array(template):
        logger.debug("json template rejected: not an object or array")
        return None

    inside = quote_states(template, [t.start for t in tokens])
    result = template
    for token, quoted in zip(tokens, inside):
        value = resolve(token.key, table)
        fragment = _quoted_fragment(value) if quoted else to_json(value)
        result = result.replace(token.raw, fragment)

    ok, value = _loads(result)
    if not ok:
        logger.debug("json template invalid after substitution")
    return value


def coerce_mode(mode: Union[RenderMode, str, None]) -> RenderMode:
    """Anything other than ``string`` renders as json."""
    if isinstance(mode, RenderMode):
        return mode
    return RenderMode.STRING if mode == RenderMode.STRING.value else RenderMode.JSON


def render(
    template: str,
    mode: Union[RenderMode, str] = RenderMode.JSON,
    inputs: Optional[Mapping[str, Any]] = None,
    hints: Optional[Sequence[HintLike]] = None,
    incoming_values: Optional[Sequence[Any]] = None,
) -> Any:
    """Build bindings and render ``template`` in ``mode``."""
    table = build_bindings(inputs, hints, incoming_values)
    if coerce_mode(mode) is RenderMode.STRING:
        return render_string(template, table)
    return render_json(template, table)


def validate_template(template: str, mode: Union[RenderMode, str] = RenderMode.JSON) -> bool:
    """
    Cheap status check for an editor.

    String templates are always valid. Json templates must be an outer
    object/array and still parse once every ``{{...}}`` becomes ``0``.
    """
    if coerce_mode(mode) is RenderMode.STRING:
        return True
    if not looks_like_object_or_array(template):
        return False
    ok, _ = _loads(PLACEHOLDER_RE.sub("0", template))
    return ok
