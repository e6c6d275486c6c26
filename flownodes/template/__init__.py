"""Template substitution engine: ``{{ key }}`` into strings or JSON payloads."""

from flownodes.template.bindings import BindingTable, build_bindings, qualified_tokens, resolve
from flownodes.template.engine import (
    looks_like_object_or_array,
    parse_json,
    render,
    render_json,
    render_string,
    to_json,
    to_text,
    validate_template,
)
from flownodes.template.tokens import find_tokens, is_inside_quotes, quote_states

__all__ = [
    "BindingTable", "build_bindings", "qualified_tokens", "resolve",
    "looks_like_object_or_array", "parse_json", "render", "render_json",
    "render_string", "to_json", "to_text", "validate_template",
    "find_tokens", "is_inside_quotes", "quote_states",
]
