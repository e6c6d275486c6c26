"""Tokenizer for ``{{ key }}`` placeholders and the JSON quote-context scan."""

from __future__ import annotations

import re

from flownodes.types import Token

TOKEN_RE = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")

# Looser form used for validation: any non-empty run without a closing brace.
PLACEHOLDER_RE = re.compile(r"\{\{[^}]+\}\}")


def find_tokens(template: str) -> list[Token]:
    """Scan left to right; unterminated or malformed ``{{`` is not a token."""
    if not isinstance(template, str) or not template:
        return []
    return [
        Token(raw=m.group(0), key=m.group(1).strip(), start=m.start(), end=m.end())
        for m in TOKEN_RE.finditer(template)
    ]


def quote_states(text: str, offsets: list[int]) -> list[bool]:
    """
    For each offset, report whether it sits inside an open double-quoted run.

    A backslash escapes exactly the next character. One pass over ``text``
    regardless of how many offsets are asked for.
    """
    if not offsets:
        return []

    order = sorted(range(len(offsets)), key=lambda i: offsets[i])
    states = [False] * len(offsets)

    inside = False
    escaped = False
    pos = 0
    for i in order:
        target = offsets[i]
        while pos < target and pos < len(text):
            c = text[pos]
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                inside = not inside
            pos += 1
        states[i] = inside
    return states


def is_inside_quotes(text: str, index: int) -> bool:
    return quote_states(text, [index])[0]
