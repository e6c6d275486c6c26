"""The UNDEFINED sentinel: a value that was never bound.

Distinct from ``None``, which is an explicit null coming from upstream.
"""

from __future__ import annotations

from typing import Any


class _UndefinedSentinel:
    """Opaque, single-instanced marker for an absent value. Test with ``is UNDEFINED``."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    # copies (pydantic deep-copies field defaults) must stay the same object
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "UNDEFINED"


UNDEFINED: Any = _UndefinedSentinel()

__all__ = ["UNDEFINED"]
