"""Node lifecycle callbacks."""

from flownodes.callbacks.logging import LoggingCallback

__all__ = ["LoggingCallback"]
