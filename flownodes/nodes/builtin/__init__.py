"""Built-in nodes package. Import to declare all built-in nodes."""

from flownodes.nodes.builtin.constant import run_constant
from flownodes.nodes.builtin.formatter import run_formatter
from flownodes.nodes.builtin.ethereum_listener import run_ethereum_listener, select_event
from flownodes.nodes.builtin.webhook import run_webhook

__all__ = [
    "run_constant",
    "run_formatter",
    "run_ethereum_listener", "select_event",
    "run_webhook",
]
