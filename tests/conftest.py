"""Test fixtures: fresh registry, run context, sample ABI event and payload.

All tests should use these fixtures for consistency.
"""

import pytest

from flownodes.nodes.plugin import register_builtin_nodes
from flownodes.nodes.registry import NodeRegistry
from flownodes.types import NodeDescriptor, RunContext


@pytest.fixture
def registry():
    """Isolated registry with the four built-in nodes."""
    reg = NodeRegistry()
    register_builtin_nodes(reg)
    return reg


@pytest.fixture
def ctx():
    return RunContext()


@pytest.fixture
def make_node():
    def _make(node_type: str, node_id: str = "n1", **data):
        return NodeDescriptor(id=node_id, type=node_type, data=data)
    return _make


@pytest.fixture
def order_event_abi():
    """Seaport-style event with an indexed scalar, a tuple and a tuple[]."""
    return {
        "type": "event",
        "name": "OrderFulfilled",
        "inputs": [
            {"name": "offerer", "type": "address", "indexed": True},
            {
                "name": "offer",
                "type": "tuple[]",
                "components": [
                    {"name": "itemType", "type": "uint8"},
                    {"name": "token", "type": "address"},
                    {"name": "amounts", "type": "uint256[]"},
                ],
            },
            {
                "name": "recipient",
                "type": "tuple",
                "components": [{"name": "wallet", "type": "address"}],
            },
        ],
    }


@pytest.fixture
def order_payload():
    return {
        "offerer": "0xA11CE",
        "offer": [
            {"itemType": 1, "token": "0xT1", "amounts": [10, 20]},
            {"itemType": 2, "token": "0xT2", "amounts": [30]},
        ],
        "recipient": {"wallet": "0xB0B"},
    }
