"""Argument flattening and broadcast extraction."""

from flownodes.paths import deep_get, flatten_args, pick, pick_leaf
from flownodes.sentinels import UNDEFINED
from flownodes.types import ArgumentSpec, FlatLeaf


# ── Flattening ────────────────────────────────────────────────────────────────

class TestFlattenArgs:

    def test_tuple_array_leaf_gets_array_suffix(self):
        leaves = flatten_args([{
            "name": "items",
            "type": "tuple[]",
            "components": [{"name": "itemType", "type": "uint8"}],
        }])
        assert len(leaves) == 1
        assert leaves[0].name == "items:itemType"
        assert leaves[0].type == "uint8[]"
        assert leaves[0].source_path == ["items", "itemType"]

    def test_array_leaf_is_not_suffixed_twice(self, order_event_abi):
        leaves = {leaf.name: leaf for leaf in flatten_args(order_event_abi["inputs"])}
        assert leaves["offer:amounts"].type == "uint256[]"
        assert leaves["offer:token"].type == "address[]"

    def test_scalar_and_plain_tuple(self, order_event_abi):
        leaves = {leaf.name: leaf for leaf in flatten_args(order_event_abi["inputs"])}
        assert leaves["offerer"].type == "address"
        assert leaves["offerer"].indexed is True
        assert leaves["recipient:wallet"].type == "address"
        assert leaves["recipient:wallet"].source_path == ["recipient", "wallet"]

    def test_order_is_depth_first(self, order_event_abi):
        names = [leaf.name for leaf in flatten_args(order_event_abi["inputs"])]
        assert names == [
            "offerer", "offer:itemType", "offer:token", "offer:amounts", "recipient:wallet",
        ]

    def test_nested_tuples_join_with_colons(self):
        leaves = flatten_args([{
            "name": "order",
            "type": "tuple",
            "components": [{
                "name": "parameters",
                "type": "tuple",
                "components": [{"name": "offerer", "type": "address"}],
            }],
        }])
        assert leaves[0].name == "order:parameters:offerer"
        assert leaves[0].type == "address"
        assert leaves[0].source_path == ["order", "parameters", "offerer"]

    def test_array_flag_propagates_through_inner_tuple(self):
        leaves = flatten_args([{
            "name": "orders",
            "type": "tuple[]",
            "components": [{
                "name": "meta",
                "type": "tuple",
                "components": [{"name": "id", "type": "uint256"}],
            }],
        }])
        assert leaves[0].type == "uint256[]"

    def test_unnamed_and_untyped_args(self):
        leaves = flatten_args([
            {"type": "bool"},
            {"name": "x", "internalType": "contract IERC20"},
            {"name": "y"},
        ])
        assert leaves[0].name == "(unnamed)"
        assert leaves[1].type == "contract IERC20"
        assert leaves[2].type == "unknown"

    def test_accepts_models_and_empty_input(self):
        spec = ArgumentSpec(name="amount", type="uint256")
        assert flatten_args([spec])[0].name == "amount"
        assert flatten_args([]) == []
        assert flatten_args(None) == []

    def test_dump_uses_camel_case_source_path(self):
        leaf = flatten_args([{"name": "a", "type": "uint8"}])[0]
        dumped = leaf.model_dump(by_alias=True, exclude_none=True)
        assert dumped == {"name": "a", "type": "uint8", "sourcePath": ["a"]}


# ── Extraction ────────────────────────────────────────────────────────────────

class TestPick:

    def test_broadcast_over_sequence(self):
        payload = {"items": [{"itemType": 1}, {"itemType": 2}]}
        assert pick(payload, ["items", "itemType"]) == [1, 2]

    def test_empty_path_returns_root(self):
        assert pick({"a": 1}, []) == {"a": 1}

    def test_missing_key_is_undefined(self):
        assert pick({"a": 1}, ["b"]) is UNDEFINED

    def test_explicit_null_is_kept(self):
        assert pick({"a": None}, ["a"]) is None

    def test_scalar_with_path_left_is_undefined(self):
        assert pick({"a": 5}, ["a", "b"]) is UNDEFINED

    def test_branch_miss_does_not_abort_siblings(self):
        payload = {"items": [{"a": 1}, {"b": 2}, {"a": 3}]}
        result = pick(payload, ["items", "a"])
        assert result[0] == 1
        assert result[1] is UNDEFINED
        assert result[2] == 3

    def test_nested_sequences_broadcast_per_level(self):
        payload = {"m": [[{"x": 1}], [{"x": 2}, {"x": 3}]]}
        assert pick(payload, ["m", "x"]) == [[1], [2, 3]]

    def test_numeric_index_mode(self):
        payload = {"l": [10, 20]}
        assert pick(payload, ["l", "1"], numeric_index=True) == 20
        assert pick(payload, ["l", "5"], numeric_index=True) is UNDEFINED

    def test_numeric_segment_broadcasts_without_index_mode(self):
        assert pick({"l": [{"0": "a"}]}, ["l", "0"]) == ["a"]


class TestPickLeaf:

    def test_round_trip_with_flatten(self):
        leaf = flatten_args([{
            "name": "items",
            "type": "tuple[]",
            "components": [{"name": "itemType", "type": "uint8"}],
        }])[0]
        payload = {"items": [{"itemType": 1}, {"itemType": 2}]}
        assert pick_leaf(payload, leaf) == [1, 2]

    def test_branch_miss_inside_list_becomes_none(self):
        payload = {"items": [{"a": 1}, {}]}
        assert pick_leaf(payload, {"name": "items:a", "sourcePath": ["items", "a"]}) == [1, None]

    def test_name_split_when_no_source_path(self, order_payload):
        assert pick_leaf(order_payload, {"name": "recipient:wallet"}) == "0xB0B"

    def test_top_level_miss_stays_undefined(self):
        assert pick_leaf({}, FlatLeaf(name="x", type="uint8", source_path=["x"])) is UNDEFINED


class TestDeepGet:

    def test_dotted_path_with_index(self):
        root = {"json": {"items": [{"id": 1}, {"id": 2}]}}
        assert deep_get(root, "json.items.1.id") == 2

    def test_dotted_path_broadcast(self):
        root = {"json": {"items": [{"id": 1}, {"id": 2}]}}
        assert deep_get(root, "json.items.id") == [1, 2]

    def test_colon_root_key_is_literal(self):
        root = {"arg:offer": {"token": "0xabc"}}
        assert deep_get(root, "arg:offer.token") == "0xabc"
