"""dispatch(): handler resolution, output contract, error wrapping, callbacks."""

import json
import logging

import pytest

from flownodes.callbacks import LoggingCallback
from flownodes.exceptions import HandlerNotFound, NodeExecutionError, NodeOutputError
from flownodes.nodes import dispatch
from flownodes.types import NodeDescriptor, NodeMeta, PortSpec


class _Recorder:
    def __init__(self):
        self.events = []

    async def __call__(self, event, data):
        self.events.append((event, data))


@pytest.mark.asyncio
async def test_dispatch_formatter(registry, ctx, make_node):
    node = make_node("core.formatter", mode="json", template='{"a": {{x}}}')
    out = await dispatch(ctx, node, {"x": 5}, None, registry=registry)
    assert out == {"value": {"a": 5}}


@pytest.mark.asyncio
async def test_dispatch_accepts_plain_dict_node(registry, ctx):
    out = await dispatch(ctx, {"id": "c1", "type": "core.constant", "data": {"value": "x"}}, registry=registry)
    assert out == {"value": "x"}


@pytest.mark.asyncio
async def test_unknown_type_raises_handler_not_found(registry, ctx, make_node):
    with pytest.raises(HandlerNotFound) as exc_info:
        await dispatch(ctx, make_node("nope.missing"), {}, None, registry=registry)
    assert exc_info.value.node_type == "nope.missing"


@pytest.mark.asyncio
async def test_sync_handler_supported(registry, ctx, make_node):
    registry.register("test.sync", lambda c, n, i, e: {"value": i["a"] * 2})
    out = await dispatch(ctx, make_node("test.sync"), {"a": 21}, None, registry=registry)
    assert out == {"value": 42}


@pytest.mark.asyncio
async def test_non_mapping_result_rejected(registry, ctx, make_node):
    async def bad(c, n, i, e):
        return [1, 2]

    registry.register("test.bad", bad)
    with pytest.raises(NodeOutputError):
        await dispatch(ctx, make_node("test.bad"), {}, None, registry=registry)


@pytest.mark.asyncio
async def test_missing_declared_output_rejected(registry, ctx, make_node):
    meta = NodeMeta(type="test.partial", label="Partial",
                    outputs=[PortSpec(key="a"), PortSpec(key="b")])

    async def partial(c, n, i, e):
        return {"a": 1}

    registry.register("test.partial", partial, meta)
    with pytest.raises(NodeOutputError) as exc_info:
        await dispatch(ctx, make_node("test.partial"), {}, None, registry=registry)
    assert exc_info.value.missing == ["b"]


@pytest.mark.asyncio
async def test_handler_exception_wrapped(registry, ctx, make_node):
    async def boom(c, n, i, e):
        raise ValueError("kaput")

    registry.register("test.boom", boom)
    with pytest.raises(NodeExecutionError) as exc_info:
        await dispatch(ctx, make_node("test.boom", node_id="b1"), {}, None, registry=registry)
    assert exc_info.value.node_id == "b1"
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_event_passed_through(registry, ctx, make_node):
    seen = {}

    async def capture(c, n, i, e):
        seen["event"] = e
        seen["node"] = n
        return {}

    registry.register("test.capture", capture)
    await dispatch(ctx, make_node("test.capture", flag=True), {}, {"block": 1}, registry=registry)
    assert seen["event"] == {"block": 1}
    assert isinstance(seen["node"], NodeDescriptor)
    assert seen["node"].data == {"flag": True}


@pytest.mark.asyncio
async def test_callbacks_on_success(registry, ctx, make_node):
    recorder = _Recorder()
    await dispatch(ctx, make_node("core.constant", value=1), {"x": 1}, None,
                   registry=registry, callbacks=[recorder])
    assert [e for e, _ in recorder.events] == ["node_started", "node_completed"]
    assert recorder.events[0][1]["input_keys"] == ["x"]
    assert recorder.events[1][1]["output_keys"] == ["value"]


@pytest.mark.asyncio
async def test_callbacks_on_failure(registry, ctx, make_node):
    async def boom(c, n, i, e):
        raise RuntimeError("nope")

    registry.register("test.boom", boom)
    recorder = _Recorder()
    with pytest.raises(NodeExecutionError):
        await dispatch(ctx, make_node("test.boom"), {}, None, registry=registry, callbacks=[recorder])
    assert recorder.events[-1][0] == "node_failed"
    assert recorder.events[-1][1]["error_type"] == "RuntimeError"


@pytest.mark.asyncio
async def test_failing_callback_does_not_break_node(registry, ctx, make_node):
    async def broken(event, data):
        raise RuntimeError("callback bug")

    out = await dispatch(ctx, make_node("core.constant", value=3), {}, None,
                         registry=registry, callbacks=[broken])
    assert out == {"value": 3}


@pytest.mark.asyncio
async def test_logging_callback_emits_json(registry, ctx, make_node, caplog):
    with caplog.at_level(logging.INFO, logger="flownodes.audit"):
        await dispatch(ctx, make_node("core.constant", node_id="c9", value=1), {}, None,
                       registry=registry, callbacks=[LoggingCallback()])
    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "flownodes.audit"]
    assert [r["event"] for r in records] == ["node_started", "node_completed"]
    assert records[1]["node_id"] == "c9"
    assert records[1]["node_type"] == "core.constant"
