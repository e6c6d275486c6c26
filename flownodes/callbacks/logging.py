"""Structured JSON logging callback for node lifecycle events."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger("flownodes.audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _short(value: Any) -> Any:
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return str(value)[:200]


class LoggingCallback:
    """Emits one JSON log line per node lifecycle event.

    Events: ``node_started``, ``node_completed``, ``node_failed``.
    Logger name: flownodes.audit (configure in your logging setup)

    Pass an instance to ``dispatch``::

        await dispatch(ctx, node, inputs, event, callbacks=[LoggingCallback()])
    """

    async def __call__(self, event: str, data: dict) -> None:
        if event == "node_started":
            logger.info(json.dumps({
                "event": event,
                "ts": _now(),
                "node_id": data.get("node_id", ""),
                "node_type": data.get("node_type", ""),
                "input_keys": list(data.get("input_keys", [])),
            }))
        elif event == "node_completed":
            logger.info(json.dumps({
                "event": event,
                "ts": _now(),
                "node_id": data.get("node_id", ""),
                "node_type": data.get("node_type", ""),
                "output_keys": list(data.get("output_keys", [])),
                "elapsed_ms": data.get("elapsed_ms", 0),
            }))
        elif event == "node_failed":
            logger.error(json.dumps({
                "event": event,
                "ts": _now(),
                "node_id": data.get("node_id", ""),
                "node_type": data.get("node_type", ""),
                "error_type": data.get("error_type", ""),
                "error": _short(data.get("error", "")),
            }))
        else:
            logger.info(json.dumps({"event": event, "ts": _now(), **{
                k: _short(v) for k, v in data.items()
            }}))
