"""Built-in ``events.webhook`` node: sends the upstream value to a URL.

Contract:
  inputs:  merged upstream values; exactly one is expected (``in`` preferred)
  data:    ``method``, ``url``, ``headers`` (``[{key, value}]`` or mapping),
           ``timeoutMs``
  context: ``http_client`` (optional ``httpx.AsyncClient``), ``cancel_event``

Returns ``{"response", "status", "ok"}``. A malformed URL, transport failure,
timeout or cancellation still returns that shape: ``{"response": {"error": ...},
"status": 0, "ok": False}``.

GET sends the value as a JSON ``data`` query parameter; other methods send
it as the JSON body.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote

import httpx

from flownodes.config import config
from flownodes.exceptions import WebhookConfigError
from flownodes.nodes.plugin import node
from flownodes.sentinels import UNDEFINED
from flownodes.template import to_json
from flownodes.types import ConfigField, NodeDescriptor, NodeMeta, PortSpec, RunContext

logger = logging.getLogger(__name__)

METHODS = ["POST", "GET", "PUT", "PATCH", "DELETE"]

WEBHOOK_META = NodeMeta(
    type="events.webhook",
    label="Webhook",
    description=(
        "Sends the (single) upstream value as a JSON payload to a configured URL. "
        "Optional headers. Supports GET, POST, PUT, PATCH, DELETE."
    ),
    keywords=["http", "request", "post", "webhook", "fetch"],
    category="Events",
    icon="📡",
    inputs=[PortSpec(
        key="in",
        label="JSON",
        type=["object", "array", "string", "number", "boolean", "null", "any"],
        max_connections=1,
    )],
    outputs=[
        PortSpec(key="response", label="Response", type=["object", "string", "null"]),
        PortSpec(key="status", label="Status", type="number"),
        PortSpec(key="ok", label="OK", type="boolean"),
    ],
    config=[
        ConfigField(key="method", label="Method", type="enum", options=METHODS, default="POST"),
        ConfigField(key="url", label="URL", type="string", default=""),
        ConfigField(key="headers", label="Headers", type="kv[]",
                    default=[{"key": "Content-Type", "value": "application/json"}]),
        ConfigField(key="timeoutMs", label="Timeout (ms)", type="number", default=10000),
    ],
    initial_data={
        "method": "POST",
        "url": "",
        "headers": [{"key": "Content-Type", "value": "application/json"}],
        "timeoutMs": 10000,
    },
    is_deterministic=False,     # network / remote side effects
    has_side_effects=True,
)


class RequestCancelled(Exception):
    """The run context's cancel event fired before the response arrived."""


def normalize_headers(headers: Any) -> dict[str, str]:
    """Accept ``[{key, value}]`` rows or a plain mapping; blank keys are dropped."""
    if isinstance(headers, list):
        out = {}
        for row in headers:
            if not isinstance(row, Mapping):
                continue
            key = str(row.get("key") or "").strip()
            if not key:
                continue
            value = row.get("value")
            out[key] = "" if value is None else str(value)
        return out
    if isinstance(headers, Mapping):
        return {str(k): str(v) for k, v in headers.items() if k}
    return {}


def first_input(inputs: Optional[Mapping[str, Any]]) -> Any:
    """``in``, else ``value``, else the first handle; ``UNDEFINED`` when empty."""
    if not isinstance(inputs, Mapping) or not inputs:
        return UNDEFINED
    if "in" in inputs:
        return inputs["in"]
    if "value" in inputs:
        return inputs["value"]
    return next(iter(inputs.values()))


def with_data_param(url: str, payload_json: str) -> str:
    """Set ``data=<json>`` on the URL's query string."""
    try:
        return str(httpx.URL(url).copy_set_param("data", payload_json))
    except (httpx.InvalidURL, TypeError, ValueError):
        sep = "&" if "?" in url else "?"
        return f"{url}{sep}data={quote(payload_json, safe='')}"


def parse_response(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            pass  # fall through to text
    return response.text


def _timeout_seconds(data: Mapping) -> Optional[float]:
    raw = data.get("timeoutMs")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raw = config.webhook_timeout_ms
    if raw <= 0:
        return None
    return raw / 1000


async def _send(
    ctx: RunContext,
    method: str,
    url: str,
    headers: httpx.Headers,
    content: Optional[str],
    timeout: Optional[float],
) -> httpx.Response:
    cancel_event = ctx.cancel_event
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelled("Request cancelled")

    owns_client = ctx.http_client is None
    client = ctx.http_client or httpx.AsyncClient(verify=config.webhook_verify_ssl)
    try:
        request = client.request(method, url, headers=headers, content=content, timeout=timeout)
        if cancel_event is None:
            return await request

        send_task = asyncio.ensure_future(request)
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # also runs when the caller cancels us; no request may outlive this call
            pending = [t for t in (send_task, cancel_task) if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        if send_task in done:
            return send_task.result()
        raise RequestCancelled("Request cancelled")
    finally:
        if owns_client:
            await client.aclose()


@node(WEBHOOK_META)
async def run_webhook(ctx: RunContext, node: NodeDescriptor, inputs: dict, event: Any) -> dict:
    data = node.data
    method = str(data.get("method") or "POST").upper()
    url = str(data.get("url") or "").strip()
    if not url:
        raise WebhookConfigError("Webhook node: URL is required.", node_type=node.type, node_id=node.id)

    payload_json = to_json(first_input(inputs))
    headers = httpx.Headers(normalize_headers(data.get("headers")))
    headers.setdefault("User-Agent", config.webhook_user_agent)

    content = None
    if method == "GET":
        url = with_data_param(url, payload_json)
    else:
        if "content-type" not in headers:
            headers["Content-Type"] = "application/json"
        content = payload_json

    try:
        response = await _send(ctx, method, url, headers, content, _timeout_seconds(data))
    except (httpx.HTTPError, httpx.InvalidURL, RequestCancelled) as exc:
        message = str(exc) or type(exc).__name__
        ctx.logger.warning("[Webhook] %s %s failed: %s", method, url, message)
        return {"response": {"error": message}, "status": 0, "ok": False}

    return {
        "response": parse_response(response),
        "status": response.status_code,
        "ok": response.is_success,
    }
