"""Lightweight blocking RPC client for a jsonrpcws websocket endpoint."""

from __future__ import annotations

import json
import uuid
from typing import Any

from websocket import WebSocketTimeoutException, create_connection

from jsonrpcws.utils.exceptions import RpcCallError


def rpc_call(
    url: str,
    method: str,
    params: list[Any] | None = None,
    *,
    request_id: Any = None,
    timeout_s: float = 10.0,
) -> dict[str, Any]:
    """Call a single remote procedure and return the full response envelope."""
    req_id = request_id if request_id is not None else f"req_{uuid.uuid4().hex[:12]}"
    ws = create_connection(url, timeout=max(1.0, timeout_s))
    try:
        ws.send(json.dumps({"id": req_id, "method": method, "params": list(params or [])}))
        return _wait_response(ws, method, req_id, timeout_s=timeout_s)
    finally:
        ws.close()


def _wait_response(ws: Any, method: str, req_id: Any, *, timeout_s: float) -> dict[str, Any]:
    ws.settimeout(max(1.0, timeout_s))
    while True:
        try:
            raw = ws.recv()
        except WebSocketTimeoutException as exc:
            raise RpcCallError(method, f"RPC timeout waiting response for {req_id}", req_id) from exc
        try:
            frame = json.loads(raw)
        except json.JSONDecodeError:
            continue
        if not isinstance(frame, dict):
            continue
        if frame.get("id") != req_id:
            continue
        return frame
