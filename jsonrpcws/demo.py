"""Demo procedures served by `jsonrpcws serve` when no expose hook is given."""

from __future__ import annotations

import asyncio
from typing import Any

from jsonrpcws.rpc.registry import InvocationMode
from jsonrpcws.rpc.session import ConnectionSession


class MathModule:
    """Exposed as "math": add is SYNC, the rest answer through their callback."""

    def sync_add(self, a: Any, b: Any) -> Any:
        return a + b

    def sync_divide(self, a: float, b: float) -> float:
        return a / b

    def echo(self, value: Any, callback) -> None:
        callback(value)

    async def sleep(self, seconds: float, callback) -> None:
        await asyncio.sleep(float(seconds))
        callback(seconds)


def expose(session: ConnectionSession) -> None:
    session.registry.expose_module("math", MathModule())
    session.registry.expose("ping", lambda: "pong", mode=InvocationMode.SYNC)
