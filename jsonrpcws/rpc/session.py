"""Connection-scoped state for the RPC dispatch engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AsyncIterator, Protocol, runtime_checkable

from jsonrpcws.rpc.registry import FunctionRegistry


@runtime_checkable
class RpcConnection(Protocol):
    """Transport handle: one complete serialized envelope per frame."""

    async def send(self, text: str) -> None: ...

    def iter_text(self) -> AsyncIterator[str | bytes]: ...


@dataclass
class ConnectionSession:
    """A live connection together with the registry it owns."""

    key: str
    connection: RpcConnection
    registry: FunctionRegistry = field(default_factory=FunctionRegistry)
    closed: bool = False
