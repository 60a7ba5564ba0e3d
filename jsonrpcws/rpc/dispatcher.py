"""RPC dispatch engine: per-connection registry wiring and message routing."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import uuid
from functools import partial
from typing import Any, Awaitable, Callable

from loguru import logger

from jsonrpcws.rpc.callback import ResultCallback
from jsonrpcws.rpc.envelope import RequestEnvelope, ResponseEnvelope, parse_request
from jsonrpcws.rpc.registry import DEFAULT_SYNC_PREFIX, FunctionRegistry, RegistryEntry
from jsonrpcws.rpc.session import ConnectionSession, RpcConnection
from jsonrpcws.utils.exceptions import describe_fault


RpcResult = tuple[bool, Any | None, str | None]
ExposeHook = Callable[[ConnectionSession], Awaitable[None] | None]


async def invoke_sync(entry: RegistryEntry, params: list[Any]) -> RpcResult:
    """Call a SYNC procedure and fold any exception into an error result."""
    try:
        outcome = entry.target(*params)
        value = await outcome if inspect.isawaitable(outcome) else outcome
    except Exception as e:
        logger.warning("RPC method {} failed: {}", entry.name, e)
        return False, None, describe_fault(e)
    return True, value, None


class DispatchEngine:
    """
    Routes request envelopes to the procedures exposed on each connection.

    The exposure hook runs once per connection, before that connection's
    first frame is read.
    """

    def __init__(
        self,
        expose: ExposeHook | None = None,
        *,
        sync_prefix: str = DEFAULT_SYNC_PREFIX,
        trace: bool = True,
    ):
        self._expose = expose
        self._sync_prefix = sync_prefix
        self._trace = trace
        self._sessions: dict[str, ConnectionSession] = {}
        self._pending: set[Any] = set()

    @property
    def sessions(self) -> dict[str, ConnectionSession]:
        return dict(self._sessions)

    async def serve(self, connection: RpcConnection, connection_key: str | None = None) -> None:
        """Run one connection until its frame stream ends."""
        session = await self.on_connection(connection, connection_key)
        try:
            async for raw in connection.iter_text():
                await self.on_message(session, raw)
        finally:
            self.on_close(session)

    async def on_connection(
        self,
        connection: RpcConnection,
        connection_key: str | None = None,
    ) -> ConnectionSession:
        """Create the connection's registry and let the hook populate it."""
        key = connection_key or f"rpc_{uuid.uuid4().hex[:12]}"
        session = ConnectionSession(
            key=key,
            connection=connection,
            registry=FunctionRegistry(sync_prefix=self._sync_prefix, trace=self._trace),
        )
        if self._expose is not None:
            outcome = self._expose(session)
            if inspect.isawaitable(outcome):
                await outcome
        self._sessions[key] = session
        logger.info("RPC connection opened key={} procedures={}", key, len(session.registry))
        return session

    async def wait_pending(self) -> None:
        """Wait until every scheduled async procedure and callback send finishes."""
        while self._pending:
            await asyncio.gather(
                *(
                    asyncio.wrap_future(p) if isinstance(p, concurrent.futures.Future) else p
                    for p in list(self._pending)
                ),
                return_exceptions=True,
            )

    def on_close(self, session: ConnectionSession) -> None:
        """Drop the session; callbacks still pending for it are discarded."""
        session.closed = True
        self._sessions.pop(session.key, None)
        logger.info("RPC connection closed key={}", session.key)

    async def on_message(self, session: ConnectionSession, raw: str | bytes) -> None:
        """Handle one inbound frame and send its response, if any."""
        response = await self.handle_message(session, raw)
        if response is not None:
            await self._send(session, response)

    async def handle_message(
        self,
        session: ConnectionSession,
        raw: str | bytes,
    ) -> ResponseEnvelope | None:
        """Validate, resolve and invoke. Returns None when an ASYNC procedure
        will answer through its callback."""
        request = parse_request(raw)
        if not request.is_valid():
            self._log("-->", "invalid request (id {})", request.id)
            return ResponseEnvelope.invalid_request(request.id)

        entry = session.registry.lookup(request.method)
        if entry is None:
            self._log("-->", "function not found (id {}): {}", request.id, request.method)
            return ResponseEnvelope.not_found(request.id)

        params = list(request.params)
        self._log(
            "<--",
            "request (id {}): {}({})",
            request.id,
            request.method,
            ", ".join(repr(p) for p in params),
        )

        if entry.is_sync:
            ok, value, error = await invoke_sync(entry, params)
            if ok:
                self._log("-->", "response (id {}): {!r}", request.id, value)
                return ResponseEnvelope.success(request.id, value)
            self._log("-->", "failure (id {}): {}", request.id, error)
            return ResponseEnvelope.failure(request.id, error)

        self._invoke_async(session, request, entry, params)
        return None

    def _invoke_async(
        self,
        session: ConnectionSession,
        request: RequestEnvelope,
        entry: RegistryEntry,
        params: list[Any],
    ) -> None:
        callback = ResultCallback(
            request_id=request.id,
            method=entry.name,
            emit=partial(self._emit_later, session),
            loop=asyncio.get_running_loop(),
            track=self._track,
        )
        try:
            outcome = entry.target(*params, callback)
        except Exception as e:
            logger.exception("RPC async method {} raised before answering", entry.name)
            self._fail_callback(callback, e)
            return
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._track(task)
            task.add_done_callback(partial(self._on_async_done, callback))

    def _on_async_done(self, callback: ResultCallback, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error("RPC async method {} failed", callback.method)
            self._fail_callback(callback, exc)

    def _fail_callback(self, callback: ResultCallback, exc: BaseException) -> None:
        if callback.used:
            logger.error("RPC async method {} failed after answering: {}", callback.method, exc)
            return
        callback.fail(exc)

    async def _emit_later(self, session: ConnectionSession, envelope: ResponseEnvelope) -> None:
        if session.closed:
            logger.debug("Dropping response (id {}) for closed connection {}", envelope.id, session.key)
            return
        try:
            self._log("-->", "response (id {}): {!r}", envelope.id, envelope.result if envelope.ok else envelope.error)
            await self._send(session, envelope)
        except Exception as e:
            logger.error("Failed to send response (id {}) on {}: {}", envelope.id, session.key, e)

    async def _send(self, session: ConnectionSession, envelope: ResponseEnvelope) -> None:
        try:
            text = envelope.to_wire()
        except (TypeError, ValueError) as e:
            logger.warning("RPC response (id {}) is not serializable: {}", envelope.id, e)
            text = ResponseEnvelope.failure(envelope.id, describe_fault(e)).to_wire()
        await session.connection.send(text)

    def _track(self, pending: Any) -> None:
        self._pending.add(pending)
        pending.add_done_callback(self._pending.discard)

    def _log(self, direction: str, fmt: str, *args: Any) -> None:
        if self._trace:
            logger.debug(f"   {direction}   {fmt}", *args)
