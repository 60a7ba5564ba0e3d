"""Single-use result callback handed to ASYNC procedures."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Awaitable, Callable

from jsonrpcws.rpc.envelope import ResponseEnvelope
from jsonrpcws.utils.exceptions import CallbackConsumedError, describe_fault

EmitResponse = Callable[[ResponseEnvelope], Awaitable[None]]


class ResultCallback:
    """
    Continuation for one ASYNC request.

    `callback(value)` answers with a result, `callback.fail(description)` with
    an error. Only the first call is honoured; later calls raise
    CallbackConsumedError. May be called from the loop thread or any other
    thread.
    """

    def __init__(
        self,
        *,
        request_id: Any,
        method: str,
        emit: EmitResponse,
        loop: asyncio.AbstractEventLoop,
        track: Callable[[Any], None] | None = None,
    ):
        self.request_id = request_id
        self.method = method
        self._emit = emit
        self._loop = loop
        self._track = track
        self._lock = threading.Lock()
        self._used = False

    @property
    def used(self) -> bool:
        return self._used

    def __call__(self, value: Any = None) -> Any:
        return self._resolve(ResponseEnvelope.success(self.request_id, value))

    def fail(self, reason: Any = None) -> Any:
        """Answer with an error; exceptions are described the way SYNC faults are."""
        return self._resolve(ResponseEnvelope.failure(self.request_id, _failure_text(reason)))

    def _resolve(self, envelope: ResponseEnvelope) -> Any:
        with self._lock:
            if self._used:
                raise CallbackConsumedError(self.request_id, self.method)
            self._used = True
        return self._schedule(envelope)

    def _schedule(self, envelope: ResponseEnvelope) -> Any:
        """Send on the owning loop; returns the Task or concurrent Future."""
        coro = self._emit(envelope)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            pending: Any = self._loop.create_task(coro)
            if self._track is not None:
                self._track(pending)
        else:
            pending = asyncio.run_coroutine_threadsafe(coro, self._loop)
            if self._track is not None:
                # the tracker belongs to the loop thread
                self._loop.call_soon_threadsafe(self._track, pending)
        return pending

    def __repr__(self) -> str:
        state = "used" if self._used else "pending"
        return f"<ResultCallback {self.method} id={self.request_id!r} {state}>"


def _failure_text(reason: Any) -> str | None:
    if reason is None:
        return None
    if isinstance(reason, BaseException):
        return describe_fault(reason)
    return str(reason).strip() or None
