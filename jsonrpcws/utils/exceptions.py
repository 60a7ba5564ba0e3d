"""
Exception hierarchy and fault formatting for jsonrpcws.

Provides:
- Library exception classes with error codes
- The wire-level error strings carried in response envelopes
- Fault description helper used at the dispatch boundary
"""

from __future__ import annotations

from typing import Any

# Wire-level error strings. Clients match on these verbatim.
INVALID_REQUEST = "Invalid Request"
FUNCTION_NOT_FOUND = "Function not found"
UNSPECIFIED_FAILURE = "Unspecified Failure"


class JsonRpcWsError(Exception):
    """Base exception for all jsonrpcws errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(JsonRpcWsError):
    """Invalid registration or configuration input."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class RpcCallError(JsonRpcWsError):
    """A remote call was answered with an error envelope, or not answered."""

    def __init__(self, method: str, message: str, request_id: Any = None):
        super().__init__(
            message,
            code="RPC_CALL_ERROR",
            details={"method": method, "id": request_id},
        )


class CallbackConsumedError(JsonRpcWsError):
    """A single-use result callback was invoked more than once."""

    def __init__(self, request_id: Any, method: str):
        super().__init__(
            f"result callback for {method} (id {request_id}) was already used",
            code="CALLBACK_CONSUMED",
            details={"id": request_id, "method": method},
        )


class ExposeHookError(JsonRpcWsError):
    """Exposure hook could not be resolved from its import path."""

    def __init__(self, target: str, message: str):
        super().__init__(
            f"cannot load expose hook '{target}': {message}",
            code="EXPOSE_HOOK_ERROR",
            details={"target": target},
        )


def describe_fault(exc: BaseException | None) -> str:
    """Return the description sent to the caller for a failed invocation."""
    if exc is None:
        return UNSPECIFIED_FAILURE
    if isinstance(exc, JsonRpcWsError):
        return exc.message or UNSPECIFIED_FAILURE
    text = str(exc).strip()
    return text or UNSPECIFIED_FAILURE
