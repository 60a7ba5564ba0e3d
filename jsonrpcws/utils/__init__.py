"""Utility functions for jsonrpcws."""

from jsonrpcws.utils.helpers import load_expose_hook, parse_cli_value
from jsonrpcws.utils.exceptions import (
    JsonRpcWsError,
    ValidationError,
    RpcCallError,
    CallbackConsumedError,
    ExposeHookError,
    INVALID_REQUEST,
    FUNCTION_NOT_FOUND,
    UNSPECIFIED_FAILURE,
    describe_fault,
)

__all__ = [
    "load_expose_hook",
    "parse_cli_value",
    "JsonRpcWsError",
    "ValidationError",
    "RpcCallError",
    "CallbackConsumedError",
    "ExposeHookError",
    "INVALID_REQUEST",
    "FUNCTION_NOT_FOUND",
    "UNSPECIFIED_FAILURE",
    "describe_fault",
]
