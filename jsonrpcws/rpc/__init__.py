"""Per-connection function registry and dispatch engine."""

from jsonrpcws.rpc.callback import ResultCallback
from jsonrpcws.rpc.dispatcher import DispatchEngine, ExposeHook, RpcResult, invoke_sync
from jsonrpcws.rpc.envelope import RequestEnvelope, ResponseEnvelope, parse_request
from jsonrpcws.rpc.registry import FunctionRegistry, InvocationMode, RegistryEntry
from jsonrpcws.rpc.session import ConnectionSession, RpcConnection

__all__ = [
    "ConnectionSession",
    "DispatchEngine",
    "ExposeHook",
    "FunctionRegistry",
    "InvocationMode",
    "RegistryEntry",
    "RequestEnvelope",
    "ResponseEnvelope",
    "ResultCallback",
    "RpcConnection",
    "RpcResult",
    "invoke_sync",
    "parse_request",
]
