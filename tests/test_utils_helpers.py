import pytest

from jsonrpcws.demo import expose as demo_expose
from jsonrpcws.rpc.registry import FunctionRegistry, InvocationMode
from jsonrpcws.rpc.session import ConnectionSession
from jsonrpcws.utils.exceptions import (
    CallbackConsumedError,
    ExposeHookError,
    JsonRpcWsError,
    RpcCallError,
    describe_fault,
)
from jsonrpcws.utils.helpers import load_expose_hook, parse_cli_value


def test_load_expose_hook_resolves_import_path():
    assert load_expose_hook("jsonrpcws.demo:expose") is demo_expose
    assert callable(load_expose_hook("jsonrpcws.demo:MathModule.echo"))


@pytest.mark.parametrize(
    "target",
    ["jsonrpcws.demo", ":expose", "jsonrpcws.nope:expose", "jsonrpcws.demo:missing", "jsonrpcws:__version__"],
)
def test_load_expose_hook_errors(target):
    with pytest.raises(ExposeHookError) as exc_info:
        load_expose_hook(target)
    assert exc_info.value.code == "EXPOSE_HOOK_ERROR"
    assert exc_info.value.details["target"] == target


def test_parse_cli_value():
    assert parse_cli_value("2") == 2
    assert parse_cli_value('{"a": [1]}') == {"a": [1]}
    assert parse_cli_value("null") is None
    assert parse_cli_value("hello") == "hello"


def test_describe_fault():
    assert describe_fault(RuntimeError("boom")) == "boom"
    assert describe_fault(RuntimeError("  ")) == "Unspecified Failure"
    assert describe_fault(None) == "Unspecified Failure"
    assert describe_fault(RpcCallError("m", "remote said no")) == "remote said no"


def test_error_to_dict_and_str():
    exc = CallbackConsumedError(3, "m.f")
    assert isinstance(exc, JsonRpcWsError)
    assert exc.to_dict()["error"] == "CALLBACK_CONSUMED"
    assert exc.to_dict()["details"] == {"id": 3, "method": "m.f"}
    assert str(exc).startswith("[CALLBACK_CONSUMED]")


def test_demo_expose_registers_math_module():
    session = ConnectionSession(key="k", connection=None, registry=FunctionRegistry())
    demo_expose(session)
    modes = {name: session.registry.lookup(name).mode for name in session.registry.names()}
    assert modes == {
        "math.add": InvocationMode.SYNC,
        "math.divide": InvocationMode.SYNC,
        "math.echo": InvocationMode.ASYNC,
        "math.sleep": InvocationMode.ASYNC,
        "ping": InvocationMode.SYNC,
    }
