import json

from fastapi.testclient import TestClient

from jsonrpcws.api.server import create_app
from jsonrpcws.config.schema import Config, ServerConfig
from jsonrpcws.demo import expose as demo_expose


def _call(ws, req_id, method, params):
    ws.send_text(json.dumps({"id": req_id, "method": method, "params": params}))
    return json.loads(ws.receive_text())


def test_websocket_endpoint_serves_sync_and_async_procedures():
    app = create_app(demo_expose)
    with TestClient(app) as client:
        with client.websocket_connect("/ws/rpc") as ws:
            assert _call(ws, 1, "math.add", [2, 3]) == {"id": 1, "result": 5, "error": None}
            assert _call(ws, 2, "math.echo", ["hi"]) == {"id": 2, "result": "hi", "error": None}
            assert _call(ws, 3, "math.sleep", [0]) == {"id": 3, "result": 0, "error": None}
            assert _call(ws, 4, "math.divide", [1, 0]) == {"id": 4, "result": None, "error": "division by zero"}
            assert _call(ws, 5, "math.missing", []) == {"id": 5, "result": None, "error": "Function not found"}
            ws.send_text("not json")
            assert json.loads(ws.receive_text()) == {"id": None, "result": None, "error": "Invalid Request"}


def test_health_reports_live_connections():
    app = create_app(demo_expose)
    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok", "connections": 0}
        with client.websocket_connect("/ws/rpc") as ws:
            assert _call(ws, "p", "ping", []) == {"id": "p", "result": "pong", "error": None}
            assert client.get("/health").json()["connections"] == 1


def test_custom_path_and_sync_prefix_from_config():
    config = Config(server=ServerConfig(path="/rpc"))
    config.rpc.sync_prefix = "now_"

    def _expose(session):
        session.registry.expose_module("t", {"now_time": lambda: 123})

    app = create_app(_expose, config=config)
    assert app.state.config is config
    with TestClient(app) as client:
        with client.websocket_connect("/rpc") as ws:
            assert _call(ws, 1, "t.time", []) == {"id": 1, "result": 123, "error": None}


def test_binary_frame_is_answered_as_invalid_request():
    app = create_app(demo_expose)
    with TestClient(app) as client:
        with client.websocket_connect("/ws/rpc") as ws:
            ws.send_bytes(b"\xff\x00")
            assert json.loads(ws.receive_text()) == {"id": None, "result": None, "error": "Invalid Request"}
            assert _call(ws, 2, "math.add", [1, 1]) == {"id": 2, "result": 2, "error": None}
