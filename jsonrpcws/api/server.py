"""FastAPI websocket endpoint serving the RPC dispatch engine."""

from __future__ import annotations

from typing import Any, AsyncIterator

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from loguru import logger

from jsonrpcws import __version__
from jsonrpcws.config.schema import Config
from jsonrpcws.rpc.dispatcher import DispatchEngine, ExposeHook


class WebSocketConnection:
    """Adapts a Starlette/FastAPI WebSocket to the RpcConnection contract."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def send(self, text: str) -> None:
        await self.websocket.send_text(text)

    async def iter_text(self) -> AsyncIterator[str | bytes]:
        """Yield each inbound frame; binary frames are passed on as bytes."""
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            text = message.get("text")
            yield text if text is not None else message.get("bytes") or b""


def create_app(
    expose: ExposeHook | None = None,
    *,
    config: Config | None = None,
    engine: DispatchEngine | None = None,
) -> FastAPI:
    """Create the FastAPI application with the RPC websocket route."""
    cfg = config or Config()
    rpc_engine = engine or DispatchEngine(
        expose,
        sync_prefix=cfg.rpc.sync_prefix,
        trace=cfg.rpc.trace,
    )
    app = FastAPI(title="jsonrpcws", version=__version__)
    app.state.engine = rpc_engine
    app.state.config = cfg

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "connections": len(rpc_engine.sessions)}

    @app.websocket(cfg.server.path)
    async def websocket_rpc(websocket: WebSocket):
        """JSON-RPC endpoint (id/method/params in, id/result/error out)."""
        await websocket.accept()
        client_host = getattr(websocket.client, "host", None) if websocket.client else None
        logger.info("RPC WebSocket accepted from {}", client_host)
        try:
            await rpc_engine.serve(WebSocketConnection(websocket))
        except WebSocketDisconnect:
            logger.debug("RPC WebSocket disconnected: {}", client_host)
        except Exception as e:
            logger.error("RPC WebSocket error: {}", e)

    return app


def run_server(app: FastAPI, host: str = "127.0.0.1", port: int = 18800, log_level: str = "warning") -> None:
    """Run the API server."""
    uvicorn.run(
        app,
        host=host,
        port=port,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=10,
        log_level=log_level,
    )
