"""Configuration schema using Pydantic.

持久化到 ~/.jsonrpcws/config.json（camelCase 键），环境变量前缀 JSONRPCWS_。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class ServerConfig(BaseModel):
    """Websocket server configuration."""
    host: str = "127.0.0.1"
    port: int = 18800
    path: str = "/ws/rpc"  # Websocket route the dispatch engine is mounted on


class RpcConfig(BaseModel):
    """Dispatch engine configuration."""
    sync_prefix: str = "sync_"  # Member-name marker for SYNC procedures in expose_module
    trace: bool = True  # Log ***/<--/--> protocol lines at DEBUG
    expose: str = ""  # Default expose hook, "package.module:function"


class LoggingConfig(BaseModel):
    """Loguru file sink configuration."""
    level: str = "INFO"
    rotation: str = "10 MB"
    retention: str = "14 days"


class Config(BaseSettings):
    """Root configuration for jsonrpcws."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def rpc_url(self) -> str:
        """Websocket URL clients use to reach this server."""
        host = "127.0.0.1" if self.server.host in ("0.0.0.0", "") else self.server.host
        return f"ws://{host}:{self.server.port}{self.server.path}"

    model_config = ConfigDict(
        env_prefix="JSONRPCWS_",
        env_nested_delimiter="__"
    )
