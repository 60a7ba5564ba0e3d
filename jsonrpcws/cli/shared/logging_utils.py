"""Loguru helpers for consistent file logging in CLI commands."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from jsonrpcws.config.loader import get_data_dir
from jsonrpcws.config.schema import LoggingConfig

_SINK_IDS: dict[str, int] = {}


def ensure_rotating_log_file(name: str, settings: LoggingConfig | None = None, level: str | None = None) -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_dir = get_data_dir() / "logs"
    log_path = log_dir / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    cfg = settings or LoggingConfig()
    log_dir.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level or cfg.level,
        rotation=cfg.rotation,
        retention=cfg.retention,
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path
