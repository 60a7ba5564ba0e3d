"""Cached configuration access facade."""

from __future__ import annotations

import threading
from pathlib import Path

from jsonrpcws.config.loader import get_config_path, load_config
from jsonrpcws.config.schema import Config


class _ConfigCache:
    """Process-local Config instances keyed by resolved file path."""

    def __init__(self):
        self._lock = threading.RLock()
        self._entries: dict[Path, Config] = {}

    @staticmethod
    def resolve(config_path: Path | None) -> Path:
        return Path(config_path or get_config_path()).expanduser().resolve()

    def get(self, config_path: Path | None, *, force_reload: bool) -> Config:
        path = self.resolve(config_path)
        with self._lock:
            cfg = None if force_reload else self._entries.get(path)
            if cfg is None:
                cfg = self._entries[path] = load_config(path)
            return cfg

    def clear(self, config_path: Path | None) -> None:
        with self._lock:
            if config_path is None:
                self._entries.clear()
            else:
                self._entries.pop(self.resolve(config_path), None)


_cache = _ConfigCache()


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """Get config with process-local cache and optional refresh."""
    return _cache.get(config_path, force_reload=force_reload)


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Clear cached config entry (or all cache entries)."""
    _cache.clear(config_path)
