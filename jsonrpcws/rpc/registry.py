"""Per-connection function registry.

在整体架构中：每个连接持有一个 FunctionRegistry，由 expose hook 在处理任何消息之前填充，
DispatchEngine 只读取它。
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from loguru import logger

from jsonrpcws.utils.exceptions import ValidationError

DEFAULT_SYNC_PREFIX = "sync_"


class InvocationMode(str, Enum):
    """How a procedure hands its result back."""

    SYNC = "sync"
    ASYNC = "async"


@dataclass(frozen=True)
class RegistryEntry:
    """One exposed procedure."""

    name: str
    invoke: Callable[..., Any]
    receiver: Any = None
    mode: InvocationMode = InvocationMode.ASYNC

    @property
    def is_sync(self) -> bool:
        return self.mode is InvocationMode.SYNC

    @property
    def target(self) -> Callable[..., Any]:
        """The callable to invoke: `invoke` bound to `receiver` when it is a plain
        function owned by an instance, otherwise `invoke` itself."""
        if self.receiver is None or not inspect.isfunction(self.invoke):
            return self.invoke
        if isinstance(self.receiver, (Mapping, types.ModuleType, type)):
            return self.invoke
        return types.MethodType(self.invoke, self.receiver)


class FunctionRegistry:
    """
    Registry of procedures callable over one connection.

    Names are unique; registering an existing name replaces the entry.
    """

    def __init__(self, *, sync_prefix: str = DEFAULT_SYNC_PREFIX, trace: bool = True):
        self._entries: dict[str, RegistryEntry] = {}
        self._sync_prefix = sync_prefix
        self._trace = trace

    def register(self, entry: RegistryEntry) -> None:
        """Insert an entry, overwriting any entry with the same name."""
        if not isinstance(entry.name, str) or not entry.name.strip():
            raise ValidationError("procedure name must be a non-empty string", field="name")
        if not callable(entry.invoke):
            raise ValidationError(f"procedure {entry.name} is not callable", field="invoke")
        self._entries[entry.name] = entry

    def expose(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        receiver: Any = None,
        mode: InvocationMode = InvocationMode.ASYNC,
    ) -> RegistryEntry:
        """Expose a single callable under `name`."""
        entry = RegistryEntry(name=name, invoke=func, receiver=receiver, mode=InvocationMode(mode))
        self.register(entry)
        if self._trace:
            logger.debug("   ***   exposing: {} ({})", name, entry.mode.value)
        return entry

    def expose_module(
        self,
        prefix: str,
        obj: Any,
        *,
        sync_prefix: str | None = None,
    ) -> list[RegistryEntry]:
        """
        Expose every public callable member of `obj` as "<prefix>.<member>".

        Members whose name starts with the sync marker are published without
        it in SYNC mode; all others register in ASYNC mode.

        Args:
            prefix: Published name prefix.
            obj: A mapping of names to callables, a module, or any object.
            sync_prefix: Overrides the registry's sync marker for this call.

        Returns:
            The registered entries, in enumeration order.
        """
        if not isinstance(prefix, str) or not prefix.strip():
            raise ValidationError("module prefix must be a non-empty string", field="prefix")
        marker = self._sync_prefix if sync_prefix is None else sync_prefix
        entries: list[RegistryEntry] = []
        for member_name, func in _callable_members(obj):
            mode = InvocationMode.ASYNC
            published = member_name
            if marker and member_name.startswith(marker) and len(member_name) > len(marker):
                mode = InvocationMode.SYNC
                published = member_name[len(marker):]
            entry = RegistryEntry(
                name=f"{prefix}.{published}",
                invoke=func,
                receiver=_member_receiver(obj, func),
                mode=mode,
            )
            self.register(entry)
            entries.append(entry)
        if self._trace:
            funcs = ", ".join(e.name[len(prefix) + 1:] for e in entries)
            logger.debug("   ***   exposing module: {} [funcs: {}]", prefix, funcs)
        return entries

    def unregister(self, name: str) -> None:
        """Remove an entry by name."""
        self._entries.pop(name, None)

    def lookup(self, name: str) -> RegistryEntry | None:
        """Get an entry by name."""
        return self._entries.get(name)

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries


def _callable_members(obj: Any) -> list[tuple[str, Callable[..., Any]]]:
    if isinstance(obj, Mapping):
        return [
            (str(name), value)
            for name, value in obj.items()
            if callable(value) and not str(name).startswith("_")
        ]
    members = [
        (name, value)
        for name, value in inspect.getmembers(obj, inspect.isroutine)
        if not name.startswith("_")
    ]
    if isinstance(obj, type):
        # Instance methods need an instance; a class exposes only its
        # static and class methods.
        members = [
            (name, value)
            for name, value in members
            if not inspect.isfunction(inspect.getattr_static(obj, name, None))
        ]
    return members


def _member_receiver(obj: Any, func: Callable[..., Any]) -> Any:
    # Plain functions held by an instance (static methods, attributes) are
    # called unbound, so they carry no receiver.
    if isinstance(obj, (Mapping, types.ModuleType, type)):
        return obj
    return obj if getattr(func, "__self__", None) is obj else None
