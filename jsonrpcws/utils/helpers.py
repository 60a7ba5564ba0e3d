"""Utility functions for jsonrpcws."""

from __future__ import annotations

import importlib
import json
from typing import Any, Callable

from jsonrpcws.utils.exceptions import ExposeHookError


def load_expose_hook(target: str) -> Callable[..., Any]:
    """Resolve an expose hook from "package.module:function"."""
    module_name, sep, attr_path = target.strip().partition(":")
    if not sep or not module_name or not attr_path:
        raise ExposeHookError(target, "expected 'package.module:function'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ExposeHookError(target, str(e)) from e
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ExposeHookError(target, f"no attribute '{attr}'") from e
    if not callable(obj):
        raise ExposeHookError(target, "not callable")
    return obj


def parse_cli_value(text: str) -> Any:
    """Parse a CLI argument as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
