"""YAML interface configuration loading and handler reference resolution."""

from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from webview_bridge.schema import (
    BridgeError,
    Handler,
    InterfaceMethod,
    InterfaceObject,
    JavaScriptInterfaceConfig,
)

DEBUG_ENV_VAR = "WEBVIEW_BRIDGE_DEBUG"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


def resolve_handler_ref(ref: str) -> Handler:
    """Import the callable named by ``module:attribute``.

    The attribute part may be dotted (``pkg.mod:Class.method``).
    """
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise BridgeError(f"Handler reference must look like 'module:attribute', got {ref!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise BridgeError(f"Cannot import handler module {module_name!r}: {exc}") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise BridgeError(f"Handler {ref!r} not found: no attribute {part!r}") from exc

    if not callable(target):
        raise BridgeError(f"Handler {ref!r} is not callable")
    return target


def debug_override(env: Mapping[str, str] | None = None) -> bool | None:
    """Debug-logging override from the environment, or None when unset."""
    env = os.environ if env is None else env
    value = env.get(DEBUG_ENV_VAR)
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise BridgeError(f"{DEBUG_ENV_VAR} must be a boolean flag, got {value!r}")


def _build_method(raw: Any, where: str) -> InterfaceMethod:
    if not isinstance(raw, dict):
        raise BridgeError(f"{where} must be a mapping")
    name = raw.get("name")
    ref = raw.get("handler")
    if not isinstance(ref, str):
        raise BridgeError(f"{where} needs a 'handler' reference string")
    return InterfaceMethod(name=name, handler=resolve_handler_ref(ref))


def config_from_payload(
    payload: Mapping[str, Any],
    env: Mapping[str, str] | None = None,
) -> JavaScriptInterfaceConfig:
    """Build a config from loose mapping data with string handler references."""
    raw_interfaces = payload.get("interfaces") or []
    if not isinstance(raw_interfaces, list):
        raise BridgeError("'interfaces' must be a list")

    interfaces: list[InterfaceObject] = []
    for i, raw in enumerate(raw_interfaces):
        where = f"interfaces[{i}]"
        if not isinstance(raw, dict):
            raise BridgeError(f"{where} must be a mapping")
        raw_methods = raw.get("methods") or []
        if not isinstance(raw_methods, list):
            raise BridgeError(f"{where}.methods must be a list")
        try:
            methods = [
                _build_method(method, f"{where}.methods[{j}]")
                for j, method in enumerate(raw_methods)
            ]
            interfaces.append(InterfaceObject(name=raw.get("name"), methods=methods))
        except ValidationError as exc:
            raise BridgeError(f"Invalid {where}: {exc}") from exc

    debug = payload.get("enable_debug_logging", payload.get("enableDebugLogging", False))
    override = debug_override(env)
    if override is not None:
        debug = override

    return JavaScriptInterfaceConfig(interfaces=interfaces, enable_debug_logging=bool(debug))


def load_interface_config(
    path: Path | str,
    env: Mapping[str, str] | None = None,
) -> JavaScriptInterfaceConfig:
    """Load an interface configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise BridgeError(f"Interface config not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise BridgeError(f"Interface config is not valid YAML: {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise BridgeError(f"Interface config must be a mapping: {path}")

    try:
        return config_from_payload(raw, env=env)
    except BridgeError as exc:
        raise BridgeError(f"{path}: {exc}") from exc
