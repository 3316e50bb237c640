"""Diagnostics for interface configurations.

``diagnose_interface_config`` checks how a configuration will look from the
page's side before it is installed: names that collide, names page code can
only reach with bracket access, and names that clobber browser globals or the
bridge's own hidden globals. The function never raises; it always returns a
``ConfigReport``.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict

from webview_bridge.injection import BOOTSTRAP_GLOBALS, DEFAULT_TRANSPORT, HIDDEN_GLOBALS
from webview_bridge.schema import JavaScriptInterfaceConfig


class ConfigIssue(BaseModel):
    """A single problem found in an interface configuration."""

    model_config = ConfigDict(frozen=True)

    code: str
    interface: str
    method: str | None = None
    message: str
    severity: Literal["error", "warning"]


class ConfigReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    interface_names: list[str]
    issues: list[ConfigIssue]

    @property
    def is_valid(self) -> bool:
        return not any(issue.severity == "error" for issue in self.issues)

    @property
    def errors(self) -> list[ConfigIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ConfigIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]


_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "let",
    "new", "null", "return", "static", "super", "switch", "this", "throw",
    "true", "try", "typeof", "var", "void", "while", "with", "yield",
    "await", "implements", "interface", "package", "private", "protected",
    "public",
})

BUILTIN_GLOBALS: frozenset[str] = frozenset({
    "Array", "ArrayBuffer", "BigInt", "Boolean", "DataView", "Date", "Error",
    "Function", "Infinity", "Intl", "JSON", "Map", "Math", "NaN", "Number",
    "Object", "Promise", "Proxy", "Reflect", "RegExp", "Set", "String",
    "Symbol", "TypeError", "Uint8Array", "Uint32Array", "WeakMap", "WeakSet",
    "atob", "btoa", "console", "crypto", "document", "eval", "fetch",
    "globalThis", "history", "localStorage", "location", "navigator",
    "parent", "self", "sessionStorage", "setInterval", "setTimeout", "top",
    "undefined", "window",
})


def _is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def diagnose_interface_config(
    config: JavaScriptInterfaceConfig,
    transport: str = DEFAULT_TRANSPORT,
) -> ConfigReport:
    """Report naming problems in ``config`` as seen from the page."""
    issues: list[ConfigIssue] = []
    reserved = HIDDEN_GLOBALS | BOOTSTRAP_GLOBALS | {transport}

    seen_interfaces: set[str] = set()
    ordered_names: list[str] = []

    for interface in config.interfaces:
        name = interface.name

        if name in seen_interfaces:
            issues.append(ConfigIssue(
                code="DUPLICATE_INTERFACE",
                interface=name,
                message=f"Interface '{name}' is defined more than once; the last definition wins",
                severity="warning",
            ))
        else:
            seen_interfaces.add(name)
            ordered_names.append(name)

        if name in reserved:
            issues.append(ConfigIssue(
                code="RESERVED_NAME",
                interface=name,
                message=f"Interface '{name}' would overwrite a global the bridge depends on",
                severity="error",
            ))
        elif name in BUILTIN_GLOBALS:
            issues.append(ConfigIssue(
                code="SHADOWS_BUILTIN_GLOBAL",
                interface=name,
                message=f"Interface '{name}' replaces the page's built-in global of the same name",
                severity="warning",
            ))

        if not _is_identifier(name) or name in _RESERVED_WORDS:
            issues.append(ConfigIssue(
                code="INVALID_IDENTIFIER",
                interface=name,
                message=f"Interface '{name}' is only reachable as window[{name!r}]",
                severity="warning",
            ))

        if not interface.methods:
            issues.append(ConfigIssue(
                code="EMPTY_INTERFACE",
                interface=name,
                message=f"Interface '{name}' defines no methods",
                severity="warning",
            ))

        seen_methods: set[str] = set()
        for method in interface.methods:
            if method.name in seen_methods:
                issues.append(ConfigIssue(
                    code="DUPLICATE_METHOD",
                    interface=name,
                    method=method.name,
                    message=(
                        f"Method '{method.name}' is defined more than once on interface "
                        f"'{name}'; the last definition wins"
                    ),
                    severity="warning",
                ))
            seen_methods.add(method.name)

            if not _is_identifier(method.name):
                issues.append(ConfigIssue(
                    code="INVALID_IDENTIFIER",
                    interface=name,
                    method=method.name,
                    message=f"Method '{method.name}' is only reachable as {name}[{method.name!r}]",
                    severity="warning",
                ))

    return ConfigReport(interface_names=ordered_names, issues=issues)
