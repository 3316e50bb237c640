"""Capability registry: interface name -> method name -> handler."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from webview_bridge.schema import Handler, JavaScriptInterfaceConfig


InterfaceTable = Mapping[str, Mapping[str, Handler]]

_EMPTY: InterfaceTable = MappingProxyType({})


class CapabilityRegistry:
    """Read-mostly table of host handlers exposed to the web view.

    ``configure()`` builds a new immutable table and swaps it in with a single
    assignment, so readers only ever see the old or the new table in full.
    """

    def __init__(self, config: JavaScriptInterfaceConfig | None = None) -> None:
        self._table: InterfaceTable = _EMPTY
        self._debug_logging = False
        if config is not None:
            self.configure(config)

    def configure(self, config: JavaScriptInterfaceConfig) -> None:
        """Replace the whole registry with the interfaces in ``config``.

        A later interface (or method) with the same name replaces an earlier one.
        """
        table: dict[str, Mapping[str, Handler]] = {}
        for interface in config.interfaces:
            methods: dict[str, Handler] = {}
            for method in interface.methods:
                methods[method.name] = method.handler
            table[interface.name] = MappingProxyType(methods)

        self._table = MappingProxyType(table)
        self._debug_logging = config.enable_debug_logging

    def clear(self) -> None:
        self._table = _EMPTY
        self._debug_logging = False

    @property
    def debug_logging(self) -> bool:
        return self._debug_logging

    def snapshot(self) -> InterfaceTable:
        """Return the current table; it never changes after being returned."""
        return self._table

    def has_interface(self, name: str) -> bool:
        return name in self._table

    def has_method(self, interface_name: str, method_name: str) -> bool:
        methods = self._table.get(interface_name)
        return methods is not None and method_name in methods

    def get_handler(self, interface_name: str, method_name: str) -> Handler | None:
        methods = self._table.get(interface_name)
        if methods is None:
            return None
        return methods.get(method_name)

    def list_interface_names(self) -> list[str]:
        return list(self._table.keys())

    def list_method_names(self, interface_name: str) -> list[str]:
        return list(self._table.get(interface_name, {}).keys())
