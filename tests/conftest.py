"""
Pytest fixtures for bridge tests.

FakeWebView stands in for the page: it reads the bootstrap the bridge
injects, keeps a pending-call table keyed by call id, posts call envelopes
through an outbox, and settles pending calls from injected response snippets.
"""

import asyncio
import json
from typing import Any

import pytest

from webview_bridge.injection import RESPONSE_HANDLER_GLOBAL


class PageError(Exception):
    """Stands in for a rejected page-side promise (``new Error(message)``)."""


class FakeWebView:
    def __init__(self, transport_available: bool = True) -> None:
        self.transport_available = transport_available
        self.destroyed = False
        self.scripts: list[str] = []
        self.outbox: list[str] = []
        self.globals: dict[str, list[str]] = {}
        self.pending: dict[str, asyncio.Future] | None = None
        self.transport = "ReactNativeWebView"
        self._seq = 0

    # -- WebViewHost ----------------------------------------------------

    def inject_javascript(self, script: str) -> None:
        if self.destroyed:
            raise RuntimeError("web view destroyed")
        self.scripts.append(script)
        if "var interfaces = " in script:
            self._run_bootstrap(script)
        else:
            self._run_response(script)

    def _run_bootstrap(self, script: str) -> None:
        if self.pending is None:
            self.pending = {}
        for line in script.splitlines():
            stripped = line.strip()
            if stripped.startswith("var TRANSPORT = "):
                self.transport = json.loads(stripped[len("var TRANSPORT = "):].rstrip(";"))
            if stripped.startswith("var interfaces = "):
                for name, methods in json.loads(stripped[len("var interfaces = "):].rstrip(";")):
                    self.globals[name] = list(methods)

    def _run_response(self, script: str) -> None:
        prefix = f"window[{json.dumps(RESPONSE_HANDLER_GLOBAL)}]("
        for line in script.splitlines():
            stripped = line.strip()
            if stripped.startswith(prefix):
                if self.pending is None:
                    return
                self.handle_response(json.loads(stripped[len(prefix):-2]))

    # -- page side ------------------------------------------------------

    def handle_response(self, response: dict[str, Any]) -> None:
        future = self.pending.pop(response.get("callId"), None)
        if future is None:
            return
        if response.get("success"):
            future.set_result(response.get("result"))
        else:
            future.set_exception(PageError(response.get("error") or "Unknown error"))

    def call(self, interface_name: str, method_name: str, *args: Any) -> asyncio.Future:
        """Invoke a stub the way page code would: ``window[interface][method](...args)``."""
        if interface_name not in self.globals:
            raise AttributeError(f"{interface_name} is not defined")
        if method_name not in self.globals[interface_name]:
            raise AttributeError(f"{interface_name}.{method_name} is not a function")

        future = asyncio.get_running_loop().create_future()
        self._seq += 1
        call_id = f"call_{self._seq}"
        if not self.transport_available:
            future.set_exception(PageError(f"{self.transport} not available"))
            return future

        self.pending[call_id] = future
        self.outbox.append(json.dumps({
            "type": "JS_INTERFACE_CALL",
            "interfaceName": interface_name,
            "methodName": method_name,
            "args": list(args),
            "callId": call_id,
        }))
        return future

    def reload(self) -> None:
        """Navigate: a fresh script environment with no injected globals."""
        self.globals = {}
        self.pending = None
        self.outbox = []

    async def flush(self, bridge, reverse: bool = False) -> None:
        messages, self.outbox = self.outbox, []
        if reverse:
            messages.reverse()
        for message in messages:
            await bridge.on_message(message)


@pytest.fixture
def webview():
    return FakeWebView()


@pytest.fixture
def android_config():
    from webview_bridge.schema import InterfaceMethod, InterfaceObject, JavaScriptInterfaceConfig

    return JavaScriptInterfaceConfig(
        interfaces=[
            InterfaceObject(
                name="Android",
                methods=[InterfaceMethod(name="getToken", handler=lambda: "abc")],
            )
        ]
    )
