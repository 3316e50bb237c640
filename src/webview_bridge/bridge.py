"""Host-side wiring between a web view and the capability registry."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Protocol, runtime_checkable

from webview_bridge.dispatcher import CallDispatcher
from webview_bridge.events import BridgeEventEmitter
from webview_bridge.injection import DEFAULT_TRANSPORT, build_response_script, generate_injection_script
from webview_bridge.messages import parse_call_message
from webview_bridge.registry import CapabilityRegistry
from webview_bridge.schema import InterfaceResponse, JavaScriptInterfaceConfig

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], Any]


@runtime_checkable
class WebViewHost(Protocol):
    """The one capability the bridge needs from the embedding web view."""

    def inject_javascript(self, script: str) -> None: ...


class JavaScriptBridge:
    """Expose host handlers to a web view and route their responses back.

    The embedding application forwards every message the page posts to
    ``on_message`` and calls ``on_load_finished`` whenever a page finishes
    loading, since injected globals do not survive navigation.
    """

    def __init__(
        self,
        host: WebViewHost,
        config: JavaScriptInterfaceConfig | None = None,
        on_message: MessageHandler | None = None,
        transport: str = DEFAULT_TRANSPORT,
        emitter: BridgeEventEmitter | None = None,
    ) -> None:
        self._host = host
        self._on_message = on_message
        self._transport = transport
        self._registry = CapabilityRegistry()
        self._dispatcher = CallDispatcher(self._registry, emitter=emitter)
        self._enabled = False
        self.configure(config)

    # -- configuration -------------------------------------------------

    def configure(self, config: JavaScriptInterfaceConfig | None) -> None:
        """Install ``config``; ``None`` turns the bridge off.

        While off, call envelopes are passed to the generic message handler
        like any other message.
        """
        if config is None:
            self._registry.clear()
            self._enabled = False
            return
        self._registry.configure(config)
        self._enabled = True

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def messaging_enabled(self) -> bool:
        """Whether the web view must have its outward message channel on."""
        return self._on_message is not None or self._enabled

    def generate_injection_script(self) -> str:
        if not self._enabled:
            return ""
        return generate_injection_script(self._registry, transport=self._transport)

    def list_interface_names(self) -> list[str]:
        return self._registry.list_interface_names()

    def has_interface(self, name: str) -> bool:
        return self._registry.has_interface(name)

    def has_method(self, interface_name: str, method_name: str) -> bool:
        return self._registry.has_method(interface_name, method_name)

    # -- web view events -----------------------------------------------

    def on_load_finished(self) -> bool:
        """Inject the bootstrap into a freshly loaded page.

        Returns True when a script was handed to the web view.
        """
        script = self.generate_injection_script()
        if not script:
            return False
        return self._inject(script, "bootstrap")

    async def on_message(self, data: str) -> None:
        """Handle one text message posted by the page."""
        call = parse_call_message(data) if self._enabled else None
        if call is not None:
            response = await self._dispatcher.handle_call(call)
            self.send_response(response)
            return

        if self._on_message is not None:
            result = self._on_message(data)
            if inspect.isawaitable(result):
                await result

    def send_response(self, response: InterfaceResponse) -> bool:
        """Settle the page-side pending call for ``response``.

        If the page cannot run script anymore the response is dropped and the
        pending call on the page, if the page survives, stays unsettled.
        """
        return self._inject(build_response_script(response), f"response {response.call_id}")

    def _inject(self, script: str, what: str) -> bool:
        try:
            self._host.inject_javascript(script)
        except Exception as exc:
            logger.warning("Dropping %s: web view rejected script injection: %s", what, exc)
            return False
        return True
