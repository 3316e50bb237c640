"""Call dispatcher: resolve an inbound call against the registry and run it."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable

from webview_bridge.events import BridgeEventEmitter, NullEmitter
from webview_bridge.registry import CapabilityRegistry
from webview_bridge.schema import InterfaceCall, InterfaceResponse

logger = logging.getLogger(__name__)


def describe_failure(exc: BaseException) -> str:
    """Human-readable error text for a failed handler.

    Falls back to the exception class name when the exception carries no message.
    """
    message = str(exc)
    return message if message else type(exc).__name__


class CallDispatcher:
    """Stateless dispatcher turning ``InterfaceCall`` into ``InterfaceResponse``.

    Every failure (unknown interface, unknown method, handler error) becomes a
    failed response. ``handle_call`` never raises for them, so concurrent calls
    can be dispatched independently without any locking.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        emitter: BridgeEventEmitter | None = None,
    ) -> None:
        self._registry = registry
        self._emitter = emitter or NullEmitter()

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    async def handle_call(self, call: InterfaceCall) -> InterfaceResponse:
        self._emit(self._emitter.emit_call_received, call)
        response = await self._dispatch(call)
        self._emit(self._emitter.emit_call_completed, call, response)
        return response

    def _emit(self, emit: Callable[..., None], call: InterfaceCall, *args: Any) -> None:
        # Emitter failures never prevent the response.
        try:
            emit(call, *args)
        except Exception as exc:
            logger.warning(
                "%s failed for %s.%s (%s): %s",
                getattr(emit, "__name__", "emitter"),
                call.interface_name,
                call.method_name,
                call.call_id,
                exc,
            )

    async def _dispatch(self, call: InterfaceCall) -> InterfaceResponse:
        interface_name = call.interface_name
        method_name = call.method_name
        debug = self._registry.debug_logging

        if debug:
            logger.debug("Calling %s.%s(%r)", interface_name, method_name, call.args)

        # One lookup against one table version, even if configure() runs meanwhile.
        table = self._registry.snapshot()
        methods = table.get(interface_name)
        if methods is None:
            return self._failure(call, f"Interface '{interface_name}' not found", debug)

        handler = methods.get(method_name)
        if handler is None:
            return self._failure(
                call,
                f"Method '{method_name}' not found on interface '{interface_name}'",
                debug,
            )

        try:
            result = handler(*call.args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            return self._failure(call, describe_failure(exc), debug)

        if debug:
            logger.debug("%s.%s returned: %r", interface_name, method_name, result)
        return InterfaceResponse.ok(call.call_id, result)

    @staticmethod
    def _failure(call: InterfaceCall, error: str, debug: bool) -> InterfaceResponse:
        if debug:
            logger.warning(
                "Error in %s.%s: %s", call.interface_name, call.method_name, error
            )
        return InterfaceResponse.failed(call.call_id, error)
