"""Public API for webview-bridge."""

from webview_bridge.bridge import JavaScriptBridge, WebViewHost
from webview_bridge.config import config_from_payload, load_interface_config, resolve_handler_ref
from webview_bridge.diagnostics import ConfigIssue, ConfigReport, diagnose_interface_config
from webview_bridge.dispatcher import CallDispatcher
from webview_bridge.events import BridgeEventEmitter, JsonlEventEmitter, JsonlEventLog, NullEmitter
from webview_bridge.injection import (
    DEFAULT_TRANSPORT,
    build_response_script,
    generate_injection_script,
    render_bootstrap,
)
from webview_bridge.messages import parse_call_message
from webview_bridge.registry import CapabilityRegistry
from webview_bridge.schema import (
    CALL_MESSAGE_TYPE,
    RESPONSE_MESSAGE_TYPE,
    BridgeError,
    InterfaceCall,
    InterfaceMethod,
    InterfaceObject,
    InterfaceResponse,
    JavaScriptInterfaceConfig,
)

__all__ = [
    # Configuration and envelopes
    "CALL_MESSAGE_TYPE",
    "RESPONSE_MESSAGE_TYPE",
    "BridgeError",
    "InterfaceCall",
    "InterfaceMethod",
    "InterfaceObject",
    "InterfaceResponse",
    "JavaScriptInterfaceConfig",
    # Registry and dispatch
    "CapabilityRegistry",
    "CallDispatcher",
    "parse_call_message",
    # Script generation
    "DEFAULT_TRANSPORT",
    "build_response_script",
    "generate_injection_script",
    "render_bootstrap",
    # Host wiring
    "JavaScriptBridge",
    "WebViewHost",
    # Config loading
    "config_from_payload",
    "load_interface_config",
    "resolve_handler_ref",
    # Diagnostics
    "ConfigIssue",
    "ConfigReport",
    "diagnose_interface_config",
    # Events
    "BridgeEventEmitter",
    "JsonlEventEmitter",
    "JsonlEventLog",
    "NullEmitter",
]
