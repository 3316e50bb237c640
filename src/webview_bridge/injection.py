"""Script generation for the web view side of the bridge.

Two scripts are produced here:

- the bootstrap, injected after every page load, which defines one global
  stub object per configured interface plus the hidden pending-call table
  and response handler;
- the response snippet, injected once per dispatched call, which hands a
  response envelope to that response handler.

Interface, method and transport names are always embedded as JSON string
literals and accessed with bracket notation, so any name yields valid script.
"""

from __future__ import annotations

import json
import logging
from string import Template

from webview_bridge.registry import CapabilityRegistry, InterfaceTable
from webview_bridge.schema import CALL_MESSAGE_TYPE, InterfaceResponse

logger = logging.getLogger(__name__)

DEFAULT_TRANSPORT = "ReactNativeWebView"

CALLBACKS_GLOBAL = "__jsInterfaceCallbacks"
RESPONSE_HANDLER_GLOBAL = "__handleJSInterfaceResponse"
CALL_SEQUENCE_GLOBAL = "__jsInterfaceCallSeq"

HIDDEN_GLOBALS: frozenset[str] = frozenset({
    CALLBACKS_GLOBAL,
    RESPONSE_HANDLER_GLOBAL,
    CALL_SEQUENCE_GLOBAL,
})


# Built-ins the bootstrap captures when it runs. An interface that takes one
# of these names would be captured in its place by the next injection.
BOOTSTRAP_GLOBALS: frozenset[str] = frozenset({
    "Array", "Date", "Error", "JSON", "Math", "Object", "Promise",
    "Uint32Array", "crypto", "window",
})


_BOOTSTRAP = Template("""\
(function() {
  var _Object = Object, _Promise = Promise, _JSON = JSON, _Error = Error;
  var _Date = Date, _Math = Math;
  var _Uint32Array = typeof Uint32Array === 'function' ? Uint32Array : null;
  var _crypto = window.crypto;
  var hasOwn = _Object.prototype.hasOwnProperty;
  var slice = Array.prototype.slice;

  var CALLBACKS = $callbacks_global;
  var SEQUENCE = $sequence_global;
  var TRANSPORT = $transport;

  if (!window[CALLBACKS] || typeof window[CALLBACKS] !== 'object') {
    window[CALLBACKS] = {};
  }
  if (typeof window[SEQUENCE] !== 'number') {
    window[SEQUENCE] = 0;
  }

  function nextCallId() {
    window[SEQUENCE] += 1;
    var random;
    if (_Uint32Array && _crypto && typeof _crypto.getRandomValues === 'function') {
      var words = new _Uint32Array(2);
      _crypto.getRandomValues(words);
      random = words[0].toString(36) + words[1].toString(36);
    } else {
      random = _Math.random().toString(36).slice(2, 11);
    }
    return 'call_' + window[SEQUENCE] + '_' + _Date.now() + '_' + random;
  }

  window[$handler_global] = function(response) {
    if (typeof response === 'string') {
      try {
        response = _JSON.parse(response);
      } catch (e) {
        return;
      }
    }
    if (!response || typeof response !== 'object') {
      return;
    }
    var table = window[CALLBACKS] || {};
    if (!hasOwn.call(table, response.callId)) {
      return;
    }
    var pending = table[response.callId];
    delete table[response.callId];
    if (response.success) {
      pending.resolve(response.result);
    } else {
      pending.reject(new _Error(response.error || 'Unknown error'));
    }
  };

  function makeStub(interfaceName, methodName) {
    return function() {
      var args = slice.call(arguments);
      return new _Promise(function(resolve, reject) {
        var callId = nextCallId();
        var table = window[CALLBACKS] = window[CALLBACKS] || {};
        var transport = window[TRANSPORT];
        if (!transport || typeof transport.postMessage !== 'function') {
          reject(new _Error(TRANSPORT + ' not available'));
          return;
        }
        table[callId] = { resolve: resolve, reject: reject };
        try {
          transport.postMessage(_JSON.stringify({
            type: $call_type,
            interfaceName: interfaceName,
            methodName: methodName,
            args: args,
            callId: callId
          }));
        } catch (error) {
          delete table[callId];
          reject(error);
        }
      });
    };
  }

  var interfaces = $interfaces;
  for (var i = 0; i < interfaces.length; i++) {
    var interfaceName = interfaces[i][0];
    var methodNames = interfaces[i][1];
    var target = {};
    for (var j = 0; j < methodNames.length; j++) {
      target[methodNames[j]] = makeStub(interfaceName, methodNames[j]);
    }
    window[interfaceName] = target;
  }
})();
""")


_RESPONSE = Template("""\
if (window[$handler_global]) {
  window[$handler_global]($response);
}
""")


def _js_string(value: str) -> str:
    return json.dumps(value)


def render_bootstrap(table: InterfaceTable, transport: str = DEFAULT_TRANSPORT) -> str:
    """Render the bootstrap for an interface table; empty table yields ``""``."""
    if not table:
        return ""

    interfaces = [[name, list(methods.keys())] for name, methods in table.items()]
    return _BOOTSTRAP.substitute(
        callbacks_global=_js_string(CALLBACKS_GLOBAL),
        sequence_global=_js_string(CALL_SEQUENCE_GLOBAL),
        handler_global=_js_string(RESPONSE_HANDLER_GLOBAL),
        transport=_js_string(transport),
        call_type=_js_string(CALL_MESSAGE_TYPE),
        interfaces=json.dumps(interfaces),
    )


def generate_injection_script(
    registry: CapabilityRegistry,
    transport: str = DEFAULT_TRANSPORT,
) -> str:
    """Generate the bootstrap for the registry's current contents."""
    return render_bootstrap(registry.snapshot(), transport=transport)


def serialize_response(response: InterfaceResponse) -> str:
    """JSON-encode a response envelope.

    A result that cannot be encoded is turned into a failed response for the
    same call, so the caller is still settled exactly once.
    """
    try:
        return json.dumps(response.to_wire())
    except (TypeError, ValueError) as exc:
        logger.warning("Result for call %s is not serializable: %s", response.call_id, exc)
        fallback = InterfaceResponse.failed(
            response.call_id, f"Result is not serializable: {exc}"
        )
        return json.dumps(fallback.to_wire())


def build_response_script(response: InterfaceResponse) -> str:
    """Snippet that settles the pending call matching ``response.call_id``."""
    return _RESPONSE.substitute(
        handler_global=_js_string(RESPONSE_HANDLER_GLOBAL),
        response=serialize_response(response),
    )
