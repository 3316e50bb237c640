"""Classification of inbound web view messages."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from webview_bridge.schema import CALL_MESSAGE_TYPE, InterfaceCall


def parse_call_message(data: Any) -> InterfaceCall | None:
    """Return the call envelope carried by ``data``, or None.

    None means the message belongs to the application, not the bridge:
    it is not text, not JSON, not an object, not tagged as a call, or does
    not have the call envelope shape. Never raises.
    """
    if not isinstance(data, (str, bytes, bytearray)):
        return None
    try:
        raw = json.loads(data)
    except (ValueError, UnicodeDecodeError):
        return None

    if not isinstance(raw, dict) or raw.get("type") != CALL_MESSAGE_TYPE:
        return None

    try:
        return InterfaceCall.model_validate(raw)
    except ValidationError:
        return None
