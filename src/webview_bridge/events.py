"""Dispatch event emission interface and JSONL persistence.

The dispatcher reports every call it receives and every response it
produces to a ``BridgeEventEmitter``. The default is ``NullEmitter``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from webview_bridge.schema import InterfaceCall, InterfaceResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

CALL_RECEIVED = "CallReceived"
CALL_COMPLETED = "CallCompleted"


# ---------------------------------------------------------------------------
# BridgeEventEmitter protocol
# ---------------------------------------------------------------------------

class BridgeEventEmitter(Protocol):
    """Interface for observing dispatched calls.

    The dispatcher logs and discards exceptions raised here, so a failing
    sink never keeps a response from reaching the page.
    """

    def emit_call_received(self, call: InterfaceCall) -> None: ...

    def emit_call_completed(self, call: InterfaceCall, response: InterfaceResponse) -> None: ...


# ---------------------------------------------------------------------------
# NullEmitter
# ---------------------------------------------------------------------------

class NullEmitter:
    """No-op emitter."""

    def emit_call_received(self, call: InterfaceCall) -> None:
        pass

    def emit_call_completed(self, call: InterfaceCall, response: InterfaceResponse) -> None:
        pass


# ---------------------------------------------------------------------------
# JsonlEventLog (append-only JSONL persistence)
# ---------------------------------------------------------------------------

class JsonlEventLog:
    """Append-only JSONL call log, one compact sorted-key object per line.

    The parent directory is created on first write. A process killed in the
    middle of a write can leave a partial last line; ``read_all`` skips it.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: dict[str, Any]) -> None:
        """Append one record; raises ``OSError`` if the log cannot be written."""
        line = json.dumps(record, sort_keys=True, separators=(",", ":"), default=str)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def read_all(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        lines = [line.strip() for line in self._path.read_text(encoding="utf-8").splitlines()]
        lines = [line for line in lines if line]
        records: list[dict[str, Any]] = []
        for index, line in enumerate(lines):
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                if index == len(lines) - 1:
                    logger.warning("Ignoring truncated last record in %s", self._path)
                    break
                raise
        return records


class JsonlEventEmitter:
    """Emitter that persists call lifecycle records to a ``JsonlEventLog``."""

    def __init__(self, log: JsonlEventLog) -> None:
        self._log = log

    def _append(self, event_type: str, payload: dict[str, Any]) -> None:
        self._log.append(
            {
                "event_type": event_type,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "payload": payload,
            }
        )

    def emit_call_received(self, call: InterfaceCall) -> None:
        self._append(CALL_RECEIVED, call.to_wire())

    def emit_call_completed(self, call: InterfaceCall, response: InterfaceResponse) -> None:
        payload = response.to_wire()
        payload["interfaceName"] = call.interface_name
        payload["methodName"] = call.method_name
        self._append(CALL_COMPLETED, payload)
