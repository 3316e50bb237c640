"""Core bridge types: interface configuration and wire envelopes."""

from __future__ import annotations

from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field


CALL_MESSAGE_TYPE = "JS_INTERFACE_CALL"
RESPONSE_MESSAGE_TYPE = "JS_INTERFACE_RESPONSE"


class BridgeError(RuntimeError):
    """Raised for host-side configuration or API misuse.

    Never raised for failures of a dispatched call; those travel back to
    the web view inside an ``InterfaceResponse``.
    """


# ---------------------------------------------------------------------------
# Interface configuration
# ---------------------------------------------------------------------------

Handler = Callable[..., Any]


class InterfaceMethod(BaseModel):
    """A named method and the host callable that serves it.

    The handler receives the call's arguments positionally and may return a
    plain value or an awaitable.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    handler: Handler


class InterfaceObject(BaseModel):
    """A named group of methods exposed as one global object in the web view."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    methods: list[InterfaceMethod] = Field(default_factory=list)


class JavaScriptInterfaceConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    interfaces: list[InterfaceObject] = Field(default_factory=list)
    enable_debug_logging: bool = Field(default=False, alias="enableDebugLogging")


# ---------------------------------------------------------------------------
# Wire envelopes
# ---------------------------------------------------------------------------

class InterfaceCall(BaseModel):
    """Call envelope posted by a stub function inside the web view."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["JS_INTERFACE_CALL"] = CALL_MESSAGE_TYPE
    interface_name: str = Field(..., alias="interfaceName")
    method_name: str = Field(..., alias="methodName")
    args: list[Any] = Field(default_factory=list)
    call_id: str = Field(..., min_length=1, alias="callId")

    def to_wire(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "interfaceName": self.interface_name,
            "methodName": self.method_name,
            "args": list(self.args),
            "callId": self.call_id,
        }


class InterfaceResponse(BaseModel):
    """Response envelope carrying a call's outcome back into the web view."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["JS_INTERFACE_RESPONSE"] = RESPONSE_MESSAGE_TYPE
    call_id: str = Field(..., alias="callId")
    success: bool
    result: Any = None
    error: str | None = None

    @staticmethod
    def ok(call_id: str, result: Any) -> InterfaceResponse:
        return InterfaceResponse(call_id=call_id, success=True, result=result)

    @staticmethod
    def failed(call_id: str, error: str) -> InterfaceResponse:
        return InterfaceResponse(call_id=call_id, success=False, error=error)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting the unused outcome field."""
        wire: dict[str, Any] = {
            "type": self.type,
            "callId": self.call_id,
            "success": self.success,
        }
        if self.success:
            wire["result"] = self.result
        else:
            wire["error"] = self.error
        return wire
