"""epos-print error hierarchy.

Every failure the library can report is a concrete exception class with a
stable ``EP-Exxx`` code.  Printer-side faults reported inside a well-formed
reply are *values* (:class:`~epos_print.core.types.PrintResult`) and only
become :class:`PrinterFault` when the caller asks for it via
:meth:`PrintResult.raise_for_fault`.

Hierarchy
---------
::

    EposPrintError
    +-- ConfigurationError    (EP-E1xx)
    +-- ValidationError       (EP-E2xx)
    |   +-- UnsupportedCommand
    |   +-- PayloadTooLarge
    +-- TransportError        (EP-E3xx)
    |   +-- TransportTimeout
    |   +-- ConnectionFailed
    +-- ProtocolViolation     (EP-E4xx)
    +-- PrinterFault          (EP-E5xx)

Usage
-----
Catch by category::

    try:
        result = await handler.create(commands)
    except ValidationError as exc:
        print(exc.index, exc.rule)
    except TransportError:
        # TransportTimeout, ConnectionFailed, ...
        ...
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from epos_print.core.types import PrintResult

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class EposPrintError(Exception):
    """Base exception for all epos-print errors.

    Attributes
    ----------
    code : str
        Library error code, e.g. ``"EP-E200"``.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "EP-E000"
    message: str = "Unknown epos-print error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error to a plain dict (for logs or API responses)."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# EP-E1xx  Configuration
# ===================================================================

class ConfigurationError(EposPrintError):
    """EP-E100 -- Malformed address, timeout or device id at construction."""

    code = "EP-E100"
    message = "Invalid printer session configuration"
    resolution = (
        "Pass an http(s) printer address, a positive timeout in "
        "milliseconds and a non-empty device id."
    )


# ===================================================================
# EP-E2xx  Validation
# ===================================================================

class ValidationError(EposPrintError):
    """EP-E200 -- A command or sequence violates an ePOS-Print rule.

    Raised before any network attempt.  ``index`` is the position of the
    offending command in the caller's sequence (``None`` for
    sequence-level rules) and ``rule`` is the violated rule.
    """

    code = "EP-E200"
    message = "Command violates an ePOS-Print protocol rule"
    resolution = "Fix the offending command; values are never coerced."

    def __init__(
        self,
        message: str | None = None,
        *,
        index: int | None = None,
        rule: str | None = None,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.index = index
        self.rule = rule or message or self.message
        merged = dict(details or {})
        if index is not None:
            merged.setdefault("index", index)
        super().__init__(message, details=merged, resolution=resolution)


class UnsupportedCommand(ValidationError):
    """EP-E201 -- The command kind has no ePOS-Print encoding."""

    code = "EP-E201"
    message = "Unsupported command kind"
    resolution = "Use one of the command models exported by epos_print."


class PayloadTooLarge(ValidationError):
    """EP-E202 -- The sequence exceeds the maximum payload size."""

    code = "EP-E202"
    message = "Command sequence exceeds the maximum payload size"
    resolution = "Split the receipt into several print jobs."


# ===================================================================
# EP-E3xx  Transport
# ===================================================================

class TransportError(EposPrintError):
    """EP-E300 -- The request could not be delivered to the printer."""

    code = "EP-E300"
    message = "Transport failure while contacting the printer"
    resolution = "Check the printer address and network; retry if appropriate."


class TransportTimeout(TransportError):
    """EP-E301 -- The request exceeded the configured timeout."""

    code = "EP-E301"
    message = "Printer did not answer within the configured timeout"
    resolution = "Increase timeout_ms or check that the printer is online."


class ConnectionFailed(TransportError):
    """EP-E302 -- Connection refused, unreachable host or DNS failure."""

    code = "EP-E302"
    message = "Could not connect to the printer"
    resolution = "Verify the printer address and that ePOS-Print is enabled."


# ===================================================================
# EP-E4xx  Protocol
# ===================================================================

class ProtocolViolation(EposPrintError):
    """EP-E400 -- The printer reply is not a recognisable ePOS-Print envelope."""

    code = "EP-E400"
    message = "Printer reply could not be interpreted"
    resolution = (
        "Confirm the address points at an ePOS-Print capable device "
        "(/cgi-bin/epos/service.cgi)."
    )


# ===================================================================
# EP-E5xx  Printer faults
# ===================================================================

class PrinterFault(EposPrintError):
    """EP-E500 -- The printer reported a device-side problem.

    ``printer_code`` is the firmware code exactly as returned (for example
    ``"EPTR_COVER_OPEN"``) and ``fault_class`` its classification.
    """

    code = "EP-E500"
    message = "Printer reported a fault"
    resolution = "Inspect printer_code and clear the condition on the device."

    def __init__(
        self,
        message: str | None = None,
        *,
        printer_code: str = "",
        fault_class: str = "unknown",
        result: PrintResult | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.printer_code = printer_code
        self.fault_class = fault_class
        self.result = result
        merged = {"printer_code": printer_code, "fault_class": fault_class}
        merged.update(details or {})
        super().__init__(message, details=merged)


# ---------------------------------------------------------------------------
# Lookup helper
# ---------------------------------------------------------------------------

_CODE_MAP: dict[str, type[EposPrintError]] = {
    cls.code: cls
    for cls in [
        ConfigurationError,
        ValidationError,
        UnsupportedCommand,
        PayloadTooLarge,
        TransportError,
        TransportTimeout,
        ConnectionFailed,
        ProtocolViolation,
        PrinterFault,
    ]
}


def error_from_code(code: str, message: str | None = None) -> EposPrintError:
    """Instantiate the exception class registered for *code*.

    Raises
    ------
    KeyError
        If *code* is not a known epos-print error code.
    """
    cls = _CODE_MAP[code]
    return cls(message) if message else cls()
