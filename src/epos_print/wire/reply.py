"""ePOS-Print reply interpretation.

The printer answers every print request with a SOAP envelope::

    <s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
      <s:Body>
        <response xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print"
                  success="false" code="EPTR_COVER_OPEN"
                  status="251854870" battery="0"/>
      </s:Body>
    </s:Envelope>

:func:`interpret_reply` turns that into a
:class:`~epos_print.core.types.PrintResult`.  Anything that is not such an
envelope is a :class:`~epos_print.core.errors.ProtocolViolation`; it is
never treated as success.
"""
from __future__ import annotations

import enum
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from epos_print.core.errors import ProtocolViolation
from epos_print.core.types import FaultClass, FaultInfo, PrintResult
from epos_print.wire.encoder import EPOS_NAMESPACE, SOAP_NAMESPACE

logger = logging.getLogger(__name__)

_ENVELOPE_TAG = f"{{{SOAP_NAMESPACE}}}Envelope"
_BODY_TAG = f"{{{SOAP_NAMESPACE}}}Body"
_RESPONSE_TAGS = frozenset({f"{{{EPOS_NAMESPACE}}}response", "response"})

_BOOLEANS: dict[str, bool] = {"true": True, "1": True, "false": False, "0": False}


# ---------------------------------------------------------------------------
# Status bitmask
# ---------------------------------------------------------------------------

class PrinterStatus(enum.IntFlag):
    """ASB status bits reported in the ``status`` attribute.

    Some bits are shared between models (the drawer / battery bit and the
    buzzer / label-removal bit); both names are kept as aliases.
    """

    NO_RESPONSE = 0x00000001
    PRINT_SUCCESS = 0x00000002
    DRAWER_KICK = 0x00000004
    BATTERY_OFFLINE = 0x00000004
    OFFLINE = 0x00000008
    COVER_OPEN = 0x00000020
    PAPER_FEED = 0x00000040
    WAIT_ON_LINE = 0x00000100
    PANEL_SWITCH = 0x00000200
    MECHANICAL_ERR = 0x00000400
    AUTOCUTTER_ERR = 0x00000800
    UNRECOVER_ERR = 0x00002000
    AUTORECOVER_ERR = 0x00004000
    RECEIPT_NEAR_END = 0x00020000
    RECEIPT_END = 0x00080000
    BUZZER = 0x01000000
    WAIT_REMOVE_LABEL = 0x01000000
    NO_LABEL = 0x40000000
    SPOOLER_IS_STOPPED = 0x80000000


def describe_status(value: int) -> list[str]:
    """Return the lower-case names of every status bit set in *value*.

    Aliased bits report every name that shares them.
    """
    return [
        name.lower()
        for name, member in PrinterStatus.__members__.items()
        if value & member.value
    ]


# ---------------------------------------------------------------------------
# Fault codes
# ---------------------------------------------------------------------------

FAULT_CODES: dict[str, tuple[FaultClass, str]] = {
    # Device-side conditions
    "EPTR_AUTOMATICAL": ("device", "An automatically recoverable error occurred"),
    "EPTR_BATTERY_LOW": ("device", "The battery has run out"),
    "EPTR_COVER_OPEN": ("device", "The printer cover is open"),
    "EPTR_CUTTER": ("device", "An autocutter error occurred"),
    "EPTR_MECHANICAL": ("device", "A mechanical error occurred"),
    "EPTR_REC_EMPTY": ("device", "No paper in the roll paper end sensor"),
    "EPTR_UNRECOVERABLE": ("device", "An unrecoverable error occurred"),
    # Problems with the request document
    "SchemaError": ("request", "The request document contains a syntax error"),
    "DeviceNotFound": ("request", "No printer with the specified device id exists"),
    "JobNotFound": ("request", "The specified print job does not exist"),
    # ePOS-Print service conditions
    "PrintSystemError": ("service", "An error occurred in the printing system"),
    "EX_BADPORT": ("service", "An error was detected on the communication port"),
    "EX_TIMEOUT": ("service", "The print timed out on the printer"),
    "EX_SPOOLER": ("service", "The print queue is full"),
    "Printing": ("service", "The printer is busy printing"),
}
"""Known firmware codes: ``code -> (fault class, description)``."""


def classify_fault(code: str) -> tuple[FaultClass, str]:
    """Classify a firmware code; unknown codes are ``("unknown", "")``."""
    return FAULT_CODES.get(code, ("unknown", ""))


# ---------------------------------------------------------------------------
# Envelope parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReplyEnvelope:
    """The attributes of a parsed ``<response>`` element."""

    success: bool
    code: str
    status: int
    battery: int


def _int_attribute(response: ET.Element, name: str) -> int:
    raw = response.get(name)
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except ValueError:
        raise ProtocolViolation(
            f"Reply attribute {name!r} is not numeric: {raw!r}",
            details={"attribute": name, "value": raw},
        ) from None
    if value < 0:
        raise ProtocolViolation(
            f"Reply attribute {name!r} is negative: {raw!r}",
            details={"attribute": name, "value": raw},
        )
    return value


def parse_reply(body: bytes | str) -> ReplyEnvelope:
    """Parse the printer's SOAP reply.

    Raises
    ------
    ProtocolViolation
        If *body* is not XML, or lacks the envelope, body, ``response``
        element or a valid ``success`` attribute.
    """
    if not body or not body.strip():
        raise ProtocolViolation("Empty reply body")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ProtocolViolation(f"Reply is not well-formed XML: {exc}") from exc

    if root.tag != _ENVELOPE_TAG:
        raise ProtocolViolation(
            f"Unexpected reply root element {root.tag!r}",
            details={"root": root.tag},
        )
    soap_body = root.find(_BODY_TAG)
    if soap_body is None:
        raise ProtocolViolation("Reply envelope has no s:Body")
    response = next(
        (child for child in soap_body if child.tag in _RESPONSE_TAGS), None
    )
    if response is None:
        raise ProtocolViolation("Reply body has no response element")

    raw_success = response.get("success")
    if raw_success is None or raw_success.strip().lower() not in _BOOLEANS:
        raise ProtocolViolation(
            f"Reply has no valid success attribute: {raw_success!r}",
            details={"success": raw_success},
        )
    return ReplyEnvelope(
        success=_BOOLEANS[raw_success.strip().lower()],
        code=response.get("code", ""),
        status=_int_attribute(response, "status"),
        battery=_int_attribute(response, "battery"),
    )


def interpret_reply(status_code: int, body: bytes | str) -> PrintResult:
    """Convert an HTTP status and reply body into a :class:`PrintResult`.

    * 2xx with ``success="true"`` -- success.
    * ``success="false"`` -- fault, firmware code preserved verbatim.
    * Anything else -- :class:`ProtocolViolation`.
    """
    try:
        reply = parse_reply(body)
    except ProtocolViolation as exc:
        exc.details.setdefault("http_status", status_code)
        raise

    if reply.success:
        if not 200 <= status_code < 300:
            raise ProtocolViolation(
                f"Reply claims success but HTTP status is {status_code}",
                details={"http_status": status_code, "code": reply.code},
            )
        return PrintResult(
            status="success",
            code=reply.code,
            printer_status=reply.status,
            battery=reply.battery,
        )

    fault_class, description = classify_fault(reply.code)
    logger.warning(
        "Printer reported fault %r (%s), status bits: %s",
        reply.code,
        fault_class,
        ", ".join(describe_status(reply.status)) or "none",
    )
    return PrintResult(
        status="fault",
        code=reply.code,
        printer_status=reply.status,
        battery=reply.battery,
        fault=FaultInfo(
            code=reply.code,
            fault_class=fault_class,
            description=description,
        ),
    )
