"""Tests for reply interpretation and the printer status bitmask.

Covers:

1. **Success and fault** -- result shape, verbatim codes, classification.
2. **Protocol violations** -- anything that is not a valid envelope.
3. **Status bits** -- ``PrinterStatus`` and ``describe_status``.
4. **raise_for_fault** -- turning a fault value into ``PrinterFault``.
"""
from __future__ import annotations

import logging

import pytest

from epos_print.core.errors import PrinterFault, ProtocolViolation
from epos_print.core.types import PrintResult
from epos_print.wire.reply import (
    FAULT_CODES,
    PrinterStatus,
    classify_fault,
    describe_status,
    interpret_reply,
    parse_reply,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reply(
    success: str = "true",
    code: str = "",
    status: str = "251658262",
    battery: str = "0",
) -> bytes:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">'
        "<s:Body>"
        '<response xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print" '
        f'success="{success}" code="{code}" status="{status}" battery="{battery}"/>'
        "</s:Body></s:Envelope>"
    ).encode("utf-8")


# =========================================================================
# Success and fault
# =========================================================================


class TestInterpretReply:

    def test_success(self) -> None:
        result = interpret_reply(200, _reply())
        assert result == PrintResult(status="success", printer_status=251658262)
        assert result.ok
        assert result.fault is None

    def test_success_from_str_body(self) -> None:
        result = interpret_reply(200, _reply().decode("utf-8"))
        assert result.ok

    def test_known_fault_code_preserved(self) -> None:
        result = interpret_reply(200, _reply("false", "EPTR_COVER_OPEN", "251854870"))
        assert result.status == "fault"
        assert result.code == "EPTR_COVER_OPEN"
        assert result.fault is not None
        assert result.fault.code == "EPTR_COVER_OPEN"
        assert result.fault.fault_class == "device"
        assert result.fault.description == "The printer cover is open"
        assert result.fault.offending_command_index is None

    def test_unknown_fault_code_preserved(self) -> None:
        result = interpret_reply(200, _reply("false", "EPTR_FUTURE_THING"))
        assert result.fault is not None
        assert result.fault.code == "EPTR_FUTURE_THING"
        assert result.fault.fault_class == "unknown"

    @pytest.mark.parametrize(
        ("code", "fault_class"),
        [
            ("SchemaError", "request"),
            ("DeviceNotFound", "request"),
            ("EX_TIMEOUT", "service"),
            ("PrintSystemError", "service"),
            ("EPTR_REC_EMPTY", "device"),
        ],
    )
    def test_classification(self, code: str, fault_class: str) -> None:
        result = interpret_reply(200, _reply("false", code))
        assert result.fault is not None
        assert result.fault.fault_class == fault_class

    def test_fault_with_error_status(self) -> None:
        """A fault reply is honoured whatever the HTTP status."""
        result = interpret_reply(500, _reply("false", "PrintSystemError"))
        assert result.status == "fault"
        assert result.code == "PrintSystemError"

    def test_battery_reported(self) -> None:
        assert interpret_reply(200, _reply(battery="12")).battery == 12

    def test_missing_status_defaults_to_zero(self) -> None:
        body = (
            '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"><s:Body>'
            '<response xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print" '
            'success="true"/></s:Body></s:Envelope>'
        )
        result = interpret_reply(200, body)
        assert result.printer_status == 0
        assert result.code == ""

    def test_response_without_namespace(self) -> None:
        body = (
            '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"><s:Body>'
            '<response success="false" code="EX_SPOOLER" status="0"/>'
            "</s:Body></s:Envelope>"
        )
        assert interpret_reply(200, body).code == "EX_SPOOLER"

    def test_fault_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="epos_print"):
            interpret_reply(200, _reply("false", "EPTR_CUTTER"))
        assert "EPTR_CUTTER" in caplog.text


# =========================================================================
# Protocol violations
# =========================================================================


class TestProtocolViolations:

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"   ",
            b"<html><body>Not Found</body></html>",
            b"this is not xml",
            b'<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"/>',
            (
                b'<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">'
                b"<s:Body><other/></s:Body></s:Envelope>"
            ),
        ],
    )
    def test_unrecognisable_body(self, body: bytes) -> None:
        with pytest.raises(ProtocolViolation) as exc_info:
            interpret_reply(200, body)
        assert exc_info.value.details["http_status"] == 200
        assert exc_info.value.code == "EP-E400"

    def test_invalid_success_attribute(self) -> None:
        with pytest.raises(ProtocolViolation):
            interpret_reply(200, _reply(success="maybe"))

    def test_non_numeric_status(self) -> None:
        with pytest.raises(ProtocolViolation):
            interpret_reply(200, _reply(status="lots"))

    def test_success_claimed_with_error_status(self) -> None:
        with pytest.raises(ProtocolViolation) as exc_info:
            interpret_reply(503, _reply())
        assert exc_info.value.details["http_status"] == 503

    def test_parse_reply(self) -> None:
        envelope = parse_reply(_reply("false", "EX_BADPORT", "8", "3"))
        assert envelope.success is False
        assert envelope.code == "EX_BADPORT"
        assert envelope.status == 8
        assert envelope.battery == 3


# =========================================================================
# Status bits
# =========================================================================


class TestPrinterStatus:

    def test_aliases_share_bits(self) -> None:
        assert PrinterStatus.DRAWER_KICK == PrinterStatus.BATTERY_OFFLINE
        assert PrinterStatus.BUZZER == PrinterStatus.WAIT_REMOVE_LABEL

    def test_flags_combine(self) -> None:
        status = PrinterStatus(0x00000008 | 0x00000020)
        assert PrinterStatus.OFFLINE in status
        assert PrinterStatus.COVER_OPEN in status
        assert PrinterStatus.RECEIPT_END not in status

    def test_describe_status(self) -> None:
        assert set(describe_status(251658262)) == {
            "print_success",
            "drawer_kick",
            "battery_offline",
            "buzzer",
            "wait_remove_label",
        }

    def test_describe_empty_status(self) -> None:
        assert describe_status(0) == []

    def test_high_bits(self) -> None:
        assert describe_status(0x80000000 | 0x40000000) == ["no_label", "spooler_is_stopped"]


# =========================================================================
# Fault classification and raise_for_fault
# =========================================================================


class TestFaults:

    def test_classify_known(self) -> None:
        assert classify_fault("EPTR_MECHANICAL") == ("device", "A mechanical error occurred")

    def test_classify_unknown(self) -> None:
        assert classify_fault("") == ("unknown", "")

    def test_table_classes(self) -> None:
        assert {fault_class for fault_class, _ in FAULT_CODES.values()} == {
            "device",
            "request",
            "service",
        }

    def test_raise_for_fault(self) -> None:
        result = interpret_reply(200, _reply("false", "EPTR_COVER_OPEN", "32"))
        with pytest.raises(PrinterFault) as exc_info:
            result.raise_for_fault()
        exc = exc_info.value
        assert exc.printer_code == "EPTR_COVER_OPEN"
        assert exc.fault_class == "device"
        assert exc.result is result
        assert exc.details["printer_status"] == 32

    def test_raise_for_fault_on_success_returns_result(self) -> None:
        result = interpret_reply(200, _reply())
        assert result.raise_for_fault() is result
