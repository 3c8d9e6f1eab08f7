"""Core types, errors and configuration shared by every epos-print layer."""
from __future__ import annotations

from epos_print.core.config import SessionConfig, load_config
from epos_print.core.errors import (
    ConfigurationError,
    ConnectionFailed,
    EposPrintError,
    PayloadTooLarge,
    PrinterFault,
    ProtocolViolation,
    TransportError,
    TransportTimeout,
    UnsupportedCommand,
    ValidationError,
    error_from_code,
)
from epos_print.core.types import FaultInfo, Mode, PrintResult

__all__ = [
    "SessionConfig",
    "load_config",
    "EposPrintError",
    "ConfigurationError",
    "ValidationError",
    "UnsupportedCommand",
    "PayloadTooLarge",
    "TransportError",
    "TransportTimeout",
    "ConnectionFailed",
    "ProtocolViolation",
    "PrinterFault",
    "error_from_code",
    "Mode",
    "PrintResult",
    "FaultInfo",
]
