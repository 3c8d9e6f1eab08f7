"""epos-print -- receipts for Epson ePOS-Print network printers.

Describe a receipt as an ordered sequence of typed commands, have it
validated against the printer's protocol rules, encoded into the
ePOS-Print XML document and POSTed to the printer, then read back a
:class:`PrintResult`.

Layers
------
1. Core types, errors and configuration (:mod:`epos_print.core`)
2. Command models and validation (:mod:`epos_print.commands`)
3. XML encoding, HTTP transport and replies (:mod:`epos_print.wire`)
4. The print handler (:mod:`epos_print.handler`)
"""
from __future__ import annotations

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Commands and validation
# ---------------------------------------------------------------------------
from epos_print.commands import (
    Area,
    Barcode,
    Command,
    CommandSequence,
    CommandValidator,
    Cut,
    Direction,
    Feed,
    HLine,
    Image,
    Line,
    Position,
    Pulse,
    Rectangle,
    Sound,
    Symbol,
    Text,
    parse_commands,
)

# ---------------------------------------------------------------------------
# Core types, errors and configuration
# ---------------------------------------------------------------------------
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
from epos_print.core.types import (
    HRI,
    Align,
    BarcodeType,
    Color,
    CutType,
    Drawer,
    ErrorCorrectionLevel,
    FaultInfo,
    FeedPos,
    Font,
    ImageMode,
    Lang,
    LineStyle,
    Mode,
    PrintDirection,
    PrintResult,
    PulseTime,
    SoundPattern,
    SymbolType,
)

# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------
from epos_print.handler import PrintHandler

# ---------------------------------------------------------------------------
# Wire protocol
# ---------------------------------------------------------------------------
from epos_print.wire import (
    HTTPTransport,
    PrinterStatus,
    RawReply,
    describe_status,
    encode,
    interpret_reply,
)

__all__ = [
    "__version__",
    # Commands
    "Command",
    "CommandSequence",
    "Text",
    "Feed",
    "Image",
    "Barcode",
    "Symbol",
    "Cut",
    "HLine",
    "Pulse",
    "Sound",
    "Area",
    "Position",
    "Direction",
    "Line",
    "Rectangle",
    "parse_commands",
    "CommandValidator",
    # Types
    "Mode",
    "Align",
    "Font",
    "Color",
    "Lang",
    "CutType",
    "FeedPos",
    "LineStyle",
    "PrintDirection",
    "ImageMode",
    "Drawer",
    "PulseTime",
    "SoundPattern",
    "BarcodeType",
    "SymbolType",
    "HRI",
    "ErrorCorrectionLevel",
    "PrintResult",
    "FaultInfo",
    # Config
    "SessionConfig",
    "load_config",
    # Errors
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
    # Wire
    "encode",
    "interpret_reply",
    "HTTPTransport",
    "RawReply",
    "PrinterStatus",
    "describe_status",
    # Handler
    "PrintHandler",
]
