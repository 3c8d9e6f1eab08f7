"""Barcode and 2D symbol rule tables.

Which ``<symbol>`` attributes apply, which values they accept and what the
printer assumes when they are absent all depend on the symbol type.  The
rules live in :data:`SYMBOL_RULES` so that adding a symbology is a table
edit: the validator and encoder both read from here and carry no
per-type branches.

A ``None`` range means the attribute has no meaning for that type: the
validator rejects an explicit value and the encoder emits the default.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from epos_print.core.types import BarcodeType, ErrorCorrectionLevel, SymbolType

# ---------------------------------------------------------------------------
# 2D symbols
# ---------------------------------------------------------------------------

_PDF417_LEVELS = frozenset(
    {
        ErrorCorrectionLevel.LEVEL_0,
        ErrorCorrectionLevel.LEVEL_1,
        ErrorCorrectionLevel.LEVEL_2,
        ErrorCorrectionLevel.LEVEL_3,
        ErrorCorrectionLevel.LEVEL_4,
        ErrorCorrectionLevel.LEVEL_5,
        ErrorCorrectionLevel.LEVEL_6,
        ErrorCorrectionLevel.LEVEL_7,
        ErrorCorrectionLevel.LEVEL_8,
        ErrorCorrectionLevel.DEFAULT,
    }
)
_QR_LEVELS = frozenset(
    {
        ErrorCorrectionLevel.LEVEL_L,
        ErrorCorrectionLevel.LEVEL_M,
        ErrorCorrectionLevel.LEVEL_Q,
        ErrorCorrectionLevel.LEVEL_H,
    }
)
_MICRO_QR_LEVELS = _QR_LEVELS - {ErrorCorrectionLevel.LEVEL_H}


@dataclass(frozen=True)
class SymbolRule:
    """Attribute rules for one :class:`SymbolType`."""

    level_required: bool = False
    levels: frozenset[ErrorCorrectionLevel] | None = None
    level_numeric: range | None = None
    width: range | None = None
    height: range | None = None
    size: tuple[range, ...] | None = None
    default_level: ErrorCorrectionLevel = ErrorCorrectionLevel.DEFAULT
    default_width: int = 3
    default_height: int = 3
    default_size: int = 0


_PDF417 = SymbolRule(
    levels=_PDF417_LEVELS,
    width=range(2, 9),
    height=range(2, 9),
    size=(range(0, 31),),
)
_QR = SymbolRule(level_required=True, levels=_QR_LEVELS, width=range(1, 17))
_MICRO_QR = SymbolRule(level_required=True, levels=_MICRO_QR_LEVELS, width=range(1, 17))
_MAXICODE = SymbolRule()
_GS1_STACKED = SymbolRule(width=range(2, 9), default_width=2)
_GS1_EXPANDED_STACKED = SymbolRule(
    width=range(2, 9),
    size=(range(0, 1), range(106, 65536)),
    default_width=2,
)
_AZTEC = SymbolRule(
    levels=frozenset({ErrorCorrectionLevel.DEFAULT}),
    level_numeric=range(5, 96),
    width=range(2, 17),
)
_DATAMATRIX = SymbolRule(width=range(2, 17))

SYMBOL_RULES: dict[SymbolType, SymbolRule] = {
    SymbolType.PDF417_STANDARD: _PDF417,
    SymbolType.PDF417_TRUNCATED: _PDF417,
    SymbolType.QRCODE_MODEL_1: _QR,
    SymbolType.QRCODE_MODEL_2: _QR,
    SymbolType.QRCODE_MICRO: _MICRO_QR,
    SymbolType.MAXICODE_MODE_2: _MAXICODE,
    SymbolType.MAXICODE_MODE_3: _MAXICODE,
    SymbolType.MAXICODE_MODE_4: _MAXICODE,
    SymbolType.MAXICODE_MODE_5: _MAXICODE,
    SymbolType.MAXICODE_MODE_6: _MAXICODE,
    SymbolType.GS1_DATABAR_STACKED: _GS1_STACKED,
    SymbolType.GS1_DATABAR_STACKED_OMNIDIRECTIONAL: _GS1_STACKED,
    SymbolType.GS1_DATABAR_EXPANDED_STACKED: _GS1_EXPANDED_STACKED,
    SymbolType.AZTECCODE_FULLRANGE: _AZTEC,
    SymbolType.AZTECCODE_COMPACT: _AZTEC,
    SymbolType.DATAMATRIX_SQUARE: _DATAMATRIX,
    SymbolType.DATAMATRIX_RECTANGLE_8: _DATAMATRIX,
    SymbolType.DATAMATRIX_RECTANGLE_12: _DATAMATRIX,
    SymbolType.DATAMATRIX_RECTANGLE_16: _DATAMATRIX,
}


def resolve_symbol_attributes(
    symbol_type: SymbolType,
    level: ErrorCorrectionLevel | int | None,
    width: int | None,
    height: int | None,
    size: int | None,
) -> tuple[str, str, str, str]:
    """Return the ``(level, width, height, size)`` attribute strings to emit.

    Absent values, and values for attributes the type does not use, are
    replaced with the type's documented defaults.
    """
    rule = SYMBOL_RULES[symbol_type]
    has_level = rule.levels is not None or rule.level_numeric is not None
    if level is None or not has_level:
        level = rule.default_level
    if width is None or rule.width is None:
        width = rule.default_width
    if height is None or rule.height is None:
        height = rule.default_height
    if size is None or rule.size is None:
        size = rule.default_size
    level_text = level.value if isinstance(level, ErrorCorrectionLevel) else str(level)
    return level_text, str(width), str(height), str(size)


# ---------------------------------------------------------------------------
# 1D barcodes
# ---------------------------------------------------------------------------

BARCODE_WIDTH: range = range(2, 7)
BARCODE_HEIGHT: range = range(1, 256)


@dataclass(frozen=True)
class BarcodeRule:
    """Data constraints for one :class:`BarcodeType`."""

    pattern: re.Pattern[str] | None = None
    description: str = ""


# Applied with fullmatch; digits are ASCII only.
_DIGITS_11_12 = BarcodeRule(re.compile(r"[0-9]{11,12}"), "11 or 12 digits")
_DIGITS_12_13 = BarcodeRule(re.compile(r"[0-9]{12,13}"), "12 or 13 digits")
_DIGITS_7_8 = BarcodeRule(re.compile(r"[0-9]{7,8}"), "7 or 8 digits")
_GTIN_13 = BarcodeRule(re.compile(r"[0-9]{13}"), "a 13-digit GTIN without check digit")

BARCODE_RULES: dict[BarcodeType, BarcodeRule] = {
    BarcodeType.UPC_A: _DIGITS_11_12,
    BarcodeType.UPC_E: BarcodeRule(
        re.compile(r"0[0-9]{10,11}"), "11 or 12 digits starting with 0"
    ),
    BarcodeType.EAN13: _DIGITS_12_13,
    BarcodeType.JAN13: _DIGITS_12_13,
    BarcodeType.EAN8: _DIGITS_7_8,
    BarcodeType.JAN8: _DIGITS_7_8,
    BarcodeType.ITF: BarcodeRule(re.compile(r"([0-9]{2})+"), "an even number of digits"),
    BarcodeType.GS1_DATABAR_OMNIDIRECTIONAL: _GTIN_13,
    BarcodeType.GS1_DATABAR_TRUNCATED: _GTIN_13,
    BarcodeType.GS1_DATABAR_LIMITED: _GTIN_13,
}
"""Types absent from this table accept any non-empty data."""
