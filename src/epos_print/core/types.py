"""epos-print shared value types.

Enums whose *values* are the exact ePOS-Print attribute literals, the
print :class:`Mode`, and the :class:`PrintResult` returned by every send.

Key design decisions:
* Enums use *string* values so the encoder can emit ``member.value``
  verbatim and JSON input validates against the same literals.
* ``PrintResult`` is a Pydantic model; a printer fault is a value, and
  :meth:`PrintResult.raise_for_fault` converts it to an exception on demand.
"""
from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from epos_print.core.errors import PrinterFault

# ---------------------------------------------------------------------------
# Print mode
# ---------------------------------------------------------------------------

class Mode(enum.StrEnum):
    """Printer execution model.

    * **NORMAL** -- commands execute as they are received.
    * **PAGE** -- commands are composed inside a bounded print area and
      committed together; the body is wrapped in ``<page>``.
    """

    NORMAL = "normal"
    PAGE = "page"


# ---------------------------------------------------------------------------
# Formatting enums
# ---------------------------------------------------------------------------

class Align(enum.StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Font(enum.StrEnum):
    FONT_A = "font_a"
    FONT_B = "font_b"
    FONT_C = "font_c"
    FONT_D = "font_d"
    FONT_E = "font_e"


class Color(enum.StrEnum):
    """Print colour.  Only meaningful on multi-colour models."""

    NONE = "none"
    COLOR_1 = "color_1"
    COLOR_2 = "color_2"
    COLOR_3 = "color_3"
    COLOR_4 = "color_4"


class Lang(enum.StrEnum):
    DE = "de"
    FR = "fr"
    EN = "en"
    IT = "it"
    ES = "es"
    JA = "ja"
    JA_JP = "ja-jp"
    KO = "ko"
    KO_KR = "ko-kr"
    ZH_HANS = "zh-hans"
    ZH_CN = "zh-cn"
    ZH_HANT = "zh-hant"
    ZH_TW = "zh-tw"


class CutType(enum.StrEnum):
    """Paper cut behaviour.

    * **NO_FEED** -- cut without feeding.
    * **FEED** -- feed to the cut position, then cut (full receipt cut).
    * **RESERVE** -- keep printing until the cut position, then cut.
    """

    NO_FEED = "no_feed"
    FEED = "feed"
    RESERVE = "reserve"


class FeedPos(enum.StrEnum):
    """Feed target for label / black-mark paper."""

    PEELING = "peeling"
    CUTTING = "cutting"
    CURRENT_TOF = "current_tof"
    NEXT_TOF = "next_tof"


class LineStyle(enum.StrEnum):
    THIN = "thin"
    MEDIUM = "medium"
    THICK = "thick"
    THIN_DOUBLE = "thin_double"
    MEDIUM_DOUBLE = "medium_double"
    THICK_DOUBLE = "thick_double"


class PrintDirection(enum.StrEnum):
    LEFT_TO_RIGHT = "left_to_right"
    BOTTOM_TO_TOP = "bottom_to_top"
    RIGHT_TO_LEFT = "right_to_left"
    TOP_TO_BOTTOM = "top_to_bottom"


class ImageMode(enum.StrEnum):
    MONO = "mono"
    GRAY16 = "gray16"


class Drawer(enum.StrEnum):
    DRAWER_1 = "drawer_1"
    DRAWER_2 = "drawer_2"


class PulseTime(enum.StrEnum):
    PULSE_100 = "pulse_100"
    PULSE_200 = "pulse_200"
    PULSE_300 = "pulse_300"
    PULSE_400 = "pulse_400"
    PULSE_500 = "pulse_500"


class SoundPattern(enum.StrEnum):
    PATTERN_A = "pattern_a"
    PATTERN_B = "pattern_b"
    PATTERN_C = "pattern_c"
    PATTERN_D = "pattern_d"
    PATTERN_E = "pattern_e"
    ERROR = "error"
    RECEIPT = "receipt"


# ---------------------------------------------------------------------------
# Barcode enums
# ---------------------------------------------------------------------------

class BarcodeType(enum.StrEnum):
    """1D barcode symbologies (``<barcode type=...>``).

    Binary data may be written as ``\\xnn`` and a backslash as ``\\\\``.
    """

    UPC_A = "upc_a"
    UPC_E = "upc_e"
    EAN13 = "ean13"
    JAN13 = "jan13"
    EAN8 = "ean8"
    JAN8 = "jan8"
    CODE39 = "code39"
    ITF = "itf"
    CODABAR = "codabar"
    CODE93 = "code93"
    CODE128 = "code128"
    GS1_128 = "gs1_128"
    GS1_DATABAR_OMNIDIRECTIONAL = "gs1_databar_omnidirectional"
    GS1_DATABAR_TRUNCATED = "gs1_databar_truncated"
    GS1_DATABAR_LIMITED = "gs1_databar_limited"
    GS1_DATABAR_EXPANDED = "gs1_databar_expanded"


class SymbolType(enum.StrEnum):
    """2D symbologies (``<symbol type=...>``)."""

    PDF417_STANDARD = "pdf417_standard"
    PDF417_TRUNCATED = "pdf417_truncated"
    QRCODE_MODEL_1 = "qrcode_model_1"
    QRCODE_MODEL_2 = "qrcode_model_2"
    QRCODE_MICRO = "qrcode_micro"
    MAXICODE_MODE_2 = "maxicode_mode_2"
    MAXICODE_MODE_3 = "maxicode_mode_3"
    MAXICODE_MODE_4 = "maxicode_mode_4"
    MAXICODE_MODE_5 = "maxicode_mode_5"
    MAXICODE_MODE_6 = "maxicode_mode_6"
    GS1_DATABAR_STACKED = "gs1_databar_stacked"
    GS1_DATABAR_STACKED_OMNIDIRECTIONAL = "gs1_databar_stacked_omnidirectional"
    GS1_DATABAR_EXPANDED_STACKED = "gs1_databar_expanded_stacked"
    AZTECCODE_FULLRANGE = "azteccode_fullrange"
    AZTECCODE_COMPACT = "azteccode_compact"
    DATAMATRIX_SQUARE = "datamatrix_square"
    DATAMATRIX_RECTANGLE_8 = "datamatrix_rectangle_8"
    DATAMATRIX_RECTANGLE_12 = "datamatrix_rectangle_12"
    DATAMATRIX_RECTANGLE_16 = "datamatrix_rectangle_16"


class HRI(enum.StrEnum):
    """Position of the human readable interpretation of a 1D barcode."""

    NONE = "none"
    ABOVE = "above"
    BELOW = "below"
    BOTH = "both"


class ErrorCorrectionLevel(enum.StrEnum):
    """Symbol error correction levels.

    ``LEVEL_0`` .. ``LEVEL_8`` apply to PDF417, ``LEVEL_L`` .. ``LEVEL_H``
    to QR Code.  Aztec codes take a plain integer (5-95) instead.
    """

    LEVEL_0 = "level_0"
    LEVEL_1 = "level_1"
    LEVEL_2 = "level_2"
    LEVEL_3 = "level_3"
    LEVEL_4 = "level_4"
    LEVEL_5 = "level_5"
    LEVEL_6 = "level_6"
    LEVEL_7 = "level_7"
    LEVEL_8 = "level_8"
    LEVEL_L = "level_l"
    LEVEL_M = "level_m"
    LEVEL_Q = "level_q"
    LEVEL_H = "level_h"
    DEFAULT = "default"


# ---------------------------------------------------------------------------
# Print result
# ---------------------------------------------------------------------------

FaultClass = Literal["device", "request", "service", "unknown"]


class FaultInfo(BaseModel):
    """Printer-reported fault carried by a :class:`PrintResult`."""

    model_config = ConfigDict(strict=True, frozen=True)

    code: str = Field(description="Firmware code, verbatim (e.g. EPTR_COVER_OPEN).")
    fault_class: FaultClass = "unknown"
    description: str = ""
    offending_command_index: int | None = Field(
        default=None,
        description=(
            "Position of the offending command in the caller's sequence. "
            "ePOS-Print replies do not report one, so this is normally None."
        ),
    )


class PrintResult(BaseModel):
    """Outcome of one ``print`` / ``create`` call.

    Exactly one of the two shapes is produced: ``status="success"`` with
    ``fault=None``, or ``status="fault"`` with ``fault`` populated.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    status: Literal["success", "fault"]
    code: str = ""
    printer_status: int = Field(
        default=0,
        ge=0,
        description="Raw ASB status bitmask reported by the printer.",
    )
    battery: int = 0
    fault: FaultInfo | None = None
    warnings: tuple[str, ...] = Field(
        default=(),
        description="Non-fatal validation warnings raised before sending.",
    )

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def raise_for_fault(self) -> PrintResult:
        """Raise :class:`PrinterFault` if this result is a fault; else return self."""
        if self.fault is None:
            return self
        raise PrinterFault(
            self.fault.description or f"Printer reported {self.fault.code}",
            printer_code=self.fault.code,
            fault_class=self.fault.fault_class,
            result=self,
            details={"printer_status": self.printer_status},
        )
