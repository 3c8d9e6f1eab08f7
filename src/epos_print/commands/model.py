"""ePOS-Print command models.

The command set is a closed tagged union: every model carries a ``kind``
literal and :data:`Command` discriminates on it.  Models restrict *shape*
only (types, enum membership, no unknown fields, immutability).  Range and
cross-field legality is checked by
:class:`~epos_print.commands.validation.CommandValidator` so that
violations are reported with the command's index in its sequence.

Optional fields default to ``None`` which means "not sent; the printer
applies its documented default".  ``Symbol`` is the exception: its
type-dependent fields are always resolved from
:mod:`epos_print.commands.symbols` at encode time.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as _PydanticValidationError

from epos_print.core.errors import ValidationError
from epos_print.core.types import (
    HRI,
    Align,
    BarcodeType,
    Color,
    CutType,
    Drawer,
    ErrorCorrectionLevel,
    FeedPos,
    Font,
    ImageMode,
    Lang,
    LineStyle,
    PrintDirection,
    PulseTime,
    SoundPattern,
    SymbolType,
)


class _CommandModel(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Commands available in both modes
# ---------------------------------------------------------------------------

class Text(_CommandModel):
    """Print a text line.

    The printer may not print a line that is never terminated, so most
    receipts end their text with ``\\n``.  Empty text is legal and is
    encoded as an empty ``<text>`` element.
    """

    kind: Literal["text"] = "text"
    text: str
    font: Font | None = None
    smoothing: bool | None = None
    double_width: bool | None = Field(
        default=None,
        description="dw; ``width`` takes precedence when both are set.",
    )
    double_height: bool | None = Field(
        default=None,
        description="dh; ``height`` takes precedence when both are set.",
    )
    width: int | None = Field(default=None, description="Width multiplier 1-8.")
    height: int | None = Field(default=None, description="Height multiplier 1-8.")
    underline: bool | None = None
    emphasis: bool | None = None
    color: Color | None = None
    lang: Lang | None = None
    align: Align | None = None


class Feed(_CommandModel):
    """Feed paper.  At least one amount must be given.

    ``pos`` (label / black-mark positioning) is not allowed in page mode.
    """

    kind: Literal["feed"] = "feed"
    unit: int | None = Field(default=None, description="Feed amount in dots.")
    line: int | None = Field(default=None, description="Feed amount in lines.")
    linespc: int | None = Field(default=None, description="Line spacing in dots.")
    pos: FeedPos | None = None


class Image(_CommandModel):
    """Print a raster image.

    ``data`` is the base64 encoded raster: one bit per pixel, rows padded
    to whole bytes, for ``mono``; four bits per pixel for ``gray16``.
    """

    kind: Literal["image"] = "image"
    data: str
    width: int
    height: int
    color: Color | None = None
    mode: ImageMode | None = None
    align: Align | None = None


class Barcode(_CommandModel):
    """Print a 1D barcode."""

    kind: Literal["barcode"] = "barcode"
    text: str
    barcode_type: BarcodeType
    hri: HRI | None = None
    font: Font | None = None
    width: int | None = Field(default=None, description="Module width 2-6.")
    height: int | None = Field(default=None, description="Bar height 1-255 dots.")
    align: Align | None = None
    rotate: bool | None = None


class Symbol(_CommandModel):
    """Print a 2D symbol (PDF417, QR Code, MaxiCode, GS1 DataBar, Aztec, DataMatrix).

    Which of ``level``, ``width``, ``height`` and ``size`` apply depends on
    ``symbol_type``; see :data:`epos_print.commands.symbols.SYMBOL_RULES`.
    Aztec codes take an integer ``level`` (5-95).
    """

    kind: Literal["symbol"] = "symbol"
    text: str
    symbol_type: SymbolType
    level: ErrorCorrectionLevel | int | None = None
    width: int | None = None
    height: int | None = None
    size: int | None = None
    align: Align | None = None
    rotate: bool | None = None


# ---------------------------------------------------------------------------
# Normal mode only
# ---------------------------------------------------------------------------

class Cut(_CommandModel):
    """Cut the paper."""

    kind: Literal["cut"] = "cut"
    cut_type: CutType = CutType.FEED


class HLine(_CommandModel):
    """Draw a horizontal ruled line between ``x1`` and ``x2`` (dots)."""

    kind: Literal["hline"] = "hline"
    x1: int
    x2: int
    style: LineStyle | None = None


class Pulse(_CommandModel):
    """Send a drawer kick-out pulse."""

    kind: Literal["pulse"] = "pulse"
    drawer: Drawer | None = None
    time: PulseTime | None = None


class Sound(_CommandModel):
    """Sound the buzzer (models with a buzzer only)."""

    kind: Literal["sound"] = "sound"
    pattern: SoundPattern | None = None
    repeat: int | None = Field(default=None, description="0 repeats until cancelled.")


# ---------------------------------------------------------------------------
# Page mode only
# ---------------------------------------------------------------------------

class Area(_CommandModel):
    """Set the page-mode print area (dots)."""

    kind: Literal["area"] = "area"
    x: int
    y: int
    width: int
    height: int


class Position(_CommandModel):
    """Move the page-mode print position (dots)."""

    kind: Literal["position"] = "position"
    x: int
    y: int


class Direction(_CommandModel):
    """Set the page-mode print direction."""

    kind: Literal["direction"] = "direction"
    dir: PrintDirection


class Line(_CommandModel):
    """Draw a line in page mode."""

    kind: Literal["line"] = "line"
    x1: int
    y1: int
    x2: int
    y2: int
    style: LineStyle | None = None


class Rectangle(_CommandModel):
    """Draw a rectangle in page mode."""

    kind: Literal["rectangle"] = "rectangle"
    x1: int
    y1: int
    x2: int
    y2: int
    style: LineStyle | None = None


# ---------------------------------------------------------------------------
# Union
# ---------------------------------------------------------------------------

Command = Annotated[
    Text
    | Feed
    | Image
    | Barcode
    | Symbol
    | Cut
    | HLine
    | Pulse
    | Sound
    | Area
    | Position
    | Direction
    | Line
    | Rectangle,
    Field(discriminator="kind"),
]
"""Any ePOS-Print command."""

CommandSequence = Sequence[Command]

COMMAND_TYPES: tuple[type[BaseModel], ...] = (
    Text,
    Feed,
    Image,
    Barcode,
    Symbol,
    Cut,
    HLine,
    Pulse,
    Sound,
    Area,
    Position,
    Direction,
    Line,
    Rectangle,
)

_SEQUENCE_ADAPTER: TypeAdapter[list[Command]] = TypeAdapter(list[Command])


def parse_commands(raw: str | bytes) -> list[Command]:
    """Build a command list from a JSON array of command objects.

    Each object names its variant with ``"kind"`` and uses the protocol
    literals for enum fields, e.g.
    ``[{"kind": "text", "text": "Hi\\n"}, {"kind": "cut", "cut_type": "feed"}]``.

    Raises
    ------
    ValidationError
        If the JSON is invalid or an element does not match any command.
    """
    try:
        return _SEQUENCE_ADAPTER.validate_json(raw)
    except _PydanticValidationError as exc:
        first = exc.errors()[0]
        loc = first["loc"]
        index = loc[0] if loc and isinstance(loc[0], int) else None
        raise ValidationError(
            f"Invalid command data: {first['msg']}",
            index=index,
            rule=first["type"],
            details={"errors": exc.error_count()},
        ) from exc
