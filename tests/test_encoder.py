"""Tests for the ePOS-Print XML encoder.

Covers:

1. **Envelope** -- exact document bytes, page wrapper, empty sequences.
2. **Elements** -- attribute names, order and literals per command.
3. **Symbols** -- defaults filled from the rule table.
4. **Properties** -- determinism, escaping, well-formedness, unknown kinds.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from epos_print.commands.model import (
    Area,
    Barcode,
    Cut,
    Direction,
    Feed,
    HLine,
    Image,
    Line,
    Pulse,
    Rectangle,
    Sound,
    Symbol,
    Text,
)
from epos_print.core.errors import UnsupportedCommand
from epos_print.core.types import (
    HRI,
    Align,
    BarcodeType,
    Color,
    CutType,
    Drawer,
    ErrorCorrectionLevel,
    Font,
    LineStyle,
    Mode,
    PrintDirection,
    PulseTime,
    SoundPattern,
    SymbolType,
)
from epos_print.wire.encoder import (
    EPOS_NAMESPACE,
    SOAP_NAMESPACE,
    encode,
    encode_command,
    format_value,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_PREFIX = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">'
    "<s:Body>"
    '<epos-print xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print">'
)
_SUFFIX = "</epos-print></s:Body></s:Envelope>"


def _element(command: object) -> str:
    return ET.tostring(encode_command(command), encoding="unicode")


# =========================================================================
# Envelope
# =========================================================================


class TestEnvelope:

    def test_hello_and_cut(self) -> None:
        document = encode([Text(text="Hello\n"), Cut(cut_type=CutType.FEED)])
        expected = _PREFIX + '<text>Hello\n</text><cut type="feed" />' + _SUFFIX
        assert document == expected.encode("utf-8")

    def test_page_mode_wrapper(self) -> None:
        document = encode(
            [Area(x=0, y=0, width=500, height=300), Text(text="Hi")],
            Mode.PAGE,
        )
        expected = (
            _PREFIX
            + '<page><area x="0" y="0" width="500" height="300" /><text>Hi</text></page>'
            + _SUFFIX
        )
        assert document == expected.encode("utf-8")

    def test_empty_sequence(self) -> None:
        document = encode([])
        root = ET.fromstring(document)
        epos_print = root.find(f"{{{SOAP_NAMESPACE}}}Body/{{{EPOS_NAMESPACE}}}epos-print")
        assert epos_print is not None
        assert len(epos_print) == 0

    def test_output_is_well_formed(self) -> None:
        document = encode(
            [
                Text(text="Total: 9.99 <EUR> & tax\n"),
                Barcode(text="ABC", barcode_type=BarcodeType.CODE39),
                Cut(),
            ]
        )
        root = ET.fromstring(document)
        assert root.tag == f"{{{SOAP_NAMESPACE}}}Envelope"
        body = root.find(f"{{{SOAP_NAMESPACE}}}Body/{{{EPOS_NAMESPACE}}}epos-print")
        assert body is not None
        assert [child.tag.split("}")[1] for child in body] == ["text", "barcode", "cut"]
        assert body[0].text == "Total: 9.99 <EUR> & tax\n"

    def test_deterministic(self) -> None:
        commands = [
            Text(text="Receipt\n", font=Font.FONT_B, emphasis=True),
            Symbol(
                text="https://example.com",
                symbol_type=SymbolType.QRCODE_MODEL_2,
                level=ErrorCorrectionLevel.LEVEL_M,
            ),
            Cut(),
        ]
        assert encode(commands) == encode(list(commands))

    def test_order_preserved(self) -> None:
        commands = [Text(text=str(n)) for n in range(20)]
        root = ET.fromstring(encode(commands))
        body = root.find(f"{{{SOAP_NAMESPACE}}}Body/{{{EPOS_NAMESPACE}}}epos-print")
        assert body is not None
        assert [child.text for child in body] == [str(n) for n in range(20)]

    def test_carriage_return_survives_parsing(self) -> None:
        document = encode([Text(text="a\r\nb"), Text(text="\r")])
        assert b"\r" not in document
        assert b"<text>a&#13;\nb</text>" in document
        root = ET.fromstring(document)
        body = root.find(f"{{{SOAP_NAMESPACE}}}Body/{{{EPOS_NAMESPACE}}}epos-print")
        assert body is not None
        assert [child.text for child in body] == ["a\r\nb", "\r"]


# =========================================================================
# Elements
# =========================================================================


class TestElements:

    def test_text_attributes_in_fixed_order(self) -> None:
        text = Text(
            text="x",
            align=Align.CENTER,
            width=2,
            double_width=True,
            font=Font.FONT_B,
            underline=False,
            color=Color.COLOR_2,
        )
        assert _element(text) == (
            '<text font="font_b" dw="true" width="2" ul="false" '
            'color="color_2" align="center">x</text>'
        )

    def test_empty_text_element(self) -> None:
        assert _element(Text(text="")) == "<text />"

    def test_text_escaping(self) -> None:
        assert _element(Text(text='a<b & "c"')) == '<text>a&lt;b &amp; "c"</text>'

    def test_feed(self) -> None:
        assert _element(Feed(line=3)) == '<feed line="3" />'

    def test_image(self) -> None:
        image = Image(data="AAA=", width=8, height=2, align=Align.RIGHT)
        assert _element(image) == '<image width="8" height="2" align="right">AAA=</image>'

    def test_barcode(self) -> None:
        barcode = Barcode(
            text="ABC",
            barcode_type=BarcodeType.CODE39,
            hri=HRI.BELOW,
            width=2,
            height=60,
        )
        assert _element(barcode) == (
            '<barcode type="code39" hri="below" width="2" height="60">ABC</barcode>'
        )

    @pytest.mark.parametrize(
        ("cut_type", "literal"),
        [(CutType.NO_FEED, "no_feed"), (CutType.FEED, "feed"), (CutType.RESERVE, "reserve")],
    )
    def test_cut(self, cut_type: CutType, literal: str) -> None:
        assert _element(Cut(cut_type=cut_type)) == f'<cut type="{literal}" />'

    def test_hline(self) -> None:
        hline = HLine(x1=0, x2=500, style=LineStyle.THIN_DOUBLE)
        assert _element(hline) == '<hline x1="0" x2="500" style="thin_double" />'

    def test_pulse(self) -> None:
        pulse = Pulse(drawer=Drawer.DRAWER_1, time=PulseTime.PULSE_100)
        assert _element(pulse) == '<pulse drawer="drawer_1" time="pulse_100" />'

    def test_sound(self) -> None:
        sound = Sound(pattern=SoundPattern.PATTERN_A, repeat=2)
        assert _element(sound) == '<sound pattern="pattern_a" repeat="2" />'

    def test_page_mode_elements(self) -> None:
        assert _element(Direction(dir=PrintDirection.TOP_TO_BOTTOM)) == (
            '<direction dir="top_to_bottom" />'
        )
        assert _element(Line(x1=0, y1=0, x2=10, y2=10)) == (
            '<line x1="0" y1="0" x2="10" y2="10" />'
        )
        assert _element(Rectangle(x1=0, y1=0, x2=10, y2=10, style=LineStyle.THICK)) == (
            '<rectangle x1="0" y1="0" x2="10" y2="10" style="thick" />'
        )


# =========================================================================
# Symbols
# =========================================================================


class TestSymbols:

    def test_maxicode_defaults(self) -> None:
        symbol = Symbol(text="MAXI", symbol_type=SymbolType.MAXICODE_MODE_4)
        assert _element(symbol) == (
            '<symbol type="maxicode_mode_4" level="default" width="3" '
            'height="3" size="0">MAXI</symbol>'
        )

    def test_qr_level_and_width(self) -> None:
        symbol = Symbol(
            text="https://example.com",
            symbol_type=SymbolType.QRCODE_MODEL_2,
            level=ErrorCorrectionLevel.LEVEL_M,
            width=4,
            align=Align.CENTER,
        )
        assert _element(symbol) == (
            '<symbol type="qrcode_model_2" level="level_m" width="4" height="3" '
            'size="0" align="center">https://example.com</symbol>'
        )

    def test_gs1_stacked_default_width(self) -> None:
        symbol = Symbol(text="0100012345678905", symbol_type=SymbolType.GS1_DATABAR_STACKED)
        element = encode_command(symbol)
        assert element.get("width") == "2"

    def test_aztec_numeric_level(self) -> None:
        symbol = Symbol(text="x", symbol_type=SymbolType.AZTECCODE_COMPACT, level=40)
        assert encode_command(symbol).get("level") == "40"


# =========================================================================
# Helpers and failures
# =========================================================================


class TestEncoderHelpers:

    def test_format_value(self) -> None:
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(CutType.NO_FEED) == "no_feed"
        assert format_value(255) == "255"

    def test_unsupported_command(self) -> None:
        class Staple:
            kind = "staple"

        with pytest.raises(UnsupportedCommand) as exc_info:
            encode([Text(text="a"), Staple()])
        assert exc_info.value.index == 1
