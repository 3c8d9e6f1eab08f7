"""ePOS-Print XML document encoder.

Renders a validated command sequence into the SOAP document the printer
firmware accepts::

    <?xml version="1.0" encoding="utf-8"?>
    <s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
      <s:Body>
        <epos-print xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print">
          <text>Hello</text><cut type="feed" />
        </epos-print>
      </s:Body>
    </s:Envelope>

(shown indented; the real output carries no whitespace between elements).
In page mode the commands are wrapped in ``<page>``.

:func:`encode` is a pure function: the same commands and mode always yield
byte-identical output.  Attribute order is fixed per element by
:data:`ATTRIBUTES`; unset optional fields are not emitted, except for the
``<symbol>`` attributes resolved from the symbology rule table.
"""
from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from collections.abc import Callable, Sequence
from typing import Any

from epos_print.commands.symbols import resolve_symbol_attributes
from epos_print.core.errors import UnsupportedCommand
from epos_print.core.types import Mode

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SOAP_NAMESPACE: str = "http://schemas.xmlsoap.org/soap/envelope/"
EPOS_NAMESPACE: str = "http://www.epson-pos.com/schemas/2011/03/epos-print"
XML_DECLARATION: str = '<?xml version="1.0" encoding="utf-8"?>'

ATTRIBUTES: dict[str, tuple[tuple[str, str], ...]] = {
    "text": (
        ("font", "font"),
        ("smoothing", "smoothing"),
        ("double_width", "dw"),
        ("double_height", "dh"),
        ("width", "width"),
        ("height", "height"),
        ("underline", "ul"),
        ("emphasis", "em"),
        ("color", "color"),
        ("lang", "lang"),
        ("align", "align"),
    ),
    "feed": (
        ("unit", "unit"),
        ("line", "line"),
        ("linespc", "linespc"),
        ("pos", "pos"),
    ),
    "image": (
        ("width", "width"),
        ("height", "height"),
        ("color", "color"),
        ("mode", "mode"),
        ("align", "align"),
    ),
    "barcode": (
        ("barcode_type", "type"),
        ("hri", "hri"),
        ("font", "font"),
        ("width", "width"),
        ("height", "height"),
        ("align", "align"),
        ("rotate", "rotate"),
    ),
    "symbol": (
        ("align", "align"),
        ("rotate", "rotate"),
    ),
    "cut": (("cut_type", "type"),),
    "hline": (("x1", "x1"), ("x2", "x2"), ("style", "style")),
    "pulse": (("drawer", "drawer"), ("time", "time")),
    "sound": (("pattern", "pattern"), ("repeat", "repeat")),
    "area": (("x", "x"), ("y", "y"), ("width", "width"), ("height", "height")),
    "position": (("x", "x"), ("y", "y")),
    "direction": (("dir", "dir"),),
    "line": (("x1", "x1"), ("y1", "y1"), ("x2", "x2"), ("y2", "y2"), ("style", "style")),
    "rectangle": (
        ("x1", "x1"),
        ("y1", "y1"),
        ("x2", "x2"),
        ("y2", "y2"),
        ("style", "style"),
    ),
}
"""Field-to-attribute mapping per element, in emission order."""

_CONTENT_FIELD: dict[str, str] = {
    "text": "text",
    "barcode": "text",
    "symbol": "text",
    "image": "data",
}


def format_value(value: Any) -> str:
    """Format a field value as an ePOS-Print attribute literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


# ---------------------------------------------------------------------------
# Per-command encoding
# ---------------------------------------------------------------------------

def _set_attributes(element: ET.Element, command: Any, kind: str) -> None:
    for field, attribute in ATTRIBUTES[kind]:
        value = getattr(command, field)
        if value is not None:
            element.set(attribute, format_value(value))


def _encode_generic(command: Any) -> ET.Element:
    element = ET.Element(command.kind)
    _set_attributes(element, command, command.kind)
    content_field = _CONTENT_FIELD.get(command.kind)
    if content_field is not None:
        element.text = getattr(command, content_field)
    return element


def _encode_symbol(command: Any) -> ET.Element:
    level, width, height, size = resolve_symbol_attributes(
        command.symbol_type,
        command.level,
        command.width,
        command.height,
        command.size,
    )
    element = ET.Element("symbol")
    element.set("type", command.symbol_type.value)
    element.set("level", level)
    element.set("width", width)
    element.set("height", height)
    element.set("size", size)
    _set_attributes(element, command, "symbol")
    element.text = command.text
    return element


_ENCODERS: dict[str, Callable[[Any], ET.Element]] = {
    "text": _encode_generic,
    "feed": _encode_generic,
    "image": _encode_generic,
    "barcode": _encode_generic,
    "symbol": _encode_symbol,
    "cut": _encode_generic,
    "hline": _encode_generic,
    "pulse": _encode_generic,
    "sound": _encode_generic,
    "area": _encode_generic,
    "position": _encode_generic,
    "direction": _encode_generic,
    "line": _encode_generic,
    "rectangle": _encode_generic,
}


def encode_command(command: Any, *, index: int = 0) -> ET.Element:
    """Render one command as its ePOS-Print element.

    Raises
    ------
    UnsupportedCommand
        If the command kind has no encoding.  Nothing is ever dropped.
    """
    kind = getattr(command, "kind", None)
    try:
        encoder = _ENCODERS[kind]
    except KeyError:
        raise UnsupportedCommand(
            f"No ePOS-Print encoding for command kind {kind!r}",
            index=index,
            details={"type": type(command).__name__},
        ) from None
    return encoder(command)


# ---------------------------------------------------------------------------
# Document encoding
# ---------------------------------------------------------------------------

def build_envelope(commands: Sequence[Any], mode: Mode = Mode.NORMAL) -> ET.Element:
    """Build the ``s:Envelope`` element tree for *commands*."""
    envelope = ET.Element("s:Envelope", {"xmlns:s": SOAP_NAMESPACE})
    body = ET.SubElement(envelope, "s:Body")
    epos_print = ET.SubElement(body, "epos-print", {"xmlns": EPOS_NAMESPACE})
    parent = ET.SubElement(epos_print, "page") if Mode(mode) is Mode.PAGE else epos_print
    for index, command in enumerate(commands):
        parent.append(encode_command(command, index=index))
    return envelope


def encode(commands: Sequence[Any], mode: Mode = Mode.NORMAL) -> bytes:
    """Encode *commands* into a UTF-8 ePOS-Print SOAP document.

    The commands must already have been validated; the encoder only
    guarantees well-formed, deterministic output.
    """
    envelope = build_envelope(commands, mode)
    document = XML_DECLARATION + ET.tostring(envelope, encoding="unicode")
    # A literal CR in text would be read back as LF; attributes are already escaped.
    document = document.replace("\r", "&#13;")
    return document.encode("utf-8")
