"""epos-print command subpackage -- the command model and its validation.

* **Models** -- one immutable Pydantic model per ePOS-Print command and the
  :data:`Command` tagged union (:mod:`~epos_print.commands.model`).
* **Rule tables** -- per-symbology attribute rules and defaults
  (:mod:`~epos_print.commands.symbols`).
* **Validation** -- :class:`CommandValidator`
  (:mod:`~epos_print.commands.validation`).
"""
from __future__ import annotations

from epos_print.commands.model import (
    COMMAND_TYPES,
    Area,
    Barcode,
    Command,
    CommandSequence,
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
from epos_print.commands.symbols import (
    BARCODE_RULES,
    SYMBOL_RULES,
    BarcodeRule,
    SymbolRule,
    resolve_symbol_attributes,
)
from epos_print.commands.validation import (
    EMPTY_SEQUENCE_WARNING,
    MODE_RULES,
    CommandValidator,
    payload_size,
)

__all__ = [
    # Models
    "Command",
    "CommandSequence",
    "COMMAND_TYPES",
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
    # Rules
    "SYMBOL_RULES",
    "SymbolRule",
    "BARCODE_RULES",
    "BarcodeRule",
    "resolve_symbol_attributes",
    # Validation
    "CommandValidator",
    "MODE_RULES",
    "EMPTY_SEQUENCE_WARNING",
    "payload_size",
]
