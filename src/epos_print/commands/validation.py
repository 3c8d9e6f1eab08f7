"""Command validation against ePOS-Print protocol rules.

Validation is pure: it never touches the network and never coerces a
value to the "closest legal" one.  It runs on the whole sequence before
anything is encoded.

Rules enforced per command kind:

* **Mode legality** -- ``cut``, ``hline``, ``pulse`` and ``sound`` are
  normal-mode only; ``area``, ``position``, ``direction``, ``line`` and
  ``rectangle`` are page-mode only; ``feed pos`` is normal-mode only.
* **text** -- size multipliers 1-8.
* **feed** -- at least one amount; amounts 0-255.
* **image** -- valid base64 whose decoded size matches the dimensions.
* **barcode** -- module width 2-6, height 1-255, data format per type.
* **symbol** -- table-driven via :data:`~epos_print.commands.symbols.SYMBOL_RULES`.
* **cut** -- cut type must be a :class:`~epos_print.core.types.CutType`.
* **geometry** -- coordinates 0-65535, ordered endpoints.
* Every text-bearing field must be representable in XML 1.0.

Sequence-level rule: the summed payload must not exceed
``max_payload_bytes``.
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from epos_print.commands.symbols import (
    BARCODE_HEIGHT,
    BARCODE_RULES,
    BARCODE_WIDTH,
    SYMBOL_RULES,
)
from epos_print.core.config import DEFAULT_MAX_PAYLOAD_BYTES
from epos_print.core.errors import PayloadTooLarge, UnsupportedCommand, ValidationError
from epos_print.core.types import CutType, ErrorCorrectionLevel, ImageMode, Mode

logger = logging.getLogger(__name__)

_BOTH = frozenset({Mode.NORMAL, Mode.PAGE})
_NORMAL = frozenset({Mode.NORMAL})
_PAGE = frozenset({Mode.PAGE})

MODE_RULES: dict[str, frozenset[Mode]] = {
    "text": _BOTH,
    "feed": _BOTH,
    "image": _BOTH,
    "barcode": _BOTH,
    "symbol": _BOTH,
    "cut": _NORMAL,
    "hline": _NORMAL,
    "pulse": _NORMAL,
    "sound": _NORMAL,
    "area": _PAGE,
    "position": _PAGE,
    "direction": _PAGE,
    "line": _PAGE,
    "rectangle": _PAGE,
}
"""Modes in which each command kind may appear."""

EMPTY_SEQUENCE_WARNING: str = "Command sequence is empty; nothing will be printed."

# Characters XML 1.0 cannot carry.  Binary data is written as \xnn instead.
_XML_ILLEGAL: re.Pattern[str] = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)

_MULTIPLIER = range(1, 9)
_BYTE = range(0, 256)
_DOTS = range(0, 65536)
_DIMENSION = range(1, 65536)


def _in(value: int | None, allowed: range) -> bool:
    return value is None or value in allowed


def _check_xml_text(field: str, value: str) -> list[str]:
    match = _XML_ILLEGAL.search(value)
    if match is None:
        return []
    return [
        f"{field} contains character U+{ord(match.group()):04X} which cannot "
        "be sent in XML; write binary data as \\xnn."
    ]


def payload_size(command: Any) -> int:
    """Return the UTF-8 size in bytes of a command's text or image payload."""
    size = 0
    for field in ("text", "data"):
        value = getattr(command, field, None)
        if isinstance(value, str):
            size += len(value.encode("utf-8", errors="surrogatepass"))
    return size


class CommandValidator:
    """Validates single commands and whole sequences for a :class:`Mode`.

    Usage
    -----
    ::

        validator = CommandValidator()
        warnings = validator.validate_sequence(commands, Mode.NORMAL)
    """

    def __init__(self, max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> None:
        self._max_payload_bytes = max_payload_bytes

    @property
    def max_payload_bytes(self) -> int:
        return self._max_payload_bytes

    def check(self, command: Any, mode: Mode) -> list[str]:
        """Return the rule violations of *command* in *mode*.

        An empty list means the command is valid.

        Raises
        ------
        UnsupportedCommand
            If the command kind is unknown.
        """
        mode = Mode(mode)
        kind = getattr(command, "kind", None)
        try:
            handler = self._VALIDATORS[kind]
        except KeyError:
            raise UnsupportedCommand(
                f"Unsupported command kind: {kind!r}",
                details={"type": type(command).__name__},
            ) from None

        errors: list[str] = []
        if mode not in MODE_RULES[kind]:
            allowed = ", ".join(sorted(m.value for m in MODE_RULES[kind]))
            errors.append(f"'{kind}' is not allowed in {mode.value} mode (only {allowed}).")
        errors.extend(handler(self, command, mode))
        return errors

    def validate(self, command: Any, mode: Mode, *, index: int = 0) -> None:
        """Validate one command, raising on the first violated rule.

        Raises
        ------
        ValidationError
            With ``index`` set to *index* and ``rule`` to the first violation.
        """
        try:
            errors = self.check(command, mode)
        except UnsupportedCommand as exc:
            raise UnsupportedCommand(exc.message, index=index, details=exc.details) from None
        if errors:
            raise ValidationError(
                f"Command {index} ({command.kind}): " + "; ".join(errors),
                index=index,
                rule=errors[0],
                details={"kind": command.kind, "violations": errors},
            )

    def validate_sequence(self, commands: Sequence[Any], mode: Mode) -> list[str]:
        """Validate an ordered sequence of commands.

        Returns
        -------
        list[str]
            Non-fatal warnings (an empty sequence is legal but flagged).

        Raises
        ------
        ValidationError
            For the first offending command, with its index.
        PayloadTooLarge
            If the summed payload exceeds ``max_payload_bytes``.
        """
        if not commands:
            return [EMPTY_SEQUENCE_WARNING]

        total = 0
        for index, command in enumerate(commands):
            self.validate(command, mode, index=index)
            total += payload_size(command)

        if total > self._max_payload_bytes:
            raise PayloadTooLarge(
                f"Payload of {total} bytes exceeds the limit of "
                f"{self._max_payload_bytes} bytes",
                rule="max_payload_bytes",
                details={"size": total, "limit": self._max_payload_bytes},
            )
        logger.debug("Validated %d commands (%d payload bytes)", len(commands), total)
        return []

    # -- Per-kind validators -------------------------------------------------

    def _validate_text(self, command: Any, mode: Mode) -> list[str]:
        errors = _check_xml_text("text", command.text)
        if not _in(command.width, _MULTIPLIER):
            errors.append(f"text width must be 1-8, got {command.width}.")
        if not _in(command.height, _MULTIPLIER):
            errors.append(f"text height must be 1-8, got {command.height}.")
        return errors

    def _validate_feed(self, command: Any, mode: Mode) -> list[str]:
        errors: list[str] = []
        amounts = (command.unit, command.line, command.linespc, command.pos)
        if all(value is None for value in amounts):
            errors.append("feed requires one of unit, line, linespc or pos.")
        for name in ("unit", "line", "linespc"):
            value = getattr(command, name)
            if not _in(value, _BYTE):
                errors.append(f"feed {name} must be 0-255, got {value}.")
        if command.pos is not None and mode is Mode.PAGE:
            errors.append("feed pos cannot be used in page mode.")
        return errors

    def _validate_image(self, command: Any, mode: Mode) -> list[str]:
        errors: list[str] = []
        if command.width not in _DIMENSION or command.height not in _DIMENSION:
            errors.append(
                f"image dimensions must be 1-65535 dots, got "
                f"{command.width}x{command.height}."
            )
            return errors
        try:
            raster = base64.b64decode(command.data, validate=True)
        except (binascii.Error, ValueError):
            errors.append("image data is not valid base64.")
            return errors
        if command.mode is ImageMode.GRAY16:
            expected = (command.width + 1) // 2 * command.height
        else:
            expected = (command.width + 7) // 8 * command.height
        if len(raster) != expected:
            errors.append(
                f"image data is {len(raster)} bytes but {command.width}x"
                f"{command.height} needs {expected}."
            )
        return errors

    def _validate_barcode(self, command: Any, mode: Mode) -> list[str]:
        errors = _check_xml_text("barcode data", command.text)
        if not command.text:
            errors.append("barcode data must not be empty.")
        else:
            rule = BARCODE_RULES.get(command.barcode_type)
            if rule is not None and rule.pattern is not None:
                if not rule.pattern.fullmatch(command.text):
                    errors.append(
                        f"{command.barcode_type.value} data must be {rule.description}."
                    )
        if not _in(command.width, BARCODE_WIDTH):
            errors.append(f"barcode width must be 2-6, got {command.width}.")
        if not _in(command.height, BARCODE_HEIGHT):
            errors.append(f"barcode height must be 1-255, got {command.height}.")
        return errors

    def _validate_symbol(self, command: Any, mode: Mode) -> list[str]:
        errors = _check_xml_text("symbol data", command.text)
        if not command.text:
            errors.append("symbol data must not be empty.")
        type_name = command.symbol_type.value
        rule = SYMBOL_RULES[command.symbol_type]

        level = command.level
        if level is None:
            if rule.level_required:
                errors.append(f"{type_name} requires an error correction level.")
        elif isinstance(level, ErrorCorrectionLevel):
            allowed = rule.levels or frozenset({ErrorCorrectionLevel.DEFAULT})
            if level not in allowed:
                names = ", ".join(sorted(item.value for item in allowed))
                errors.append(f"{type_name} level must be one of {names}, got {level.value}.")
        elif rule.level_numeric is None or level not in rule.level_numeric:
            errors.append(f"{type_name} does not accept a numeric level ({level}).")

        for name in ("width", "height"):
            value = getattr(command, name)
            allowed_range = getattr(rule, name)
            if value is None:
                continue
            if allowed_range is None:
                errors.append(f"{name} is not used by {type_name}.")
            elif value not in allowed_range:
                errors.append(
                    f"{type_name} {name} must be {allowed_range.start}-"
                    f"{allowed_range.stop - 1}, got {value}."
                )

        if command.size is not None:
            if rule.size is None:
                errors.append(f"size is not used by {type_name}.")
            elif not any(command.size in allowed_range for allowed_range in rule.size):
                errors.append(f"{type_name} size {command.size} is out of range.")
        return errors

    def _validate_cut(self, command: Any, mode: Mode) -> list[str]:
        if not isinstance(command.cut_type, CutType):
            return [f"cut type must be one of no_feed, feed, reserve; got {command.cut_type!r}."]
        return []

    def _validate_hline(self, command: Any, mode: Mode) -> list[str]:
        errors = self._check_dots(command, ("x1", "x2"))
        if not errors and command.x1 > command.x2:
            errors.append("hline x1 must not exceed x2.")
        return errors

    def _validate_pulse(self, command: Any, mode: Mode) -> list[str]:
        return []

    def _validate_sound(self, command: Any, mode: Mode) -> list[str]:
        if not _in(command.repeat, _BYTE):
            return [f"sound repeat must be 0-255, got {command.repeat}."]
        return []

    def _validate_area(self, command: Any, mode: Mode) -> list[str]:
        errors = self._check_dots(command, ("x", "y"))
        if command.width not in _DIMENSION or command.height not in _DIMENSION:
            errors.append("area width and height must be 1-65535 dots.")
        return errors

    def _validate_position(self, command: Any, mode: Mode) -> list[str]:
        return self._check_dots(command, ("x", "y"))

    def _validate_direction(self, command: Any, mode: Mode) -> list[str]:
        return []

    def _validate_shape(self, command: Any, mode: Mode) -> list[str]:
        errors = self._check_dots(command, ("x1", "y1", "x2", "y2"))
        if not errors and (command.x1 > command.x2 or command.y1 > command.y2):
            errors.append(f"{command.kind} start point must not exceed its end point.")
        return errors

    @staticmethod
    def _check_dots(command: Any, fields: tuple[str, ...]) -> list[str]:
        return [
            f"{command.kind} {name} must be 0-65535, got {getattr(command, name)}."
            for name in fields
            if getattr(command, name) not in _DOTS
        ]

    _VALIDATORS: dict[str, Callable[[CommandValidator, Any, Mode], list[str]]] = {
        "text": _validate_text,
        "feed": _validate_feed,
        "image": _validate_image,
        "barcode": _validate_barcode,
        "symbol": _validate_symbol,
        "cut": _validate_cut,
        "hline": _validate_hline,
        "pulse": _validate_pulse,
        "sound": _validate_sound,
        "area": _validate_area,
        "position": _validate_position,
        "direction": _validate_direction,
        "line": _validate_shape,
        "rectangle": _validate_shape,
    }
