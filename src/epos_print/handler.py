"""Print handler -- the main entry point.

:class:`PrintHandler` wires the pipeline together for one printer session:

1. **Validate** -- :class:`~epos_print.commands.validation.CommandValidator`
   checks every command for the handler's mode, then the payload size.
2. **Encode** -- :func:`~epos_print.wire.encoder.encode` renders the SOAP
   document.
3. **Send** -- :class:`~epos_print.wire.http.HTTPTransport` POSTs it to the
   printer.
4. **Interpret** -- :func:`~epos_print.wire.reply.interpret_reply` turns the
   reply into a :class:`~epos_print.core.types.PrintResult`.

Two calling shapes share that pipeline:

* **Accumulate then flush** -- :meth:`PrintHandler.add` commands one at a
  time (each validated immediately), then :meth:`PrintHandler.print`.
* **One-shot** -- :meth:`PrintHandler.create` with a complete sequence.

Usage
-----
::

    from epos_print import Cut, CutType, PrintHandler, Text

    handler = PrintHandler.connect("http://192.168.1.194")
    handler.add(Text(text="Hello\\n"))
    handler.add(Cut(cut_type=CutType.FEED))

    result = await handler.print()
    result.raise_for_fault()
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from epos_print.commands.validation import CommandValidator
from epos_print.core.config import (
    DEFAULT_DEVICE_ID,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_TIMEOUT_MS,
    load_config,
)
from epos_print.core.types import Mode, PrintResult
from epos_print.wire.encoder import encode
from epos_print.wire.http import HTTPTransport
from epos_print.wire.reply import interpret_reply

if TYPE_CHECKING:
    import httpx

    from epos_print.commands.model import Command
    from epos_print.core.config import SessionConfig

logger = logging.getLogger(__name__)


class PrintHandler:
    """Validates, encodes and sends receipts to one ePOS-Print printer.

    The handler exclusively owns its pending command buffer.  A flush takes
    the whole buffer; if the send does not succeed the taken commands are
    put back in front of anything added meanwhile, so nothing is lost.
    Sends on one handler are serialized: at most one request is in flight.

    Parameters
    ----------
    config:
        Connection parameters for the printer.
    mode:
        ``Mode.NORMAL`` (default) or ``Mode.PAGE``.  Fixed for the
        handler's lifetime.
    transport:
        Optional transport; defaults to an :class:`HTTPTransport` for
        *config*.
    validator:
        Optional validator; defaults to one honouring
        ``config.max_payload_bytes``.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        mode: Mode = Mode.NORMAL,
        transport: HTTPTransport | None = None,
        validator: CommandValidator | None = None,
    ) -> None:
        self._config = config
        self._mode = Mode(mode)
        self._transport = transport or HTTPTransport(config)
        self._validator = validator or CommandValidator(config.max_payload_bytes)
        self._buffer: list[Command] = []
        self._lock = asyncio.Lock()

    @classmethod
    def connect(
        cls,
        address: str,
        *,
        device_id: str = DEFAULT_DEVICE_ID,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
        mode: Mode = Mode.NORMAL,
        client: httpx.AsyncClient | None = None,
    ) -> PrintHandler:
        """Build a handler from plain connection values.

        Raises
        ------
        ConfigurationError
            If the address, timeout or device id is malformed.  No network
            activity happens here.
        """
        config = load_config(
            address=address,
            device_id=device_id,
            timeout_ms=timeout_ms,
            max_payload_bytes=max_payload_bytes,
        )
        return cls(config, mode=mode, transport=HTTPTransport(config, client=client))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def transport(self) -> HTTPTransport:
        return self._transport

    @property
    def validator(self) -> CommandValidator:
        return self._validator

    @property
    def pending(self) -> tuple[Command, ...]:
        """Commands added and not yet printed, in order."""
        return tuple(self._buffer)

    # ------------------------------------------------------------------
    # Accumulate
    # ------------------------------------------------------------------

    def add(self, command: Command) -> None:
        """Validate *command* and append it to the pending buffer.

        Raises
        ------
        ValidationError
            If the command is invalid for the handler's mode.  ``index`` is
            the position the command would have taken; the buffer is left
            unchanged.
        """
        self._validator.validate(command, self._mode, index=len(self._buffer))
        self._buffer.append(command)

    def extend(self, commands: Iterable[Command]) -> None:
        """Validate and append several commands; all or nothing."""
        incoming = list(commands)
        offset = len(self._buffer)
        for position, command in enumerate(incoming):
            self._validator.validate(command, self._mode, index=offset + position)
        self._buffer.extend(incoming)

    def clear(self) -> None:
        """Discard all pending commands."""
        self._buffer.clear()

    def render(self) -> bytes:
        """Encode the pending commands without sending them."""
        commands = list(self._buffer)
        self._validator.validate_sequence(commands, self._mode)
        return encode(commands, self._mode)

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    async def print(self) -> PrintResult:
        """Send the pending commands as one print job.

        On success the buffer is left empty.  On a printer fault or any
        raised error the commands are restored at the front of the buffer.

        Raises
        ------
        ValidationError
            If the payload size limit is exceeded.
        TransportError
            If the printer could not be reached.
        ProtocolViolation
            If the reply is not a valid ePOS-Print envelope.
        """
        async with self._lock:
            taken = self._buffer
            self._buffer = []
            try:
                result = await self._submit(taken)
            except BaseException:
                self._buffer[:0] = taken
                raise
            if not result.ok:
                self._buffer[:0] = taken
            return result

    async def create(self, commands: Sequence[Command]) -> PrintResult:
        """Validate, encode and send *commands* as one print job.

        The pending buffer is neither read nor modified.
        """
        async with self._lock:
            return await self._submit(list(commands))

    async def _submit(self, commands: list[Command]) -> PrintResult:
        warnings = self._validator.validate_sequence(commands, self._mode)
        for warning in warnings:
            logger.warning(warning)

        document = encode(commands, self._mode)
        logger.debug("Outbound ePOS-Print document: %s", document.decode("utf-8"))

        reply = await self._transport.send(document)
        result = interpret_reply(reply.status_code, reply.body)
        if warnings:
            result = result.model_copy(update={"warnings": tuple(warnings)})
        logger.info(
            "Print job of %d commands to %s finished: %s%s",
            len(commands),
            self._config.device_id,
            result.status,
            f" ({result.code})" if result.code else "",
        )
        return result
