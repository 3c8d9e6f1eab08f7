"""Printer session configuration.

Defines the immutable connection parameters a
:class:`~epos_print.handler.PrintHandler` is built from.  Values are
validated once at construction; malformed input surfaces as
:class:`~epos_print.core.errors.ConfigurationError`.
"""
from __future__ import annotations

import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as _PydanticValidationError

from epos_print.core.errors import ConfigurationError

DEFAULT_DEVICE_ID: str = "local_printer"
"""Device id ePOS-Print assigns to the printer serving the request."""

DEFAULT_TIMEOUT_MS: int = 10_000

DEFAULT_MAX_PAYLOAD_BYTES: int = 1_048_576  # 1 MiB

_DEVICE_ID_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z0-9_.\-]{1,30}$")


class SessionConfig(BaseModel):
    """Connection parameters for one printer.

    Frozen: set once when the handler is built and never mutated.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    address: str = Field(
        description="Base URL of the printer, e.g. http://192.168.1.194.",
    )
    device_id: str = Field(
        default=DEFAULT_DEVICE_ID,
        description="ePOS-Print device id sent as the devid query parameter.",
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=1,
        description=(
            "Print timeout in milliseconds.  Sent to the printer and used "
            "to bound the HTTP call."
        ),
    )
    max_payload_bytes: int = Field(
        default=DEFAULT_MAX_PAYLOAD_BYTES,
        ge=1,
        description="Largest command payload accepted before sending.",
    )

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except (httpx.InvalidURL, TypeError) as exc:
            raise ValueError(f"not a valid URL: {exc}") from exc
        if url.scheme not in ("http", "https"):
            raise ValueError("address must use the http or https scheme")
        if not url.host:
            raise ValueError("address must include a host")
        if url.query or url.fragment:
            raise ValueError("address must not carry a query or fragment")
        return value.rstrip("/")

    @field_validator("device_id")
    @classmethod
    def _check_device_id(cls, value: str) -> str:
        if not _DEVICE_ID_PATTERN.match(value):
            raise ValueError(
                "device id must be 1-30 characters of letters, digits, "
                "'_', '.' or '-'"
            )
        return value


def load_config(**values: Any) -> SessionConfig:
    """Build a :class:`SessionConfig`, failing fast with ConfigurationError."""
    try:
        return SessionConfig(**values)
    except _PydanticValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(
            "Invalid printer session configuration: " + "; ".join(problems),
            details={"errors": problems},
        ) from exc
