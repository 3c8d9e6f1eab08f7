"""Shared fixtures for ePOS-Print conformance tests.

Provides a scripted printer behind ``httpx.MockTransport`` and handlers
wired to it, so every scenario runs end to end without a network.
"""
from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from epos_print.handler import PrintHandler

# ---------------------------------------------------------------------------
# Session values used across tests
# ---------------------------------------------------------------------------
PRINTER_ADDRESS = "http://192.168.1.194"
DEVICE_ID = "local_printer"
TIMEOUT_MS = 10_000


# ---------------------------------------------------------------------------
# Reply helpers
# ---------------------------------------------------------------------------
def make_reply(
    *,
    success: bool = True,
    code: str = "",
    status: int = 251658262,
    battery: int = 0,
) -> bytes:
    """Build a SOAP reply as the printer sends it."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">'
        "<s:Body>"
        '<response xmlns="http://www.epson-pos.com/schemas/2011/03/epos-print" '
        f'success="{"true" if success else "false"}" code="{code}" '
        f'status="{status}" battery="{battery}"/>'
        "</s:Body></s:Envelope>"
    ).encode("utf-8")


class FakePrinter:
    """Records requests and answers with a configurable reply."""

    def __init__(self) -> None:
        self.status_code = 200
        self.body = make_reply()
        self.error: httpx.HTTPError | None = None
        self.requests: list[httpx.Request] = []

    def reply_with(self, body: bytes, status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"Content-Type": "text/xml; charset=utf-8"},
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def printer() -> FakePrinter:
    return FakePrinter()


@pytest.fixture()
async def client(printer: FakePrinter) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(printer)) as mock_client:
        yield mock_client


@pytest.fixture()
def handler(client: httpx.AsyncClient) -> PrintHandler:
    return PrintHandler.connect(
        PRINTER_ADDRESS,
        device_id=DEVICE_ID,
        timeout_ms=TIMEOUT_MS,
        client=client,
    )
