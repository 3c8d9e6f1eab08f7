#!/usr/bin/env python3
"""epos-print quickstart -- print a small receipt.

Demonstrates the core workflow:

1. Connect a handler to a printer address.
2. Add commands; each one is validated as it is added.
3. Render the ePOS-Print document (no network).
4. Print and inspect the result.

Run:
    python examples/quickstart.py                      # render only
    python examples/quickstart.py http://192.168.1.194 # print
"""
from __future__ import annotations

import asyncio
import logging
import sys

from epos_print import (
    HRI,
    Align,
    Barcode,
    BarcodeType,
    Cut,
    CutType,
    EposPrintError,
    ErrorCorrectionLevel,
    Feed,
    PrintHandler,
    Symbol,
    SymbolType,
    Text,
    ValidationError,
    describe_status,
)


async def main(address: str | None) -> int:
    # -- Step 1: Connect -------------------------------------------------------
    handler = PrintHandler.connect(address or "http://192.168.1.194", timeout_ms=10_000)
    print(f"[1] Handler for {handler.transport.url} (devid={handler.config.device_id})")

    # -- Step 2: Add commands --------------------------------------------------
    handler.add(Text(text="ACME Coffee\n", align=Align.CENTER, double_height=True))
    handler.add(Text(text="Flat white            3.40\n", align=Align.LEFT))
    handler.add(Text(text="Croissant             2.10\n"))
    handler.add(Feed(line=1))
    handler.add(
        Barcode(
            text="201234567890",
            barcode_type=BarcodeType.EAN13,
            hri=HRI.BELOW,
            align=Align.CENTER,
        )
    )
    handler.add(
        Symbol(
            text="https://example.com/r/8812",
            symbol_type=SymbolType.QRCODE_MODEL_2,
            level=ErrorCorrectionLevel.LEVEL_M,
            width=4,
            align=Align.CENTER,
        )
    )
    handler.add(Cut(cut_type=CutType.FEED))
    print(f"[2] {len(handler.pending)} commands pending")

    try:
        handler.add(Symbol(text="no level", symbol_type=SymbolType.QRCODE_MODEL_2))
    except ValidationError as exc:
        print(f"    rejected command {exc.index}: {exc.rule}")

    # -- Step 3: Render --------------------------------------------------------
    print("[3] Document:")
    print(handler.render().decode("utf-8"))

    if address is None:
        return 0

    # -- Step 4: Print ---------------------------------------------------------
    try:
        result = await handler.print()
    except EposPrintError as exc:
        print(f"[4] {exc.code}: {exc.message}")
        return 1

    print(f"[4] {result.status} {result.code}".rstrip())
    print(f"    status bits: {', '.join(describe_status(result.printer_status)) or 'none'}")
    return 0 if result.ok else 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
