"""epos-print wire subpackage -- XML encoding, HTTP transport and replies.

* **Encoder** -- commands to the ePOS-Print SOAP document
  (:mod:`~epos_print.wire.encoder`).
* **HTTP transport** -- delivery to ``/cgi-bin/epos/service.cgi``
  (:mod:`~epos_print.wire.http`).
* **Replies** -- SOAP response parsing, fault classification and the
  status bitmask (:mod:`~epos_print.wire.reply`).
"""
from __future__ import annotations

# -- Encoder ----------------------------------------------------------------
from epos_print.wire.encoder import (
    EPOS_NAMESPACE,
    SOAP_NAMESPACE,
    XML_DECLARATION,
    build_envelope,
    encode,
    encode_command,
    format_value,
)

# -- HTTP transport ---------------------------------------------------------
from epos_print.wire.http import (
    ENDPOINT,
    EPOS_CONTENT_TYPE,
    HTTPTransport,
    RawReply,
)

# -- Replies ----------------------------------------------------------------
from epos_print.wire.reply import (
    FAULT_CODES,
    PrinterStatus,
    ReplyEnvelope,
    classify_fault,
    describe_status,
    interpret_reply,
    parse_reply,
)

__all__ = [
    # Encoder
    "SOAP_NAMESPACE",
    "EPOS_NAMESPACE",
    "XML_DECLARATION",
    "build_envelope",
    "encode",
    "encode_command",
    "format_value",
    # HTTP
    "ENDPOINT",
    "EPOS_CONTENT_TYPE",
    "HTTPTransport",
    "RawReply",
    # Replies
    "FAULT_CODES",
    "PrinterStatus",
    "ReplyEnvelope",
    "classify_fault",
    "describe_status",
    "interpret_reply",
    "parse_reply",
]
