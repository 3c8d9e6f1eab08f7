"""HTTP transport binding for ePOS-Print.

Delivers an encoded document to the printer's ePOS-Print service::

    POST {scheme}://{host}/cgi-bin/epos/service.cgi?devid={device_id}&timeout={timeout_ms}
    Content-Type: text/xml; charset=utf-8
    If-Modified-Since: Thu, 01 Jan 1970 00:00:00 GMT

and hands back the raw HTTP status and body for
:func:`~epos_print.wire.reply.interpret_reply`.  The transport never
retries; every ``httpx`` failure is mapped onto the
:class:`~epos_print.core.errors.TransportError` family.  The whole call,
including reading the reply body, is bounded by ``timeout_ms``.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from epos_print.core.config import SessionConfig
from epos_print.core.errors import (
    ConnectionFailed,
    TransportError,
    TransportTimeout,
)

logger = logging.getLogger(__name__)

ENDPOINT: str = "/cgi-bin/epos/service.cgi"
EPOS_CONTENT_TYPE: str = "text/xml; charset=utf-8"
# Defeats caching proxies in front of the printer.
IF_MODIFIED_SINCE: str = "Thu, 01 Jan 1970 00:00:00 GMT"


@dataclass(frozen=True)
class RawReply:
    """HTTP status code and undecoded body of a printer reply."""

    status_code: int
    body: bytes


# ---------------------------------------------------------------------------
# HTTPTransport (client)
# ---------------------------------------------------------------------------


class HTTPTransport:
    """Async HTTP client transport for one printer.

    Parameters
    ----------
    config:
        The session the transport addresses.
    client:
        Optional shared :class:`httpx.AsyncClient`.  When given it is used
        as-is (connection reuse, ``httpx.MockTransport`` in tests) and the
        caller owns its lifetime.  Otherwise a short-lived client is opened
        per request.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._timeout = httpx.Timeout(config.timeout_ms / 1000)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def url(self) -> str:
        """The service endpoint, without query parameters.

        Any path in the configured address is replaced by the endpoint.
        """
        return str(httpx.URL(self._config.address).join(ENDPOINT))

    def _build_params(self) -> dict[str, str]:
        return {
            "devid": self._config.device_id,
            "timeout": str(self._config.timeout_ms),
        }

    def _build_headers(self) -> dict[str, str]:
        """Build the headers the ePOS-Print service expects."""
        return {
            "Content-Type": EPOS_CONTENT_TYPE,
            "If-Modified-Since": IF_MODIFIED_SINCE,
        }

    async def send(self, document: bytes) -> RawReply:
        """POST *document* to the printer and return its raw reply.

        Parameters
        ----------
        document:
            The encoded ePOS-Print SOAP document.

        Returns
        -------
        RawReply
            Status code and body, whatever the status code.

        Raises
        ------
        TransportTimeout
            If the printer did not answer within ``timeout_ms``.
        ConnectionFailed
            If the connection could not be established.
        TransportError
            For any other HTTP-level failure.
        """
        logger.debug(
            "POST %s devid=%s (%d bytes)",
            self.url,
            self._config.device_id,
            len(document),
        )
        try:
            async with asyncio.timeout(self._config.timeout_ms / 1000):
                if self._client is not None:
                    response = await self._post(self._client, document)
                else:
                    async with httpx.AsyncClient(timeout=self._timeout) as client:
                        response = await self._post(client, document)
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise TransportTimeout(
                f"No reply from {self.url} within {self._config.timeout_ms} ms",
                details={"url": self.url, "timeout_ms": self._config.timeout_ms},
            ) from exc
        except httpx.ConnectError as exc:
            raise ConnectionFailed(
                f"Could not connect to {self.url}: {exc}",
                details={"url": self.url},
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"HTTP request to {self.url} failed: {exc}",
                details={"url": self.url, "exception_type": type(exc).__name__},
            ) from exc

        logger.debug("Reply %d from %s: %r", response.status_code, self.url, response.content)
        return RawReply(status_code=response.status_code, body=response.content)

    async def _post(self, client: httpx.AsyncClient, document: bytes) -> httpx.Response:
        return await client.post(
            self.url,
            params=self._build_params(),
            content=document,
            headers=self._build_headers(),
            timeout=self._timeout,
        )
