# SPDX-License-Identifier: LGPL-3.0-or-later
"""Drive a complete SCRAM-SHA-256 exchange over a caller supplied transport.

The transport is whatever carries SASL payloads for the outer protocol. For
PostgreSQL that means wrapping the initial payload in SASLInitialResponse,
later payloads in SASLResponse, and unwrapping AuthenticationSASLContinue /
AuthenticationSASLFinal. Framing stays on the transport side.

Example::

    client = authenticate(transport, 'pencil')
    assert client.authenticated

"""
import asyncio
import logging
from typing import Any, Protocol

from .session import ScramClient

logger = logging.getLogger(__name__)


__all__ = ['AsyncScramTransport', 'ScramTransport', 'async_authenticate', 'authenticate']


class ScramTransport(Protocol):
    """Blocking transport. Each call sends one payload and returns the server's reply."""
    def send_initial(self, mechanism: str, payload: bytes) -> bytes:
        ...

    def send_response(self, payload: bytes) -> bytes:
        ...


class AsyncScramTransport(Protocol):
    """Asynchronous counterpart of `ScramTransport`."""
    async def send_initial(self, mechanism: str, payload: bytes) -> bytes:
        ...

    async def send_response(self, payload: bytes) -> bytes:
        ...


def authenticate(transport: ScramTransport, password: str, **kwargs: Any) -> ScramClient:
    """Run both round trips of the exchange.

    Args:
        transport: Carrier for the SASL payloads.
        password: Password in its original, unnormalized form.
        **kwargs: Passed through to `ScramClient`.

    Returns:
        ScramClient: The authenticated session.

    Raises:
        ScramError: Any failure. The session is discarded.

    """
    client = ScramClient(password, **kwargs)
    initial = client.initial_response()
    server_first = transport.send_initial(initial.mechanism, initial.payload)
    response = client.handle_server_first(server_first)
    server_final = transport.send_response(response.payload)
    client.handle_server_final(server_final)
    logger.debug('%s authentication completed', initial.mechanism)
    return client


async def async_authenticate(transport: AsyncScramTransport, password: str, **kwargs: Any) -> ScramClient:
    """Asynchronous version of `authenticate`.

    Key derivation runs in a worker thread so the event loop is not blocked
    for the duration of Hi(). Cancelling the task at any await point simply
    drops the session.

    """
    client = ScramClient(password, **kwargs)
    initial = client.initial_response()
    server_first = await transport.send_initial(initial.mechanism, initial.payload)
    response = await asyncio.to_thread(client.handle_server_first, server_first)
    server_final = await transport.send_response(response.payload)
    client.handle_server_final(server_final)
    logger.debug('%s authentication completed', initial.mechanism)
    return client
