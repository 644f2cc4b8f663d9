# SPDX-License-Identifier: LGPL-3.0-or-later
# ClientFirstMessage implementation

from dataclasses import dataclass

from .common import (
    GS2_HEADER,
    ScramMessageBase,
    ScramMessageType,
    SASLInitialResponse,
    is_nonce_char,
    sasl_initial_response,
)


__all__ = ['ClientFirstMessage']


@dataclass(frozen=True)
class ClientFirstMessage(ScramMessageBase):
    """
    The first authentication message from the client.

    PostgreSQL ignores the SCRAM username (it was already sent in the startup
    packet), so the bare message always carries an empty one: "n=,r=<nonce>".
    This message is only ever produced by the client, never parsed.
    """
    nonce: str

    kind = ScramMessageType.CLIENT_FIRST

    def __post_init__(self):
        if not isinstance(self.nonce, str):
            raise TypeError('Nonce must be string')

        if not self.nonce:
            raise ValueError('Must specify nonce')

        if not all(is_nonce_char(c) for c in self.nonce):
            raise ValueError('Nonce must be printable ASCII without commas')

    def to_rfc_string(self) -> str:
        return f'n=,r={self.nonce}'

    @property
    def bare(self) -> bytes:
        """client-first-message-bare, reused unmodified in the AuthMessage"""
        return self.encode()

    def initial_response(self) -> SASLInitialResponse:
        return sasl_initial_response(GS2_HEADER, self.bare)
