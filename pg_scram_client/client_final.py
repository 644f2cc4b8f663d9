# SPDX-License-Identifier: LGPL-3.0-or-later
# ClientFinalMessage implementation

from base64 import b64encode
from dataclasses import dataclass, replace
from typing import Self

from .common import ClientProof, GS2_HEADER, ScramMessageBase, ScramMessageType


__all__ = ['ClientFinalMessage']


@dataclass(frozen=True)
class ClientFinalMessage(ScramMessageBase):
    """
    After receiving the ServerFirstMessage, the client echoes the combined
    nonce and sends the ClientProof.

    Channel binding is never negotiated: `channel_binding` is always the
    base64 encoded GS2 header "n,,", i.e. "biws".
    """
    channel_binding: str  # base64 encoded
    nonce: str  # copy of nonce from ServerFirstMessage
    proof: ClientProof | None = None

    kind = ScramMessageType.CLIENT_FINAL

    @classmethod
    def without_binding(cls, nonce: str, channel_binding: bytes = GS2_HEADER) -> Self:
        return cls(channel_binding=b64encode(channel_binding).decode(), nonce=nonce)

    def without_proof(self) -> str:
        """client-final-message-without-proof"""
        return f'c={self.channel_binding},r={self.nonce}'

    def with_proof(self, proof: ClientProof) -> Self:
        return replace(self, proof=proof)

    def to_rfc_string(self) -> str:
        if self.proof is None:
            return self.without_proof()

        return f'{self.without_proof()},p={self.proof.value}'
