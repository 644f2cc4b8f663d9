# SPDX-License-Identifier: LGPL-3.0-or-later
# ServerFirstMessage implementation

from base64 import b64encode
from dataclasses import dataclass, field
from typing import Self

from .common import (
    ScramMessageBase,
    ScramMessageType,
    decode_base64,
    decode_text,
    is_nonce_char,
    parse_attributes,
)
from .config import SCRAM_MIN_ITERS
from .error import ProtocolError


__all__ = ['ServerFirstMessage']


@dataclass(frozen=True)
class ServerFirstMessage(ScramMessageBase):
    """
    The server response to the client first message.

    Format: r=<nonce>,s=<base64 salt>,i=<iterations>

    The nonce is the client nonce with the server nonce appended to it. `raw`
    keeps the exact bytes received since they are part of the AuthMessage.
    """
    nonce: str
    salt: bytes
    iterations: int
    raw: bytes | None = field(default=None, compare=False, repr=False)

    kind = ScramMessageType.SERVER_FIRST

    def to_rfc_string(self) -> str:
        salt_b64 = b64encode(self.salt).decode()
        return f'r={self.nonce},s={salt_b64},i={self.iterations}'

    def encode(self) -> bytes:
        if self.raw is not None:
            return self.raw

        return super().encode()

    @classmethod
    def decode(cls, data: bytes) -> Self:
        """Parse a server-first-message.

        Raises:
            ProtocolError: naming the first offending attribute
        """
        kind = ScramMessageType.SERVER_FIRST
        attrs = parse_attributes(decode_text(data, kind), kind, ('r', 's', 'i'))

        nonce = attrs['r']
        if bad := [c for c in nonce if not is_nonce_char(c)]:
            raise ProtocolError(f'{kind}: attribute \'r\' contains invalid character {bad[0]!r}')

        salt = decode_base64(attrs['s'], kind, 's')

        iterations = attrs['i']
        if not (iterations.isascii() and iterations.isdigit()):
            raise ProtocolError(f'{kind}: attribute \'i\' is not a decimal number: {iterations!r}')

        try:
            iterations = int(iterations)
        except ValueError:
            raise ProtocolError(f'{kind}: attribute \'i\' is out of range') from None

        if iterations < SCRAM_MIN_ITERS:
            raise ProtocolError(f'{kind}: attribute \'i\' must be at least {SCRAM_MIN_ITERS}')

        return cls(nonce=nonce, salt=salt, iterations=iterations, raw=bytes(data))

    @classmethod
    def try_decode(cls, data: bytes) -> Self | None:
        """Same as `decode` but returns None instead of raising."""
        try:
            return cls.decode(data)
        except ProtocolError:
            return None
