# SPDX-License-Identifier: LGPL-3.0-or-later
# ServerFinalMessage implementation

from base64 import b64encode
from dataclasses import dataclass
from typing import Self

from .common import ScramMessageBase, ScramMessageType, Verifier, decode_base64, decode_text, parse_attributes
from .error import AuthenticationFailed, ProtocolError


__all__ = ['ServerFinalMessage']


@dataclass(frozen=True)
class ServerFinalMessage(ScramMessageBase):
    """
    Final message from the server. It carries the ServerSignature that the
    client uses to verify that the server has access to the user's credentials.

    Format: v=<base64 signature>
    """
    verifier: Verifier

    kind = ScramMessageType.SERVER_FINAL

    def to_rfc_string(self) -> str:
        return f'v={b64encode(self.verifier).decode()}'

    @classmethod
    def decode(cls, data: bytes) -> Self:
        """Parse a server-final-message.

        Raises:
            AuthenticationFailed: the server sent "e=<server-error-value>"
            ProtocolError: anything other than "v=<base64>"
        """
        kind = ScramMessageType.SERVER_FINAL
        text = decode_text(data, kind)
        if text.startswith('e='):
            raise AuthenticationFailed(f'Server rejected authentication: {text[2:]}')

        attrs = parse_attributes(text, kind, ('v',))
        return cls(verifier=Verifier(decode_base64(attrs['v'], kind, 'v')))

    @classmethod
    def try_decode(cls, data: bytes) -> Self | None:
        """Same as `decode` but returns None for any content other than "v=<base64>"."""
        try:
            return cls.decode(data)
        except (ProtocolError, AuthenticationFailed):
            return None
