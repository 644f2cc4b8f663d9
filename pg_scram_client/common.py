# SPDX-License-Identifier: LGPL-3.0-or-later
# Types shared by the SCRAM message classes

import binascii
import re

from abc import ABC, abstractmethod
from base64 import b64decode
from dataclasses import dataclass
from enum import StrEnum

from .config import GS2_HEADER, GS2_NO_CHANNEL_BINDING, SCRAM_MECHANISM
from .error import ProtocolError, SCRAM_E_BASE64_ERROR
from .scram_crypto import CryptoDatum


__all__ = [
    'GS2_HEADER',
    'GS2_NO_CHANNEL_BINDING',
    'ClientProof',
    'SASLInitialResponse',
    'SASLResponse',
    'ScramMessageBase',
    'ScramMessageType',
    'Verifier',
]


_BASE64_RE = re.compile(r'[A-Za-z0-9+/]+={0,2}')


class ScramMessageType(StrEnum):
    CLIENT_FIRST = 'client-first-message'
    SERVER_FIRST = 'server-first-message'
    CLIENT_FINAL = 'client-final-message'
    SERVER_FINAL = 'server-final-message'


class Verifier(CryptoDatum):
    """ServerSignature := HMAC(ServerKey, AuthMessage), raw bytes."""


@dataclass(frozen=True)
class ClientProof:
    value: str  # base64 encoded ClientKey XOR ClientSignature


@dataclass(frozen=True)
class SASLInitialResponse:
    """Payload of the outer protocol's initial SASL response. Framing is the caller's job."""
    mechanism: str
    payload: bytes


@dataclass(frozen=True)
class SASLResponse:
    """Payload of the outer protocol's SASL response. Framing is the caller's job."""
    payload: bytes


class ScramMessageBase(ABC):
    """One of the four SCRAM message forms exchanged during authentication."""
    kind: ScramMessageType

    @abstractmethod
    def to_rfc_string(self) -> str:
        """Convert the message into the string specified in RFC 5802."""

    def encode(self) -> bytes:
        return self.to_rfc_string().encode()

    def __str__(self):
        return self.to_rfc_string()


def is_nonce_char(c: str) -> bool:
    # RFC 5802 "printable": %x21-2B / %x2D-7E
    return '\x21' <= c <= '\x7e' and c != ','


def sasl_initial_response(channel_binding: bytes, client_first_bare: bytes) -> SASLInitialResponse:
    """Wrap client-first-message-bare with the GS2 header for the initial response."""
    return SASLInitialResponse(SCRAM_MECHANISM, bytes(channel_binding) + bytes(client_first_bare))


def decode_text(data: bytes, kind: ScramMessageType) -> str:
    try:
        text = bytes(data).decode()
    except UnicodeDecodeError:
        raise ProtocolError(f'{kind}: message is not valid UTF-8') from None

    if not text:
        raise ProtocolError(f'{kind}: empty message')

    return text


def parse_attributes(text: str, kind: ScramMessageType, expected: tuple[str, ...]) -> dict[str, str]:
    """
    Split `text` into comma separated `key=value` pairs.

    The keys must appear exactly as listed in `expected` and in that order.
    Each offending attribute is reported individually in the ProtocolError.
    """
    attrs = {}
    for position, part in enumerate(text.split(',')):
        key, sep, value = part.partition('=')
        if not sep or len(key) != 1:
            raise ProtocolError(f'{kind}: malformed attribute {part!r} at position {position}')

        if key == 'm':
            raise ProtocolError(f'{kind}: mandatory extension {part!r} is not supported')

        if position >= len(expected):
            raise ProtocolError(f'{kind}: unexpected attribute {key!r} at position {position}')

        if key != expected[position]:
            raise ProtocolError(f'{kind}: expected attribute {expected[position]!r} at position {position}, '
                                f'got {key!r}')

        if not value:
            raise ProtocolError(f'{kind}: empty value for attribute {key!r}')

        attrs[key] = value

    if missing := expected[len(attrs):]:
        raise ProtocolError(f'{kind}: missing attribute(s) {", ".join(missing)}')

    return attrs


def decode_base64(value: str, kind: ScramMessageType, field: str) -> bytes:
    if not _BASE64_RE.fullmatch(value):
        raise ProtocolError(f'{kind}: attribute {field!r} contains non-base64 characters', SCRAM_E_BASE64_ERROR)

    try:
        return b64decode(value, validate=True)
    except binascii.Error as e:
        raise ProtocolError(f'{kind}: invalid base64 in attribute {field!r}: {e}', SCRAM_E_BASE64_ERROR) from None
