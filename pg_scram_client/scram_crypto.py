# SPDX-License-Identifier: LGPL-3.0-or-later
# SCRAM-SHA-256 cryptographic operations and nonce generation

import hmac
import hashlib
import secrets

from base64 import b64encode
from collections.abc import Callable

from .config import SCRAM_KEY_SIZE, SCRAM_MIN_ITERS, SCRAM_NONCE_SIZE
from .error import LengthMismatch, ScramError, SCRAM_E_CRYPTO_ERROR


__all__ = [
    'CryptoDatum',
    'NonceGenerator',
    'generate_nonce',
    'scram_hi',
    'scram_h',
    'scram_hmac_sha256',
    'scram_create_client_key',
    'scram_create_server_key',
    'scram_create_stored_key',
    'scram_xor_bytes',
    'scram_constant_time_compare',
    'scram_create_auth_message',
]


class CryptoDatum(bytes):
    """bytes holding key material. The repr does not reveal the contents."""

    def __repr__(self):
        return f'{type(self).__name__}({hex(id(self))})'


class NonceGenerator:
    """
    Produces client nonces: `size` random bytes, base64 encoded.

    The randomness provider is injectable so tests can substitute a
    deterministic source. It must return exactly the requested number of
    bytes or raise; there is no fallback to a weaker source.
    """

    def __init__(self, randbytes: Callable[[int], bytes] = secrets.token_bytes, size: int = SCRAM_NONCE_SIZE):
        if size <= 0:
            raise ValueError('Nonce size must be positive')

        self.randbytes = randbytes
        self.size = size

    def fresh_nonce(self) -> str:
        data = self.randbytes(self.size)
        if len(data) != self.size:
            raise ScramError(
                f'Randomness provider returned {len(data)} bytes, expected {self.size}',
                SCRAM_E_CRYPTO_ERROR
            )

        return b64encode(data).decode()


_default_nonce_generator = NonceGenerator()


def generate_nonce() -> str:
    """Generate a base64 encoded 32 byte nonce using the process-wide secure source."""
    return _default_nonce_generator.fresh_nonce()


def scram_hi(password: str | bytes, salt: bytes, iterations: int) -> CryptoDatum:
    """
    Perform PBKDF2-HMAC-SHA256 key derivation as specified in RFC 5802.

    This implements the Hi(str, salt, i) function from RFC 5802 Section 2.2.
    The cost scales linearly with `iterations` and nothing is cached.

    Args:
        password: Normalized password. Strings are UTF-8 encoded.
        salt: Salt received from the server
        iterations: Number of PBKDF2 iterations

    Returns:
        CryptoDatum containing the 32 byte SaltedPassword

    Raises:
        TypeError: If iterations is not an integer
        ValueError: If iterations is not positive or salt is empty
    """
    if isinstance(password, str):
        password = password.encode()

    if not isinstance(iterations, int) or isinstance(iterations, bool):
        raise TypeError('Iterations must be an integer')

    if iterations < SCRAM_MIN_ITERS:
        raise ValueError(f'Iterations must be at least {SCRAM_MIN_ITERS}')

    if not salt:
        raise ValueError('Invalid salt parameter')

    derived_key = hashlib.pbkdf2_hmac('sha256', bytes(password), bytes(salt), iterations, SCRAM_KEY_SIZE)
    return CryptoDatum(derived_key)


def scram_h(data: bytes) -> CryptoDatum:
    """SHA-256 hash function. Named after H() in RFC 5802 Section 2.2."""
    return CryptoDatum(hashlib.sha256(bytes(data)).digest())


def scram_hmac_sha256(key: bytes, data: bytes) -> CryptoDatum:
    """HMAC-SHA-256. Named after HMAC() in RFC 5802 Section 2.2."""
    return CryptoDatum(hmac.digest(bytes(key), bytes(data), hashlib.sha256))


def scram_create_client_key(salted_password: bytes) -> CryptoDatum:
    """ClientKey := HMAC(SaltedPassword, "Client Key")"""
    return scram_hmac_sha256(salted_password, b'Client Key')


def scram_create_server_key(salted_password: bytes) -> CryptoDatum:
    """ServerKey := HMAC(SaltedPassword, "Server Key")"""
    return scram_hmac_sha256(salted_password, b'Server Key')


def scram_create_stored_key(client_key: bytes) -> CryptoDatum:
    """StoredKey := H(ClientKey)"""
    return scram_h(client_key)


def scram_xor_bytes(a: bytes, b: bytes) -> CryptoDatum:
    """
    Byte-wise XOR of two equal length byte strings.

    Used for ClientProof := ClientKey XOR ClientSignature.

    Raises:
        LengthMismatch: If the sizes don't match
    """
    if len(a) != len(b):
        raise LengthMismatch(f'Byte array sizes do not match: {len(a)} != {len(b)}')

    return CryptoDatum(bytes(x ^ y for x, y in zip(bytes(a), bytes(b))))


def scram_constant_time_compare(a: bytes, b: bytes) -> bool:
    """Constant-time comparison of two byte strings via hmac.compare_digest."""
    return hmac.compare_digest(bytes(a), bytes(b))


def scram_create_auth_message(
    client_first_bare: bytes,
    server_first_msg: bytes,
    client_final_without_proof: bytes
) -> bytes:
    """
    Create SCRAM authentication message as specified in RFC 5802 Section 3:

    AuthMessage := client-first-message-bare + "," +
                   server-first-message + "," +
                   client-final-message-without-proof

    All three parts must be the exact wire bytes; any re-serialization
    difference breaks both signatures.
    """
    return b','.join((bytes(client_first_bare), bytes(server_first_msg), bytes(client_final_without_proof)))
