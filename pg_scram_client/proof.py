# SPDX-License-Identifier: LGPL-3.0-or-later
# ClientProof / ServerSignature computation and verification

from base64 import b64encode

from .common import ClientProof, Verifier
from .error import AuthenticationFailed
from .saslprep import saslprep
from .scram_crypto import (
    scram_constant_time_compare,
    scram_create_auth_message,
    scram_create_client_key,
    scram_create_server_key,
    scram_create_stored_key,
    scram_hi,
    scram_hmac_sha256,
    scram_xor_bytes,
)
from .server_final import ServerFinalMessage


__all__ = ['compute_proof_and_verifier', 'verify_server_signature']


def compute_proof_and_verifier(
    password: str,
    salt: bytes,
    iterations: int,
    client_first_bare: bytes,
    server_first_bytes: bytes,
    client_final_without_proof_bytes: bytes,
) -> tuple[ClientProof, Verifier]:
    """
    RFC 5802 section 3 (SCRAM Algorithm Overview):

    SaltedPassword  := Hi(Normalize(password), salt, i)
    ClientKey       := HMAC(SaltedPassword, "Client Key")
    StoredKey       := H(ClientKey)
    AuthMessage     := client-first-message-bare + "," +
                       server-first-message + "," +
                       client-final-message-without-proof
    ClientSignature := HMAC(StoredKey, AuthMessage)
    ClientProof     := ClientKey XOR ClientSignature
    ServerKey       := HMAC(SaltedPassword, "Server Key")
    ServerSignature := HMAC(ServerKey, AuthMessage)

    The message arguments must be the exact bytes sent and received.

    Returns:
        The base64 encoded ClientProof and the expected ServerSignature

    Raises:
        NormalizationError: If the password is rejected by SASLprep
    """
    salted_password = scram_hi(saslprep(password), salt, iterations)

    client_key = scram_create_client_key(salted_password)
    stored_key = scram_create_stored_key(client_key)

    auth_message = scram_create_auth_message(
        client_first_bare,
        server_first_bytes,
        client_final_without_proof_bytes,
    )

    client_signature = scram_hmac_sha256(stored_key, auth_message)
    client_proof = scram_xor_bytes(client_key, client_signature)

    server_key = scram_create_server_key(salted_password)
    server_signature = scram_hmac_sha256(server_key, auth_message)

    return ClientProof(b64encode(client_proof).decode()), Verifier(server_signature)


def verify_server_signature(expected: Verifier, server_final: ServerFinalMessage) -> None:
    """
    Verify that the server has access to the ServerKey. See RFC 5802 section 3.

    Raises:
        AuthenticationFailed: If the received signature does not match
    """
    if not scram_constant_time_compare(expected, server_final.verifier):
        raise AuthenticationFailed('Server signature verification failed')
