# SPDX-License-Identifier: LGPL-3.0-or-later
# Client side SCRAM-SHA-256 (RFC 5802 / RFC 7677) as used by PostgreSQL

from .error import (
    ScramError,
    NormalizationError,
    ProtocolError,
    LengthMismatch,
    AuthenticationFailed,
    SCRAM_E_INVALID_REQUEST,
    SCRAM_E_SASLPREP_ERROR,
    SCRAM_E_CRYPTO_ERROR,
    SCRAM_E_BASE64_ERROR,
    SCRAM_E_PARSE_ERROR,
    SCRAM_E_AUTH_FAILED,
    SCRAM_E_FAULT,
)

from .config import (
    SCRAM_MECHANISM,
    SCRAM_NONCE_SIZE,
    SCRAM_KEY_SIZE,
    SCRAM_MIN_ITERS,
    SCRAM_MAX_ITERS,
    GS2_HEADER,
    GS2_NO_CHANNEL_BINDING,
)

from .saslprep import saslprep

from .scram_crypto import (
    CryptoDatum,
    NonceGenerator,
    generate_nonce,
    scram_hi,
    scram_h,
    scram_hmac_sha256,
    scram_create_client_key,
    scram_create_server_key,
    scram_create_stored_key,
    scram_xor_bytes,
    scram_constant_time_compare,
    scram_create_auth_message,
)

from .common import (
    ClientProof,
    SASLInitialResponse,
    SASLResponse,
    ScramMessageBase,
    ScramMessageType,
    Verifier,
    sasl_initial_response,
)

from .client_first import ClientFirstMessage
from .server_first import ServerFirstMessage
from .client_final import ClientFinalMessage
from .server_final import ServerFinalMessage

from .proof import compute_proof_and_verifier, verify_server_signature
from .session import ScramClient, ScramState, sasl_challenge
from .exchange import AsyncScramTransport, ScramTransport, async_authenticate, authenticate


ScramMessage = ClientFirstMessage | ServerFirstMessage | ClientFinalMessage | ServerFinalMessage


__all__ = [
    # Session
    'ScramClient',
    'ScramState',
    'ScramTransport',
    'AsyncScramTransport',
    'authenticate',
    'async_authenticate',
    'sasl_initial_response',
    'sasl_challenge',

    # Core types
    'CryptoDatum',
    'ClientProof',
    'Verifier',
    'SASLInitialResponse',
    'SASLResponse',
    'NonceGenerator',

    # Exceptions
    'ScramError',
    'NormalizationError',
    'ProtocolError',
    'LengthMismatch',
    'AuthenticationFailed',

    # Message classes
    'ScramMessage',
    'ScramMessageBase',
    'ScramMessageType',
    'ClientFirstMessage',
    'ServerFirstMessage',
    'ClientFinalMessage',
    'ServerFinalMessage',

    # Proof computation and verification
    'compute_proof_and_verifier',
    'verify_server_signature',

    # Normalization and cryptographic functions
    'saslprep',
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

    # Error codes
    'SCRAM_E_INVALID_REQUEST',
    'SCRAM_E_SASLPREP_ERROR',
    'SCRAM_E_CRYPTO_ERROR',
    'SCRAM_E_BASE64_ERROR',
    'SCRAM_E_PARSE_ERROR',
    'SCRAM_E_AUTH_FAILED',
    'SCRAM_E_FAULT',

    # Constants
    'SCRAM_MECHANISM',
    'SCRAM_NONCE_SIZE',
    'SCRAM_KEY_SIZE',
    'SCRAM_MIN_ITERS',
    'SCRAM_MAX_ITERS',
    'GS2_HEADER',
    'GS2_NO_CHANNEL_BINDING',
]
