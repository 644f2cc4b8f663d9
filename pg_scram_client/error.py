# SPDX-License-Identifier: LGPL-3.0-or-later
# SCRAM exception classes

SCRAM_E_INVALID_REQUEST = 1
SCRAM_E_SASLPREP_ERROR = 2
SCRAM_E_CRYPTO_ERROR = 3
SCRAM_E_BASE64_ERROR = 4
SCRAM_E_PARSE_ERROR = 5
SCRAM_E_AUTH_FAILED = 7
SCRAM_E_FAULT = 8

ERROR_CODE_NAMES = {
    SCRAM_E_INVALID_REQUEST: "SCRAM_E_INVALID_REQUEST",
    SCRAM_E_SASLPREP_ERROR: "SCRAM_E_SASLPREP_ERROR",
    SCRAM_E_CRYPTO_ERROR: "SCRAM_E_CRYPTO_ERROR",
    SCRAM_E_BASE64_ERROR: "SCRAM_E_BASE64_ERROR",
    SCRAM_E_PARSE_ERROR: "SCRAM_E_PARSE_ERROR",
    SCRAM_E_AUTH_FAILED: "SCRAM_E_AUTH_FAILED",
    SCRAM_E_FAULT: "SCRAM_E_FAULT",
}


class ScramError(RuntimeError):
    """
    Base class for all errors raised during a SCRAM exchange.

    Every error is terminal for the session that raised it.

    Attributes:
        code: Integer error code (one of SCRAM_E_* constants)
    """

    default_code = SCRAM_E_FAULT

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = self.default_code if code is None else code

    def __repr__(self):
        code_name = ERROR_CODE_NAMES.get(self.code, "UNKNOWN_ERROR")
        return f"{type(self).__name__}({code_name}: {super().__str__()})"


class NormalizationError(ScramError):
    """The password contains characters prohibited by SASLprep."""
    default_code = SCRAM_E_SASLPREP_ERROR


class ProtocolError(ScramError):
    """A message received from the server does not match its grammar."""
    default_code = SCRAM_E_PARSE_ERROR


class LengthMismatch(ScramError):
    """Two keys or signatures of unequal length were combined.

    This indicates a fault in the local primitives, never in remote input.
    """
    default_code = SCRAM_E_CRYPTO_ERROR


class AuthenticationFailed(ScramError):
    """The server signature did not match or the server rejected the proof."""
    default_code = SCRAM_E_AUTH_FAILED


__all__ = [
    'ScramError',
    'NormalizationError',
    'ProtocolError',
    'LengthMismatch',
    'AuthenticationFailed',
    'ERROR_CODE_NAMES',
    'SCRAM_E_INVALID_REQUEST',
    'SCRAM_E_SASLPREP_ERROR',
    'SCRAM_E_CRYPTO_ERROR',
    'SCRAM_E_BASE64_ERROR',
    'SCRAM_E_PARSE_ERROR',
    'SCRAM_E_AUTH_FAILED',
    'SCRAM_E_FAULT',
]
