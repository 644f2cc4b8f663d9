# SPDX-License-Identifier: LGPL-3.0-or-later
# SCRAM-SHA-256 client session as spoken by PostgreSQL-compatible servers.
#
# Details of the authentication exchange between client and server
# are in RFC5802 Section 5. Channel binding is not supported and the
# username in client-first-message is always empty.

import logging

from enum import StrEnum

from .client_final import ClientFinalMessage
from .client_first import ClientFirstMessage
from .common import GS2_HEADER, SASLInitialResponse, SASLResponse, Verifier
from .config import SCRAM_MAX_ITERS
from .error import ProtocolError, ScramError, SCRAM_E_INVALID_REQUEST
from .proof import compute_proof_and_verifier, verify_server_signature
from .scram_crypto import NonceGenerator
from .server_final import ServerFinalMessage
from .server_first import ServerFirstMessage

logger = logging.getLogger(__name__)


__all__ = ['ScramClient', 'ScramState', 'sasl_challenge']


class ScramState(StrEnum):
    START = 'START'
    SENT_INITIAL = 'SENT_INITIAL'  # awaiting server-first-message
    SENT_FINAL = 'SENT_FINAL'  # awaiting server-final-message
    AUTHENTICATED = 'AUTHENTICATED'
    FAILED = 'FAILED'


def sasl_challenge(
    password: str,
    channel_binding: bytes,
    server_first: ServerFirstMessage,
    client_first_bare: bytes,
    server_first_bytes: bytes,
) -> tuple[SASLResponse, Verifier]:
    """
    Answer the server-first-message: build client-final-message carrying the
    ClientProof and return it with the ServerSignature we expect back.
    """
    client_final = ClientFinalMessage.without_binding(server_first.nonce, channel_binding)
    proof, expected_verifier = compute_proof_and_verifier(
        password,
        server_first.salt,
        server_first.iterations,
        client_first_bare,
        server_first_bytes,
        client_final.without_proof().encode(),
    )
    return SASLResponse(client_final.with_proof(proof).encode()), expected_verifier


class ScramClient:
    """
    Client side of a single SCRAM-SHA-256 authentication attempt.

    The caller owns the transport: it sends `initial_response()`, feeds the
    server reply to `handle_server_first()`, sends the returned payload and
    finally feeds the server reply to `handle_server_final()`. Any error is
    terminal; a new attempt requires a new instance.
    """
    def __init__(
        self,
        password: str,
        *,
        nonce_generator: NonceGenerator | None = None,
        max_iterations: int = SCRAM_MAX_ITERS,
    ):
        if not isinstance(password, str):
            raise TypeError('Password must be string')

        self.__password = password
        self.nonce_generator = nonce_generator or NonceGenerator()
        self.max_iterations = max_iterations
        self.state = ScramState.START

        # We need to keep a copy of the first message we send to the server since it's
        # used to generate the AuthMessage that's part of the ClientSignature / ClientProof
        # in the final client message
        self.client_first_message = None
        self.server_first_message = None
        self.__expected_verifier = None

    @property
    def authenticated(self) -> bool:
        return self.state == ScramState.AUTHENTICATED

    def __check_state(self, expected: ScramState):
        if self.state != expected:
            raise ScramError(
                f'{self.state}: invalid session state, expected {expected}',
                SCRAM_E_INVALID_REQUEST
            )

    def __fail(self, exc: Exception):
        logger.warning('SCRAM authentication failed in state %s: %r', self.state, exc)
        self.state = ScramState.FAILED
        self.__password = None
        self.__expected_verifier = None

    def initial_response(self) -> SASLInitialResponse:
        """Generate the client-first-message wrapped for the initial SASL response."""
        self.__check_state(ScramState.START)

        try:
            client_first = ClientFirstMessage(nonce=self.nonce_generator.fresh_nonce())
        except Exception as e:
            self.__fail(e)
            raise

        self.client_first_message = client_first
        self.state = ScramState.SENT_INITIAL
        logger.debug('Sending SCRAM client-first-message')
        return self.client_first_message.initial_response()

    def handle_server_first(self, data: bytes) -> SASLResponse:
        """Consume server-first-message and produce the client-final-message payload.

        Raises:
            ProtocolError: malformed message or nonce not extending ours
            NormalizationError: password rejected by SASLprep
            ScramError: iteration count above `max_iterations`

        Any other exception raised while answering also fails the session.
        """
        self.__check_state(ScramState.SENT_INITIAL)
        try:
            server_first = ServerFirstMessage.decode(data)
            client_nonce = self.client_first_message.nonce
            if not server_first.nonce.startswith(client_nonce):
                raise ProtocolError('Server nonce does not begin with the client nonce')

            # Checked before Hi() so the derivation cost stays bounded
            if server_first.iterations > self.max_iterations:
                raise ScramError(
                    f'{server_first.iterations}: exceeds maximum of {self.max_iterations}',
                    SCRAM_E_INVALID_REQUEST
                )

            response, self.__expected_verifier = sasl_challenge(
                self.__password,
                GS2_HEADER,
                server_first,
                self.client_first_message.bare,
                server_first.encode(),
            )
        except Exception as e:
            self.__fail(e)
            raise

        self.server_first_message = server_first
        self.__password = None
        self.state = ScramState.SENT_FINAL
        logger.debug('Sending SCRAM client-final-message (%d iterations)', server_first.iterations)
        return response

    def handle_server_final(self, data: bytes) -> None:
        """Verify server-final-message. This is where we confirm that the server
        has access to the ServerKey. See RFC5802 section 3.

        Raises:
            ProtocolError: malformed message
            AuthenticationFailed: server reported an error or signature mismatch
        """
        self.__check_state(ScramState.SENT_FINAL)
        try:
            verify_server_signature(self.__expected_verifier, ServerFinalMessage.decode(data))
        except Exception as e:
            self.__fail(e)
            raise

        self.__expected_verifier = None
        self.state = ScramState.AUTHENTICATED
        logger.debug('SCRAM server signature verified')
