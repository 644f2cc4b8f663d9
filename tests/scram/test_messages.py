# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test encoding and decoding of the four SCRAM message forms."""

import unittest

import pg_scram_client as scram


class TestClientFirstMessage(unittest.TestCase):
    """Test ClientFirstMessage."""

    def test_bare(self):
        """Test client-first-message-bare has an empty username."""
        msg = scram.ClientFirstMessage(nonce="abc123")

        self.assertEqual(msg.bare, b"n=,r=abc123")
        self.assertEqual(str(msg), "n=,r=abc123")
        self.assertEqual(msg.kind, scram.ScramMessageType.CLIENT_FIRST)

    def test_initial_response(self):
        """Test that the initial response carries the GS2 header and mechanism."""
        resp = scram.ClientFirstMessage(nonce="abc123").initial_response()

        self.assertEqual(resp.mechanism, "SCRAM-SHA-256")
        self.assertEqual(resp.payload, b"n,,n=,r=abc123")

    def test_sasl_initial_response(self):
        """Test the functional form of the initial response."""
        resp = scram.sasl_initial_response(scram.GS2_HEADER, b"n=,r=xyz")

        self.assertEqual(resp, scram.SASLInitialResponse("SCRAM-SHA-256", b"n,,n=,r=xyz"))

    def test_invalid_nonce(self):
        """Test error handling for invalid nonces."""
        with self.assertRaises(ValueError):
            scram.ClientFirstMessage(nonce="")

        with self.assertRaises(ValueError):
            scram.ClientFirstMessage(nonce="abc,def")

        with self.assertRaises(TypeError):
            scram.ClientFirstMessage(nonce=b"abc")  # type: ignore

    def test_immutable(self):
        """Test that messages cannot be modified after construction."""
        msg = scram.ClientFirstMessage(nonce="abc123")

        with self.assertRaises(AttributeError):
            msg.nonce = "other"  # type: ignore


class TestServerFirstMessage(unittest.TestCase):
    """Test ServerFirstMessage parsing."""

    def test_decode_literal(self):
        """Test decoding a hand-built server-first-message."""
        msg = scram.ServerFirstMessage.decode(b"r=abc123,s=c2FsdA==,i=4096")

        self.assertEqual(msg.nonce, "abc123")
        self.assertEqual(msg.salt, b"salt")
        self.assertEqual(msg.iterations, 4096)
        self.assertEqual(msg.kind, scram.ScramMessageType.SERVER_FIRST)

    def test_encode_then_decode(self):
        """Test that an encoded message decodes to the same values."""
        msg = scram.ServerFirstMessage(nonce="cl%nt)srv$", salt=b"\x00\x01\xfe\xff", iterations=15000)

        decoded = scram.ServerFirstMessage.decode(msg.encode())

        self.assertEqual(decoded, msg)

    def test_raw_bytes_preserved(self):
        """Test that the exact received bytes are kept for the AuthMessage."""
        data = b"r=abc123,s=c2FsdA==,i=04096"
        msg = scram.ServerFirstMessage.decode(data)

        self.assertEqual(msg.iterations, 4096)
        self.assertEqual(msg.encode(), data)
        self.assertEqual(msg.to_rfc_string(), "r=abc123,s=c2FsdA==,i=4096")

    def test_try_decode_invalid_base64(self):
        """Test that invalid salt produces no value."""
        self.assertIsNone(scram.ServerFirstMessage.try_decode(b"r=bad,s=not_base64!,i=100"))

    def test_decode_invalid_base64(self):
        """Test that invalid salt raises a base64 ProtocolError naming the field."""
        with self.assertRaises(scram.ProtocolError) as ctx:
            scram.ServerFirstMessage.decode(b"r=bad,s=not_base64!,i=100")

        self.assertEqual(ctx.exception.code, scram.SCRAM_E_BASE64_ERROR)
        self.assertIn("'s'", str(ctx.exception))

    def test_decode_bad_padding(self):
        """Test that base64 with broken padding is rejected."""
        with self.assertRaises(scram.ProtocolError):
            scram.ServerFirstMessage.decode(b"r=abc,s=c2FsdA=,i=100")

    def test_malformed_messages(self):
        """Test that messages not matching the grammar are rejected."""
        cases = [
            b"",
            b"invalid",
            b"r=abc",
            b"r=abc,s=c2FsdA==",
            b"s=c2FsdA==,r=abc,i=4096",
            b"r=abc,s=c2FsdA==,i=4096,x=1",
            b"r=abc,r=abc,s=c2FsdA==,i=4096",
            b"r=,s=c2FsdA==,i=4096",
            b"r=ab c,s=c2FsdA==,i=4096",
            b"r=abc,s=c2FsdA==,i=0",
            b"r=abc,s=c2FsdA==,i=-1",
            b"r=abc,s=c2FsdA==,i=12x",
            "r=abc,s=c2FsdA==,i=\u0664".encode(),
            b"r=abc,s=c2FsdA==,i=4096,",
            b"\xff\xfe",
        ]
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(scram.ProtocolError):
                    scram.ServerFirstMessage.decode(data)

                self.assertIsNone(scram.ServerFirstMessage.try_decode(data))

    def test_mandatory_extension(self):
        """Test that a mandatory extension is reported as unsupported."""
        with self.assertRaises(scram.ProtocolError) as ctx:
            scram.ServerFirstMessage.decode(b"m=ext,r=abc,s=c2FsdA==,i=4096")

        self.assertIn("mandatory extension", str(ctx.exception))

    def test_diagnostic_names_field(self):
        """Test that errors identify the offending attribute."""
        with self.assertRaises(scram.ProtocolError) as ctx:
            scram.ServerFirstMessage.decode(b"r=abc,s=c2FsdA==,i=many")

        self.assertIn("'i'", str(ctx.exception))
        self.assertEqual(ctx.exception.code, scram.SCRAM_E_PARSE_ERROR)


class TestClientFinalMessage(unittest.TestCase):
    """Test ClientFinalMessage."""

    def test_without_proof(self):
        """Test client-final-message-without-proof uses the fixed channel binding."""
        msg = scram.ClientFinalMessage.without_binding("abc123xyz")

        self.assertEqual(msg.channel_binding, scram.GS2_NO_CHANNEL_BINDING)
        self.assertEqual(msg.without_proof(), "c=biws,r=abc123xyz")
        self.assertEqual(msg.encode(), b"c=biws,r=abc123xyz")

    def test_with_proof(self):
        """Test that the proof is appended for transmission."""
        msg = scram.ClientFinalMessage.without_binding("abc123xyz")
        final = msg.with_proof(scram.ClientProof("cHJvb2Y="))

        self.assertEqual(final.encode(), b"c=biws,r=abc123xyz,p=cHJvb2Y=")
        self.assertEqual(final.without_proof(), msg.without_proof())
        self.assertIsNone(msg.proof)
        self.assertEqual(final.kind, scram.ScramMessageType.CLIENT_FINAL)


class TestServerFinalMessage(unittest.TestCase):
    """Test ServerFinalMessage parsing."""

    def test_decode_literal(self):
        """Test decoding a hand-built server-final-message."""
        msg = scram.ServerFinalMessage.decode(b"v=dGVzdA==")

        self.assertEqual(msg.verifier, b"test")
        self.assertIsInstance(msg.verifier, scram.Verifier)
        self.assertEqual(msg.encode(), b"v=dGVzdA==")

    def test_unexpected_attribute(self):
        """Test that other content fails to decode."""
        self.assertIsNone(scram.ServerFinalMessage.try_decode(b"x=unexpected"))

        with self.assertRaises(scram.ProtocolError):
            scram.ServerFinalMessage.decode(b"x=unexpected")

    def test_malformed_messages(self):
        """Test that messages not matching the grammar are rejected."""
        for data in (b"", b"v=", b"v=dGVzdA==,x=1", b"v=dGVz!A==", b"dGVzdA==", b"\xff"):
            with self.subTest(data=data):
                with self.assertRaises(scram.ProtocolError):
                    scram.ServerFinalMessage.decode(data)

    def test_server_error(self):
        """Test that a server-error attribute is an authentication failure."""
        with self.assertRaises(scram.AuthenticationFailed) as ctx:
            scram.ServerFinalMessage.decode(b"e=invalid-proof")

        self.assertIn("invalid-proof", str(ctx.exception))
        self.assertIsNone(scram.ServerFinalMessage.try_decode(b"e=invalid-proof"))


class TestMessageUnion(unittest.TestCase):
    """Test that all messages share the common interface."""

    def test_common_base(self):
        """Test the four forms are ScramMessageBase variants with distinct kinds."""
        messages = [
            scram.ClientFirstMessage(nonce="abc"),
            scram.ServerFirstMessage(nonce="abcdef", salt=b"salt", iterations=1),
            scram.ClientFinalMessage.without_binding("abcdef"),
            scram.ServerFinalMessage(verifier=scram.Verifier(b"test")),
        ]

        for msg in messages:
            self.assertIsInstance(msg, scram.ScramMessageBase)
            self.assertEqual(msg.encode(), str(msg).encode())

        self.assertEqual(len({msg.kind for msg in messages}), 4)

    def test_message_alias(self):
        """Test that ScramMessage covers exactly the four forms."""
        self.assertIsInstance(scram.ClientFirstMessage(nonce="abc"), scram.ScramMessage)
        self.assertIsInstance(scram.ServerFinalMessage(verifier=scram.Verifier(b"test")), scram.ScramMessage)
        self.assertNotIsInstance(scram.ClientProof("dGVzdA=="), scram.ScramMessage)
        self.assertEqual(len(scram.ScramMessage.__args__), 4)


if __name__ == '__main__':
    unittest.main()
