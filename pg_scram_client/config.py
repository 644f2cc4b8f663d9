# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants for SCRAM-SHA-256 client authentication."""

# Mechanism name sent in the outer protocol's mechanism negotiation field
SCRAM_MECHANISM = 'SCRAM-SHA-256'

# Sizes (in bytes)
SCRAM_NONCE_SIZE = 32  # raw client nonce before base64 encoding
SCRAM_KEY_SIZE = 32  # SHA-256 digest / PBKDF2 output

# PBKDF2 iteration bounds. The upper bound keeps a malicious or misconfigured
# server from stalling the client in key derivation.
SCRAM_MIN_ITERS = 1
SCRAM_MAX_ITERS = 5000000

# GS2 header: "n" (client does not support channel binding), no authzid
GS2_HEADER = b'n,,'
GS2_NO_CHANNEL_BINDING = 'biws'  # base64 of "n,,"
