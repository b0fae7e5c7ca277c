"""
algorand.crypto
===============

Hash and signature primitives used by address derivation and envelopes.

- SHA-512/256 (FIPS 180-4 truncated SHA-512 with its own IV).
- Ed25519 through the `cryptography` package.
"""

from .hash import checksum, sha512_256
from .signature import (
    PK_SIZE,
    SIG_SIZE,
    SK_SIZE,
    PublicKey,
    SecretKey,
    Signature,
    keypair,
    pk_from_bytes,
    sig_from_bytes,
    sign,
    sk_from_bytes,
    sk_from_text,
    sk_to_text,
    to_public,
    verify,
)

__all__ = [
    "sha512_256",
    "checksum",
    "PK_SIZE",
    "SK_SIZE",
    "SIG_SIZE",
    "PublicKey",
    "SecretKey",
    "Signature",
    "keypair",
    "to_public",
    "sign",
    "verify",
    "pk_from_bytes",
    "sk_from_bytes",
    "sig_from_bytes",
    "sk_to_text",
    "sk_from_text",
]
