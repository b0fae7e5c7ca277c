"""
algorand.crypto.hash
====================

SHA-512/256 is the ledger-wide digest: addresses, program addresses, checksums
and transaction ids all use it. `hashlib` does not expose it portably (it depends
on the linked OpenSSL), so the `cryptography` backend is used.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes

DIGEST_SIZE = 32
CHECKSUM_SIZE = 4


def sha512_256(*parts: bytes) -> bytes:
    """SHA-512/256 of the concatenation of `parts`."""
    h = hashes.Hash(hashes.SHA512_256())
    for p in parts:
        h.update(bytes(p))
    return h.finalize()


def checksum(data: bytes) -> bytes:
    """Last four bytes of SHA-512/256(data), as appended to address text."""
    return sha512_256(data)[-CHECKSUM_SIZE:]


__all__ = ["DIGEST_SIZE", "CHECKSUM_SIZE", "sha512_256", "checksum"]
