"""
algorand.crypto.signature
=========================

Ed25519 adapter over `cryptography`.

Keys and signatures are small immutable wrappers so that a 32-byte public key
cannot be confused with a 32-byte seed or an address. Import helpers
(`*_from_bytes`, `sk_from_text`) return ``None`` on malformed input and `verify`
returns ``False`` on any failure: they are meant to sit in front of untrusted
bytes without try/except at every call site.

Text form of a secret key is base64(seed ‖ public key), 64 raw bytes.
"""

from __future__ import annotations

import base64
import binascii
import secrets
from dataclasses import dataclass, field
from typing import Callable, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..errors import EntropyError

PK_SIZE = 32
SK_SIZE = 32
SIG_SIZE = 64

RandomSource = Callable[[int], bytes]

# Curve constants for the on-curve check in `pk_from_bytes`.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)


@dataclass(frozen=True)
class PublicKey:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != PK_SIZE:
            raise ValueError(f"public key must be {PK_SIZE} bytes")
        object.__setattr__(self, "raw", bytes(self.raw))

    def __bytes__(self) -> bytes:
        return self.raw

    def is_nonzero(self) -> bool:
        return any(self.raw)

    def hex(self) -> str:
        return self.raw.hex()


@dataclass(frozen=True)
class SecretKey:
    """Ed25519 seed plus the public key derived from it. Never printed."""

    seed: bytes = field(repr=False)
    public: PublicKey

    def __post_init__(self) -> None:
        if not isinstance(self.seed, (bytes, bytearray)) or len(self.seed) != SK_SIZE:
            raise ValueError(f"secret key seed must be {SK_SIZE} bytes")
        object.__setattr__(self, "seed", bytes(self.seed))

    @classmethod
    def from_seed(cls, seed: bytes) -> "SecretKey":
        priv = Ed25519PrivateKey.from_private_bytes(bytes(seed))
        pub = priv.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return cls(seed=bytes(seed), public=PublicKey(pub))

    def _private(self) -> Ed25519PrivateKey:
        return Ed25519PrivateKey.from_private_bytes(self.seed)


@dataclass(frozen=True)
class Signature:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != SIG_SIZE:
            raise ValueError(f"signature must be {SIG_SIZE} bytes")
        object.__setattr__(self, "raw", bytes(self.raw))

    def __bytes__(self) -> bytes:
        return self.raw

    def is_nonzero(self) -> bool:
        # A signature is always emitted, even an all-zero one.
        return True

    def hex(self) -> str:
        return self.raw.hex()


# ----------------------------
# Key generation
# ----------------------------


def keypair(random_source: Optional[RandomSource] = None) -> SecretKey:
    """
    Generate a fresh secret key from `random_source(32)` (default: `secrets.token_bytes`).
    Its public half is `to_public(sk)`.

    Raises EntropyError if the source fails or returns the wrong number of bytes.
    """
    source = random_source or secrets.token_bytes
    try:
        seed = source(SK_SIZE)
    except Exception as e:
        raise EntropyError("random source failed", source=getattr(source, "__name__", None)) from e
    if not isinstance(seed, (bytes, bytearray)) or len(seed) != SK_SIZE:
        raise EntropyError(
            "random source returned the wrong number of bytes",
            expected=SK_SIZE,
            got=len(seed) if isinstance(seed, (bytes, bytearray)) else None,
        )
    return SecretKey.from_seed(bytes(seed))


def to_public(sk: SecretKey) -> PublicKey:
    return sk.public


# ----------------------------
# Sign / verify
# ----------------------------


def sign(sk: SecretKey, message: bytes) -> Signature:
    """Deterministic Ed25519 signature (RFC 8032) over `message`."""
    return Signature(sk._private().sign(bytes(message)))


def verify(pk: PublicKey, message: bytes, sig: Signature) -> bool:
    """True iff `sig` is a valid signature of `message` under `pk`. Never raises."""
    try:
        Ed25519PublicKey.from_public_bytes(bytes(pk)).verify(bytes(sig), bytes(message))
        return True
    except (InvalidSignature, ValueError, TypeError):
        return False


# ----------------------------
# Import helpers
# ----------------------------


def _is_curve_point(data: bytes) -> bool:
    # Point decompression per RFC 8032 §5.1.3.
    y = int.from_bytes(data, "little") & ((1 << 255) - 1)
    sign_bit = data[31] >> 7
    if y >= _P:
        return False
    y2 = (y * y) % _P
    x2 = ((y2 - 1) * pow((_D * y2 + 1) % _P, _P - 2, _P)) % _P
    if x2 == 0:
        return sign_bit == 0
    x = pow(x2, (_P + 3) // 8, _P)
    if (x * x - x2) % _P != 0:
        x = (x * _SQRT_M1) % _P
    return (x * x - x2) % _P == 0


def pk_from_bytes(data: bytes) -> Optional[PublicKey]:
    """PublicKey from 32 bytes that decode to a curve point; else None."""
    if not isinstance(data, (bytes, bytearray)) or len(data) != PK_SIZE:
        return None
    if not _is_curve_point(bytes(data)):
        return None
    return PublicKey(bytes(data))


def sk_from_bytes(data: bytes) -> Optional[SecretKey]:
    """SecretKey from a 32-byte seed; else None."""
    if not isinstance(data, (bytes, bytearray)) or len(data) != SK_SIZE:
        return None
    return SecretKey.from_seed(bytes(data))


def sig_from_bytes(data: bytes) -> Optional[Signature]:
    if not isinstance(data, (bytes, bytearray)) or len(data) != SIG_SIZE:
        return None
    return Signature(bytes(data))


def sk_to_text(sk: SecretKey) -> str:
    return base64.b64encode(sk.seed + sk.public.raw).decode("ascii")


def sk_from_text(text: str) -> Optional[SecretKey]:
    """
    Parse base64(seed ‖ pk). Returns None on bad base64, wrong length, or when the
    embedded public key is not the one derived from the seed.
    """
    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError, AttributeError):
        return None
    if len(raw) != SK_SIZE + PK_SIZE:
        return None
    sk = SecretKey.from_seed(raw[:SK_SIZE])
    if sk.public.raw != raw[SK_SIZE:]:
        return None
    return sk


__all__ = [
    "PK_SIZE",
    "SK_SIZE",
    "SIG_SIZE",
    "RandomSource",
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
