"""
algorand.address
================

Ledger addresses: 32 raw bytes with a checksummed base32 text form.

Derivation
----------
- Key account:      address = Ed25519 public key bytes
- Contract account: address = SHA-512/256(b"Program" || program)

Text form
---------
    base32_nopad(address || sha512_256(address)[-4:])   # 58 upper-case chars

Decoding rejects wrong lengths, characters outside the RFC 4648 alphabet,
non-canonical trailing bits and checksum mismatches.

This module provides:
- Address (value type; `Address.zero()` is the "unset" address)
- from_public_key(pk) -> Address
- from_contract_code(program) -> Address
- to_text(addr) -> str / from_text(text) -> Address
- is_valid(text) -> bool
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from .crypto.hash import CHECKSUM_SIZE, checksum, sha512_256
from .crypto.signature import PublicKey, pk_from_bytes
from .errors import AddressError

ADDRESS_SIZE = 32
TEXT_SIZE = 58
PROGRAM_TAG = b"Program"

__all__ = [
    "ADDRESS_SIZE",
    "TEXT_SIZE",
    "PROGRAM_TAG",
    "Address",
    "from_public_key",
    "from_contract_code",
    "to_text",
    "from_text",
    "is_valid",
]


@dataclass(frozen=True)
class Address:
    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise AddressError("address must be bytes", type=type(self.raw).__name__)
        if len(self.raw) != ADDRESS_SIZE:
            raise AddressError(
                f"address must be {ADDRESS_SIZE} bytes", expected=ADDRESS_SIZE, got=len(self.raw)
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def zero(cls) -> "Address":
        return cls(b"\x00" * ADDRESS_SIZE)

    @classmethod
    def from_text(cls, text: str) -> "Address":
        return from_text(text)

    def is_nonzero(self) -> bool:
        return any(self.raw)

    def to_text(self) -> str:
        return to_text(self)

    def to_public_key(self) -> Optional[PublicKey]:
        """The Ed25519 key this address names, or None if the bytes are not a curve point."""
        return pk_from_bytes(self.raw)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return to_text(self)

    def __repr__(self) -> str:
        return f"Address({to_text(self)!r})"


def from_public_key(pk: PublicKey) -> Address:
    return Address(bytes(pk))


def from_contract_code(program: bytes) -> Address:
    """Contract-account address of `program` (opaque bytes, never interpreted)."""
    return Address(sha512_256(PROGRAM_TAG, bytes(program)))


def to_text(addr: Address) -> str:
    raw = bytes(addr)
    return base64.b32encode(raw + checksum(raw)).decode("ascii").rstrip("=")


def from_text(text: str) -> Address:
    """
    Parse the 58-character text form. Raises AddressError on any defect.
    """
    if not isinstance(text, str):
        raise AddressError("address text must be a string", type=type(text).__name__)
    if len(text) != TEXT_SIZE:
        raise AddressError(
            f"address text must be {TEXT_SIZE} characters", expected=TEXT_SIZE, got=len(text)
        )
    padded = text + "=" * (-len(text) % 8)
    try:
        decoded = base64.b32decode(padded)
    except (binascii.Error, ValueError) as e:
        raise AddressError("address text is not base32", text=text) from e
    # b32decode ignores the unused low bits of the last character.
    if base64.b32encode(decoded).decode("ascii").rstrip("=") != text:
        raise AddressError("address text is not canonical base32", text=text)
    raw, check = decoded[:ADDRESS_SIZE], decoded[ADDRESS_SIZE:]
    if len(check) != CHECKSUM_SIZE or checksum(raw) != check:
        raise AddressError("address checksum mismatch", text=text)
    return Address(raw)


def is_valid(text: str) -> bool:
    try:
        from_text(text)
        return True
    except AddressError:
        return False
