"""
algorand.types.signed
=====================

Signed transaction envelopes: a closed union of two shapes.

    SignatureAuthorized   {"sig": <64 bytes>, "txn": {...}}
    ProgramAuthorized     {"lsig": {"l": <program>, "arg": [...]}, "txn": {...}}

Signing always binds the sender to the signer: the key's own address, or the
program's address for a contract account. Whatever sender the input carried is
replaced.

Verification
------------
- signature shape: the sender address *is* the Ed25519 public key; the signature
  must check over ``b"TX" || encode(txn)``.
- program shape: ``from_contract_code(program)`` must equal the sender.

`authenticate` raises VerificationError with the reason; `verify_transaction`
returns the transaction or None and never raises.

Multisig, delegated logic signatures and auth-address (`sgnr`) envelopes are not
supported; decoding rejects them as malformed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional, Tuple, Union

from ..address import Address, from_contract_code, from_public_key
from ..crypto.signature import SIG_SIZE, SecretKey, Signature, sign, to_public, verify
from ..encoding.msgpack import decode, encode
from ..encoding.record import (
    FieldReader,
    Record,
    WireFormat,
    check_bytes,
    check_tuple,
    read_record,
)
from ..errors import DecodeError, VerificationError
from ..logging import get_logger
from .transaction import Transaction, signing_bytes, transaction_id

log = get_logger(__name__)

Items = Iterable[Tuple[str, Any]]

_UNSUPPORTED = ("msig", "sgnr")


@dataclass(frozen=True)
class LogicSig(Record):
    """The `lsig` map. Always encoded, even for an empty program."""

    program: bytes = b""
    args: Tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "program", check_bytes("LogicSig.program", self.program))
        object.__setattr__(self, "args", check_tuple("LogicSig.args", self.args, check_bytes))

    def is_nonzero(self) -> bool:
        return True

    def wire_items(self) -> Items:
        return (("l", self.program), ("arg", self.args))

    @classmethod
    def read(cls, r: FieldReader) -> "LogicSig":
        return cls(program=r.bytes_("l"), args=r.bytes_list("arg"))


@dataclass(frozen=True)
class SignatureAuthorized(Record):
    signature: Signature
    transaction: Transaction

    def __post_init__(self) -> None:
        if not isinstance(self.signature, Signature):
            raise TypeError("SignatureAuthorized.signature must be Signature")
        if not isinstance(self.transaction, Transaction):
            raise TypeError("SignatureAuthorized.transaction must be Transaction")

    def wire_items(self) -> Items:
        return (("sig", self.signature), ("txn", self.transaction))

    @classmethod
    def read(cls, r: FieldReader) -> "SignatureAuthorized":
        return cls(
            signature=Signature(r.bytes_("sig", SIG_SIZE)),
            transaction=r.record("txn", Transaction),
        )


@dataclass(frozen=True)
class ProgramAuthorized(Record):
    program: bytes
    args: Tuple[bytes, ...]
    transaction: Transaction

    def __post_init__(self) -> None:
        object.__setattr__(self, "program", check_bytes("ProgramAuthorized.program", self.program))
        object.__setattr__(self, "args", check_tuple("ProgramAuthorized.args", self.args, check_bytes))
        if not isinstance(self.transaction, Transaction):
            raise TypeError("ProgramAuthorized.transaction must be Transaction")

    @property
    def logic_sig(self) -> LogicSig:
        return LogicSig(program=self.program, args=self.args)

    def wire_items(self) -> Items:
        return (("lsig", self.logic_sig), ("txn", self.transaction))

    @classmethod
    def read(cls, r: FieldReader) -> "ProgramAuthorized":
        lsig = r.record("lsig", LogicSig)
        return cls(program=lsig.program, args=lsig.args, transaction=r.record("txn", Transaction))


SignedTransaction = Union[SignatureAuthorized, ProgramAuthorized]


# ---- construction ----

def _bind_sender(tx: Transaction, sender: Address) -> Transaction:
    return tx if tx.sender == sender else replace(tx, sender=sender)


def sign_simple(sk: SecretKey, tx: Transaction) -> SignatureAuthorized:
    """Sign `tx` with `sk`; the sender becomes the key's address."""
    tx = _bind_sender(tx, from_public_key(to_public(sk)))
    stx = SignatureAuthorized(signature=sign(sk, signing_bytes(tx)), transaction=tx)
    if log.isEnabledFor(logging.DEBUG):
        log.debug("signed with key", extra={"txid": transaction_id(tx), "sender": tx.sender.to_text()})
    return stx


def sign_from_contract_account(
    program: bytes, args: Iterable[bytes], tx: Transaction
) -> ProgramAuthorized:
    """Authorize `tx` by `program`; the sender becomes the program's address."""
    program = bytes(program)
    tx = _bind_sender(tx, from_contract_code(program))
    stx = ProgramAuthorized(program=program, args=tuple(args), transaction=tx)
    if log.isEnabledFor(logging.DEBUG):
        log.debug("signed by program", extra={"txid": transaction_id(tx), "sender": tx.sender.to_text()})
    return stx


def get_unverified_transaction(stx: SignedTransaction) -> Transaction:
    return stx.transaction


# ---- verification ----

def authenticate(stx: SignedTransaction) -> Transaction:
    """
    Return the transaction if its authorization checks out.

    Raises VerificationError("sender is not a public key" | "bad signature" |
    "program does not match sender").
    """
    tx = stx.transaction
    if isinstance(stx, SignatureAuthorized):
        pk = tx.sender.to_public_key()
        if pk is None:
            raise VerificationError("sender is not a public key", sender=tx.sender.to_text())
        if not verify(pk, signing_bytes(tx), stx.signature):
            raise VerificationError("bad signature", sender=tx.sender.to_text())
    elif isinstance(stx, ProgramAuthorized):
        if from_contract_code(stx.program) != tx.sender:
            raise VerificationError("program does not match sender", sender=tx.sender.to_text())
    else:
        raise VerificationError("unsupported envelope", type=type(stx).__name__)
    return tx


def verify_transaction(stx: SignedTransaction) -> Optional[Transaction]:
    try:
        tx = authenticate(stx)
    except VerificationError as e:
        log.debug("verification failed: %s", e.message, extra=e.data)
        return None
    if log.isEnabledFor(logging.DEBUG):
        log.debug("verified", extra={"txid": transaction_id(tx)})
    return tx


# ---- codec ----

def _read_signed(r: FieldReader) -> SignedTransaction:
    for key in _UNSUPPORTED:
        if r.has(key):
            raise r.error(key, "unsupported authorization")
    has_sig, has_lsig = r.has("sig"), r.has("lsig")
    if has_sig and has_lsig:
        raise DecodeError("envelope carries both sig and lsig", path=r.path or "$")
    if has_sig:
        return SignatureAuthorized.read(r)
    if has_lsig:
        return ProgramAuthorized.read(r)
    raise DecodeError("envelope carries neither sig nor lsig", path=r.path or "$")


def signed_from_obj(obj: Any, fmt: WireFormat = WireFormat.MSGPACK, path: str = "") -> SignedTransaction:
    """Parse a decoded envelope map (msgpack objects or JSON view)."""
    return read_record(obj, _read_signed, fmt, path)


def encode_signed_transaction(stx: SignedTransaction) -> bytes:
    return encode(stx)


def decode_signed_transaction(data: bytes, *, require_canonical: Optional[bool] = None) -> SignedTransaction:
    """Decode one canonical envelope. Raises DecodeError on malformed input."""
    return decode(data, signed_from_obj, require_canonical=require_canonical)


__all__ = [
    "LogicSig",
    "SignatureAuthorized",
    "ProgramAuthorized",
    "SignedTransaction",
    "sign_simple",
    "sign_from_contract_account",
    "get_unverified_transaction",
    "authenticate",
    "verify_transaction",
    "signed_from_obj",
    "encode_signed_transaction",
    "decode_signed_transaction",
]
