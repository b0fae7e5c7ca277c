"""
Algorand transaction signing core.

Canonical msgpack encoding, Ed25519 and contract-account (program) signing, and
verification of signed envelopes. No network access: submitting to a node goes
through a caller-supplied transport (see `algorand.node`).

    from algorand import Transaction, keypair, sign_simple, verify_transaction

    sk = keypair()
    stx = sign_simple(sk, Transaction.payment(receiver=rcv, amount=1_000, fee=1_000))
    assert verify_transaction(stx) == stx.transaction
"""

from __future__ import annotations

from .address import Address, from_contract_code, from_public_key
from .crypto.signature import (
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
from .encoding.msgpack import decode, encode
from .errors import AlgorandError, DecodeError, MalformedInput, VerificationError
from .types import (
    ProgramAuthorized,
    SignatureAuthorized,
    SignedTransaction,
    Transaction,
    authenticate,
    decode_signed_transaction,
    get_unverified_transaction,
    sign_from_contract_account,
    sign_simple,
    signing_bytes,
    transaction_id,
    verify_transaction,
)
from .version import __version__, get_version

__all__ = [
    "__version__",
    "get_version",
    "Address",
    "from_public_key",
    "from_contract_code",
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
    "encode",
    "decode",
    "AlgorandError",
    "MalformedInput",
    "DecodeError",
    "VerificationError",
    "Transaction",
    "SignatureAuthorized",
    "ProgramAuthorized",
    "SignedTransaction",
    "signing_bytes",
    "transaction_id",
    "sign_simple",
    "sign_from_contract_account",
    "get_unverified_transaction",
    "authenticate",
    "verify_transaction",
    "decode_signed_transaction",
]
