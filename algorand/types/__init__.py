"""
algorand.types
==============

Transaction records and signed envelopes.
"""

from .signed import (
    LogicSig,
    ProgramAuthorized,
    SignatureAuthorized,
    SignedTransaction,
    authenticate,
    decode_signed_transaction,
    encode_signed_transaction,
    get_unverified_transaction,
    sign_from_contract_account,
    sign_simple,
    verify_transaction,
)
from .transaction import (
    ApplicationCall,
    AssetConfig,
    AssetFreeze,
    AssetParams,
    AssetTransfer,
    KeyRegistration,
    OnComplete,
    Payment,
    StateSchema,
    Transaction,
    TxPayload,
    signing_bytes,
    transaction_id,
)

__all__ = [
    "Transaction",
    "TxPayload",
    "Payment",
    "KeyRegistration",
    "AssetConfig",
    "AssetParams",
    "AssetTransfer",
    "AssetFreeze",
    "ApplicationCall",
    "OnComplete",
    "StateSchema",
    "signing_bytes",
    "transaction_id",
    "LogicSig",
    "SignatureAuthorized",
    "ProgramAuthorized",
    "SignedTransaction",
    "sign_simple",
    "sign_from_contract_account",
    "get_unverified_transaction",
    "authenticate",
    "verify_transaction",
    "encode_signed_transaction",
    "decode_signed_transaction",
]
