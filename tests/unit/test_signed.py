"""
Signed envelopes: reference encodings, sender binding, verification outcomes
and the decoder's shape checks.
"""

from __future__ import annotations

import base64
import dataclasses
import logging

import msgspec
import pytest

from algorand.address import Address, from_contract_code, from_public_key
from algorand.crypto.signature import Signature, keypair, to_public
from algorand.encoding import encode
from algorand.errors import DecodeError, VerificationError
from algorand.types.signed import (
    ProgramAuthorized,
    SignatureAuthorized,
    authenticate,
    decode_signed_transaction,
    get_unverified_transaction,
    sign_from_contract_account,
    sign_simple,
    verify_transaction,
)
from algorand.types.transaction import Transaction
from tests.conftest import (
    KEY_ENVELOPE_B64,
    KEY_SIGNATURE,
    PROGRAM_ADDRESS,
    PROGRAM_ENVELOPE_B64,
    RFC8032_ADDRESS,
)


def _b64(stx) -> str:
    return base64.b64encode(encode(stx)).decode()


# -- reference encodings --


def test_sign_as_contract_reference_encoding(program, example_21):
    stx = sign_from_contract_account(program, [], example_21)
    assert _b64(stx) == PROGRAM_ENVELOPE_B64
    assert stx.transaction.sender.to_text() == PROGRAM_ADDRESS


def test_sign_with_key_reference_encoding(rfc_sk, example_21):
    stx = sign_simple(rfc_sk, example_21)
    assert stx.signature.raw == KEY_SIGNATURE
    assert _b64(stx) == KEY_ENVELOPE_B64


@pytest.mark.parametrize("b64", [PROGRAM_ENVELOPE_B64, KEY_ENVELOPE_B64])
def test_reference_envelopes_decode_and_verify(b64):
    data = base64.b64decode(b64)
    stx = decode_signed_transaction(data, require_canonical=True)
    assert encode(stx) == data
    assert verify_transaction(stx) == stx.transaction


# -- sender binding --


def test_sign_simple_binds_unset_sender(rfc_sk, example_21):
    stx = sign_simple(rfc_sk, example_21)
    assert stx.transaction.sender.to_text() == RFC8032_ADDRESS
    assert stx.transaction == example_21.with_sender(from_public_key(to_public(rfc_sk)))


def test_sign_simple_replaces_foreign_sender(rfc_sk, example_21):
    stx = sign_simple(rfc_sk, example_21.with_sender(Address(b"\x11" * 32)))
    assert stx.transaction.sender.to_text() == RFC8032_ADDRESS
    assert verify_transaction(stx) == stx.transaction


def test_sign_from_contract_account_replaces_foreign_sender(program, example_21):
    stx = sign_from_contract_account(program, [b"a"], example_21.with_sender(Address(b"\x11" * 32)))
    assert stx.transaction.sender == from_contract_code(program)
    assert stx.args == (b"a",)
    assert verify_transaction(stx) == stx.transaction


def test_get_unverified_transaction(program, example_21):
    stx = sign_from_contract_account(program, [], example_21)
    assert get_unverified_transaction(stx) is stx.transaction


# -- verification outcomes --


def test_authenticate_bad_signature(rfc_sk, example_21):
    stx = sign_simple(rfc_sk, example_21)
    forged = SignatureAuthorized(Signature(b"\x00" * 64), stx.transaction)
    with pytest.raises(VerificationError) as exc:
        authenticate(forged)
    assert exc.value.message == "bad signature"
    assert verify_transaction(forged) is None


def test_authenticate_modified_transaction(rfc_sk, example_21):
    stx = sign_simple(rfc_sk, example_21)
    moved = dataclasses.replace(stx.transaction, fee=stx.transaction.fee + 1)
    assert verify_transaction(SignatureAuthorized(stx.signature, moved)) is None


def test_authenticate_sender_not_a_key(rfc_sk):
    tx = Transaction(sender=Address(b"\xff" * 31 + b"\x7f"), fee=1)
    stx = SignatureAuthorized(Signature(b"\x01" * 64), tx)
    with pytest.raises(VerificationError) as exc:
        authenticate(stx)
    assert exc.value.message == "sender is not a public key"


def test_authenticate_program_mismatch(program, example_21):
    stx = sign_from_contract_account(program, [], example_21)
    swapped = ProgramAuthorized(program + b"\x00", (), stx.transaction)
    with pytest.raises(VerificationError) as exc:
        authenticate(swapped)
    assert exc.value.message == "program does not match sender"
    assert verify_transaction(swapped) is None


def test_program_signature_ignores_args(program, example_21):
    stx = sign_from_contract_account(program, [b"x", b"y"], example_21)
    assert verify_transaction(stx) == stx.transaction


def test_random_key_round_trip(example_21):
    sk = keypair()
    stx = sign_simple(sk, example_21)
    back = decode_signed_transaction(encode(stx))
    assert back == stx
    assert verify_transaction(back).sender == from_public_key(to_public(sk))


def test_verification_is_logged_at_debug(rfc_sk, example_21, caplog):
    stx = sign_simple(rfc_sk, example_21)
    with caplog.at_level(logging.DEBUG, logger="algorand.types.signed"):
        verify_transaction(stx)
    assert any(getattr(r, "txid", None) == stx.transaction.txid() for r in caplog.records)


# -- envelope shapes --


def test_empty_program_envelope():
    stx = sign_from_contract_account(b"", [], Transaction(fee=1))
    data = encode(stx)
    assert msgspec.msgpack.decode(data)["lsig"] == {}
    back = decode_signed_transaction(data)
    assert isinstance(back, ProgramAuthorized) and back.program == b""
    assert back.transaction.sender == from_contract_code(b"")


def test_zero_transaction_envelope_round_trip():
    stx = SignatureAuthorized(Signature(b"\x00" * 64), Transaction())
    data = encode(stx)
    assert list(msgspec.msgpack.decode(data)) == ["sig"]
    assert decode_signed_transaction(data) == stx


def _env(obj) -> bytes:
    return msgspec.msgpack.encode(obj)


@pytest.mark.parametrize(
    "obj",
    [
        {"txn": {"fee": 1}},
        {"sig": b"\x00" * 64, "lsig": {"l": b"\x01"}, "txn": {"fee": 1}},
        {"msig": {"v": 1, "thr": 1, "subsig": []}, "txn": {"fee": 1}},
        {"sgnr": b"\x01" * 32, "sig": b"\x00" * 64, "txn": {"fee": 1}},
        {"lsig": {"l": b"\x01", "sig": b"\x00" * 64}, "txn": {"fee": 1}},
        {"sig": b"\x00" * 63, "txn": {"fee": 1}},
        {"sig": b"\x00" * 64, "txn": {"fee": 1}, "extra": 1},
        {"lsig": {"l": b"\x01", "arg": b"notalist"}},
        {"sig": b"\x00" * 64, "txn": [1]},
        [b"\x00" * 64],
    ],
)
def test_malformed_envelopes_rejected(obj):
    with pytest.raises(DecodeError):
        decode_signed_transaction(_env(obj))


def test_concatenated_envelopes_are_not_one_envelope(rfc_sk, example_21):
    data = encode(sign_simple(rfc_sk, example_21))
    with pytest.raises(DecodeError):
        decode_signed_transaction(data + data)
