"""
Error taxonomy: codes, JSON form, and the malformed / unverified split.
"""

from __future__ import annotations

import json

import pytest

from algorand.errors import (
    AddressError,
    AlgorandError,
    ConfigError,
    DecodeError,
    EncodeError,
    EntropyError,
    ErrorCode,
    KeyMismatchError,
    MalformedInput,
    TransportError,
    VerificationError,
)


@pytest.mark.parametrize(
    "cls, code",
    [
        (ConfigError, ErrorCode.CONFIG),
        (EncodeError, ErrorCode.ENCODE),
        (MalformedInput, ErrorCode.MALFORMED),
        (DecodeError, ErrorCode.DECODE),
        (AddressError, ErrorCode.ADDRESS),
        (KeyMismatchError, ErrorCode.KEY_MISMATCH),
        (VerificationError, ErrorCode.VERIFICATION),
        (EntropyError, ErrorCode.ENTROPY),
        (TransportError, ErrorCode.TRANSPORT),
    ],
)
def test_codes(cls, code):
    err = cls()
    assert err.code is code
    assert isinstance(err, AlgorandError)
    assert err.to_dict()["code"] == code.value


def test_malformed_is_value_error_and_verification_is_not():
    assert issubclass(DecodeError, MalformedInput)
    assert issubclass(AddressError, ValueError)
    assert issubclass(KeyMismatchError, MalformedInput)
    assert not issubclass(VerificationError, ValueError)


def test_data_is_json_safe():
    err = DecodeError("bad", path="txn.snd", raw=b"\x01\x02", size=3)
    d = err.to_dict()
    assert d["data"] == {"path": "txn.snd", "raw": "0102", "size": 3}
    json.dumps(d)


def test_str_contains_code_message_and_context():
    s = str(DecodeError("unknown field", path="zzz"))
    assert s.startswith("ALGO/DECODE: unknown field")
    assert "path=zzz" in s


def test_with_context_returns_copy():
    err = VerificationError("bad signature", sender="X")
    other = err.with_context(txid="T")
    assert other is not err
    assert type(other) is VerificationError
    assert other.data == {"sender": "X", "txid": "T"}
    assert err.data == {"sender": "X"}


def test_raise_and_catch_as_value_error():
    with pytest.raises(ValueError):
        raise DecodeError("truncated")


def test_to_dict_with_cause():
    try:
        try:
            raise OSError("boom")
        except OSError as e:
            raise TransportError("failed") from e
    except TransportError as err:
        err.cause = err.__cause__
        d = err.to_dict(include_cause=True)
    assert d["cause"] == {"type": "OSError", "message": "boom"}
