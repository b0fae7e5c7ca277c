"""
Property tests for the checksummed address text: every 32-byte payload round
trips, and no wrong 4-byte checksum is ever accepted.
"""
from __future__ import annotations

import base64

import pytest
from hypothesis import assume, given, settings, strategies as st

from algorand.address import Address, from_text, is_valid, to_text
from algorand.crypto.hash import checksum
from algorand.errors import AddressError

payloads = st.binary(min_size=32, max_size=32)


def _text(raw: bytes, check: bytes) -> str:
    return base64.b32encode(raw + check).decode("ascii").rstrip("=")


@settings(max_examples=200)
@given(raw=payloads)
def test_text_round_trip(raw):
    text = to_text(Address(raw))
    assert text == _text(raw, checksum(raw))
    assert from_text(text) == Address(raw)


@settings(max_examples=300)
@given(raw=payloads, check=st.binary(min_size=4, max_size=4))
def test_wrong_checksum_rejected(raw, check):
    assume(check != checksum(raw))
    text = _text(raw, check)
    assert len(text) == 58
    with pytest.raises(AddressError):
        from_text(text)
    assert not is_valid(text)
