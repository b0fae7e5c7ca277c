"""
Shared pytest fixtures:
- Known-answer keys (RFC 8032 test 1) and the reference contract program
- The `example_21` application call used by the envelope vectors
- Process-wide state reset (config singleton, root log handlers)
"""
from __future__ import annotations

import logging

import pytest

from algorand.address import Address
from algorand.config import set_config
from algorand.crypto.signature import SecretKey
from algorand.types.transaction import Transaction

RFC8032_SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC8032_PK = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
RFC8032_ADDRESS = "25NJQAMCWEFLPVKL73J4SZAHHIHOC4XT3KTCGJNPAINGR5YHKENMEF5QTE"
RFC8032_SK_TEXT = "nWGxne/9WmC6hEr0kuwsxERJxWl7MmkZcDusAxyuf2DXWpgBgrEKt9VL/tPJZAc6DuFy89qmIyWvAhpo9wdRGg=="

PROGRAM = bytes([0x01, 0x20, 0x01, 0x01, 0x22])
PROGRAM_ADDRESS = "6Z3C3LDVWGMX23BMSYMANACQOSINPFIRF77H7N3AWJZYV6OH6GWTJKVMXY"

GENESIS_HASH = bytes.fromhex("31fd21eb38e41081193ed34cdf3b2b83e8874054b47d9c6182bef0df9238eb83")
ACCOUNT_A = bytes.fromhex("002a32013b6a30e37ee2885424ee7d7d0555eae0939fb69afc6bdf9dd2fee7fe")
ACCOUNT_B = bytes.fromhex("0007040b8f62a332b0e005f002c8c0a5163468010a315827c6cf527c786979e7")

PROGRAM_ENVELOPE_B64 = (
    "gqRsc2lngaFsxAUBIAEBIqN0eG6KpGFwYWGRxAR0ZXN0pGFwYXSSxCAAKjIBO2ow437iiFQk7n19BVXq4JOftpr8a9+d0v7n/sQgAAcE"
    "C49iozKw4AXwAsjApRY0aAEKMVgnxs9SfHhpeeekYXBmYZLNFbPNGgqkYXBpZGSjZmVlzQTSomZ2zSMoomdoxCAx/SHrOOQQgRk+00zf"
    "OyuD6IdAVLR9nGGCvvDfkjjrg6Jsds0jMqNzbmTEIPZ2Lax1sZl9bCyWGAaAUHSQ15URL/5/t2Cyc4r5x/GtpHR5cGWkYXBwbA=="
)
PROGRAM_TXID = "OVPNW2UNIZEV5XMJVRA3VG3ED7QP5W5YOC7FKUIZBPRGWW5SZKPA"

KEY_SIGNATURE = bytes.fromhex(
    "cb61998d1a056af417bd3ccefeb88b084dd1818ecc4d2c69c2dc772475d00283"
    "5a395359d50c806a349f9f4c1b8101f03fa1d5a9667674925a3bb9eb29293c0c"
)
KEY_ENVELOPE_B64 = (
    "gqNzaWfEQMthmY0aBWr0F708zv64iwhN0YGOzE0sacLcdyR10AKDWjlTWdUMgGo0n59MG4EB8D+h1almdnSSWju56ykpPAyjdHhuiqRh"
    "cGFhkcQEdGVzdKRhcGF0ksQgACoyATtqMON+4ohUJO59fQVV6uCTn7aa/GvfndL+5/7EIAAHBAuPYqMysOAF8ALIwKUWNGgBCjFYJ8bP"
    "Unx4aXnnpGFwZmGSzRWzzRoKpGFwaWRko2ZlZc0E0qJmds0jKKJnaMQgMf0h6zjkEIEZPtNM3zsrg+iHQFS0fZxhgr7w35I464OibHbN"
    "IzKjc25kxCDXWpgBgrEKt9VL/tPJZAc6DuFy89qmIyWvAhpo9wdRGqR0eXBlpGFwcGw="
)
KEY_TXID = "Q5SGL3BN3H6CR6VJJELCHPOMZNYTDALYIM6SZIO3ODIGK32WRYNQ"


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    """Fresh config per test; undo any handlers `algorand.logging.configure` installs."""
    for name in (
        "ALGORAND_LOG_LEVEL",
        "ALGORAND_LOG_FORMAT",
        "ALGORAND_MAX_PAYLOAD_BYTES",
        "ALGORAND_STRICT_DECODE",
        "ALGORAND_SECRET_KEY",
        "ALGORAND_SECRET_KEY_ENV",
    ):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
    set_config(None)


@pytest.fixture
def rfc_sk() -> SecretKey:
    return SecretKey.from_seed(RFC8032_SEED)


@pytest.fixture
def program() -> bytes:
    return PROGRAM


@pytest.fixture
def example_21() -> Transaction:
    """Application call with the sender left unset."""
    return Transaction.application_call(
        app_id=100,
        accounts=[Address(ACCOUNT_A), Address(ACCOUNT_B)],
        app_args=[b"test"],
        foreign_apps=[5555, 6666],
        fee=1234,
        first_valid=9000,
        last_valid=9010,
        genesis_hash=GENESIS_HASH,
    )
