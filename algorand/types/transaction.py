"""
algorand.types.transaction
==========================

Transaction model and its canonical encoding.

Design highlights
-----------------
- **Types**: pay, keyreg, acfg, axfer, afrz, appl. The payload record decides the
  `type` field; its fields are flattened into the transaction map.
- **Encoding**: canonical msgpack (sorted keys, zero fields omitted). Builders
  only set what they are given; everything else stays at its zero value and
  never reaches the wire.
- **SignBytes**: ``b"TX" || encode(tx)``.
- **TxID**: base32 (no padding) of SHA-512/256(SignBytes), 52 characters.
- **Sender**: the all-zero address means "unset"; signing overwrites it with the
  signer's address.

Ledger semantics (fee sufficiency, validity windows, balances) are not checked
here.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Type

from ..address import Address
from ..crypto.hash import sha512_256
from ..encoding.msgpack import encode
from ..encoding.record import (
    FieldReader,
    Record,
    check_address,
    check_bool,
    check_bytes,
    check_digest,
    check_text,
    check_tuple,
    check_uint,
)

TX_TAG = b"TX"
NOTE_MAX = 1024
VOTE_PK_SIZE = 32
SELECTION_PK_SIZE = 32
STATE_PROOF_PK_SIZE = 64
TXID_SIZE = 52

Items = Iterable[Tuple[str, Any]]


def _norm(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


class OnComplete(IntEnum):
    NO_OP = 0
    OPT_IN = 1
    CLOSE_OUT = 2
    CLEAR_STATE = 3
    UPDATE_APPLICATION = 4
    DELETE_APPLICATION = 5


# ---- nested records ----

@dataclass(frozen=True)
class StateSchema(Record):
    num_uint: int = 0
    num_byte_slice: int = 0

    def __post_init__(self) -> None:
        _norm(self, "num_uint", check_uint("StateSchema.num_uint", self.num_uint))
        _norm(self, "num_byte_slice", check_uint("StateSchema.num_byte_slice", self.num_byte_slice))

    def wire_items(self) -> Items:
        return (("nui", self.num_uint), ("nbs", self.num_byte_slice))

    @classmethod
    def read(cls, r: FieldReader) -> "StateSchema":
        return cls(num_uint=r.uint("nui"), num_byte_slice=r.uint("nbs"))


@dataclass(frozen=True)
class AssetParams(Record):
    total: int = 0
    decimals: int = 0
    default_frozen: bool = False
    unit_name: str = ""
    asset_name: str = ""
    url: str = ""
    metadata_hash: Optional[bytes] = None
    manager: Address = field(default_factory=Address.zero)
    reserve: Address = field(default_factory=Address.zero)
    freeze: Address = field(default_factory=Address.zero)
    clawback: Address = field(default_factory=Address.zero)

    def __post_init__(self) -> None:
        _norm(self, "total", check_uint("AssetParams.total", self.total))
        _norm(self, "decimals", check_uint("AssetParams.decimals", self.decimals))
        check_bool("AssetParams.default_frozen", self.default_frozen)
        for name in ("unit_name", "asset_name", "url"):
            check_text(f"AssetParams.{name}", getattr(self, name))
        _norm(self, "metadata_hash", check_digest("AssetParams.metadata_hash", self.metadata_hash))
        for name in ("manager", "reserve", "freeze", "clawback"):
            check_address(f"AssetParams.{name}", getattr(self, name))

    def wire_items(self) -> Items:
        return (
            ("t", self.total),
            ("dc", self.decimals),
            ("df", self.default_frozen),
            ("un", self.unit_name),
            ("an", self.asset_name),
            ("au", self.url),
            ("am", self.metadata_hash),
            ("m", self.manager),
            ("r", self.reserve),
            ("f", self.freeze),
            ("c", self.clawback),
        )

    @classmethod
    def read(cls, r: FieldReader) -> "AssetParams":
        return cls(
            total=r.uint("t"),
            decimals=r.uint("dc"),
            default_frozen=r.boolean("df"),
            unit_name=r.text("un"),
            asset_name=r.text("an"),
            url=r.text("au"),
            metadata_hash=r.digest("am"),
            manager=r.address("m"),
            reserve=r.address("r"),
            freeze=r.address("f"),
            clawback=r.address("c"),
        )


# ---- payloads ----

@dataclass(frozen=True)
class Payment(Record):
    TYPE: ClassVar[str] = "pay"

    receiver: Address = field(default_factory=Address.zero)
    amount: int = 0
    close_remainder_to: Address = field(default_factory=Address.zero)

    def __post_init__(self) -> None:
        check_address("Payment.receiver", self.receiver)
        _norm(self, "amount", check_uint("Payment.amount", self.amount))
        check_address("Payment.close_remainder_to", self.close_remainder_to)

    def wire_items(self) -> Items:
        return (("rcv", self.receiver), ("amt", self.amount), ("close", self.close_remainder_to))

    @classmethod
    def read(cls, r: FieldReader) -> "Payment":
        return cls(receiver=r.address("rcv"), amount=r.uint("amt"), close_remainder_to=r.address("close"))


@dataclass(frozen=True)
class KeyRegistration(Record):
    """
    Participation key registration. All-zero keys with `nonparticipation=False`
    take the account offline.
    """

    TYPE: ClassVar[str] = "keyreg"

    vote_pk: bytes = b""
    selection_pk: bytes = b""
    state_proof_pk: bytes = b""
    vote_first: int = 0
    vote_last: int = 0
    vote_key_dilution: int = 0
    nonparticipation: bool = False

    def __post_init__(self) -> None:
        _norm(self, "vote_pk", check_bytes("KeyRegistration.vote_pk", self.vote_pk, size=VOTE_PK_SIZE))
        _norm(
            self,
            "selection_pk",
            check_bytes("KeyRegistration.selection_pk", self.selection_pk, size=SELECTION_PK_SIZE),
        )
        _norm(
            self,
            "state_proof_pk",
            check_bytes("KeyRegistration.state_proof_pk", self.state_proof_pk, size=STATE_PROOF_PK_SIZE),
        )
        for name in ("vote_first", "vote_last", "vote_key_dilution"):
            _norm(self, name, check_uint(f"KeyRegistration.{name}", getattr(self, name)))
        check_bool("KeyRegistration.nonparticipation", self.nonparticipation)

    def wire_items(self) -> Items:
        return (
            ("votekey", self.vote_pk),
            ("selkey", self.selection_pk),
            ("sprfkey", self.state_proof_pk),
            ("votefst", self.vote_first),
            ("votelst", self.vote_last),
            ("votekd", self.vote_key_dilution),
            ("nonpart", self.nonparticipation),
        )

    @classmethod
    def read(cls, r: FieldReader) -> "KeyRegistration":
        return cls(
            vote_pk=r.bytes_("votekey", VOTE_PK_SIZE),
            selection_pk=r.bytes_("selkey", SELECTION_PK_SIZE),
            state_proof_pk=r.bytes_("sprfkey", STATE_PROOF_PK_SIZE),
            vote_first=r.uint("votefst"),
            vote_last=r.uint("votelst"),
            vote_key_dilution=r.uint("votekd"),
            nonparticipation=r.boolean("nonpart"),
        )


@dataclass(frozen=True)
class AssetConfig(Record):
    """Create (asset_id=0), reconfigure, or destroy (empty params) an asset."""

    TYPE: ClassVar[str] = "acfg"

    asset_id: int = 0
    params: AssetParams = field(default_factory=AssetParams)

    def __post_init__(self) -> None:
        _norm(self, "asset_id", check_uint("AssetConfig.asset_id", self.asset_id))
        if not isinstance(self.params, AssetParams):
            raise TypeError("AssetConfig.params must be AssetParams")

    def wire_items(self) -> Items:
        return (("caid", self.asset_id), ("apar", self.params))

    @classmethod
    def read(cls, r: FieldReader) -> "AssetConfig":
        return cls(asset_id=r.uint("caid"), params=r.record("apar", AssetParams))


@dataclass(frozen=True)
class AssetTransfer(Record):
    TYPE: ClassVar[str] = "axfer"

    asset_id: int = 0
    amount: int = 0
    asset_sender: Address = field(default_factory=Address.zero)
    receiver: Address = field(default_factory=Address.zero)
    close_to: Address = field(default_factory=Address.zero)

    def __post_init__(self) -> None:
        _norm(self, "asset_id", check_uint("AssetTransfer.asset_id", self.asset_id))
        _norm(self, "amount", check_uint("AssetTransfer.amount", self.amount))
        for name in ("asset_sender", "receiver", "close_to"):
            check_address(f"AssetTransfer.{name}", getattr(self, name))

    def wire_items(self) -> Items:
        return (
            ("xaid", self.asset_id),
            ("aamt", self.amount),
            ("asnd", self.asset_sender),
            ("arcv", self.receiver),
            ("aclose", self.close_to),
        )

    @classmethod
    def read(cls, r: FieldReader) -> "AssetTransfer":
        return cls(
            asset_id=r.uint("xaid"),
            amount=r.uint("aamt"),
            asset_sender=r.address("asnd"),
            receiver=r.address("arcv"),
            close_to=r.address("aclose"),
        )


@dataclass(frozen=True)
class AssetFreeze(Record):
    TYPE: ClassVar[str] = "afrz"

    account: Address = field(default_factory=Address.zero)
    asset_id: int = 0
    frozen: bool = False

    def __post_init__(self) -> None:
        check_address("AssetFreeze.account", self.account)
        _norm(self, "asset_id", check_uint("AssetFreeze.asset_id", self.asset_id))
        check_bool("AssetFreeze.frozen", self.frozen)

    def wire_items(self) -> Items:
        return (("fadd", self.account), ("faid", self.asset_id), ("afrz", self.frozen))

    @classmethod
    def read(cls, r: FieldReader) -> "AssetFreeze":
        return cls(account=r.address("fadd"), asset_id=r.uint("faid"), frozen=r.boolean("afrz"))


@dataclass(frozen=True)
class ApplicationCall(Record):
    """
    Application call. Programs are opaque bytes; `app_id=0` creates an app.
    """

    TYPE: ClassVar[str] = "appl"

    app_id: int = 0
    on_complete: OnComplete = OnComplete.NO_OP
    accounts: Tuple[Address, ...] = ()
    approval_program: bytes = b""
    app_args: Tuple[bytes, ...] = ()
    clear_program: bytes = b""
    foreign_apps: Tuple[int, ...] = ()
    foreign_assets: Tuple[int, ...] = ()
    global_schema: StateSchema = field(default_factory=StateSchema)
    local_schema: StateSchema = field(default_factory=StateSchema)
    extra_pages: int = 0

    def __post_init__(self) -> None:
        _norm(self, "app_id", check_uint("ApplicationCall.app_id", self.app_id))
        _norm(self, "on_complete", OnComplete(self.on_complete))
        _norm(self, "accounts", check_tuple("ApplicationCall.accounts", self.accounts, check_address))
        _norm(self, "approval_program", check_bytes("ApplicationCall.approval_program", self.approval_program))
        _norm(self, "app_args", check_tuple("ApplicationCall.app_args", self.app_args, check_bytes))
        _norm(self, "clear_program", check_bytes("ApplicationCall.clear_program", self.clear_program))
        _norm(self, "foreign_apps", check_tuple("ApplicationCall.foreign_apps", self.foreign_apps, check_uint))
        _norm(
            self,
            "foreign_assets",
            check_tuple("ApplicationCall.foreign_assets", self.foreign_assets, check_uint),
        )
        for name in ("global_schema", "local_schema"):
            if not isinstance(getattr(self, name), StateSchema):
                raise TypeError(f"ApplicationCall.{name} must be StateSchema")
        _norm(self, "extra_pages", check_uint("ApplicationCall.extra_pages", self.extra_pages))

    def wire_items(self) -> Items:
        return (
            ("apid", self.app_id),
            ("apan", self.on_complete),
            ("apat", self.accounts),
            ("apap", self.approval_program),
            ("apaa", self.app_args),
            ("apsu", self.clear_program),
            ("apfa", self.foreign_apps),
            ("apas", self.foreign_assets),
            ("apgs", self.global_schema),
            ("apls", self.local_schema),
            ("apep", self.extra_pages),
        )

    @classmethod
    def read(cls, r: FieldReader) -> "ApplicationCall":
        return cls(
            app_id=r.uint("apid"),
            on_complete=OnComplete(r.uint("apan")),
            accounts=r.address_list("apat"),
            approval_program=r.bytes_("apap"),
            app_args=r.bytes_list("apaa"),
            clear_program=r.bytes_("apsu"),
            foreign_apps=r.uint_list("apfa"),
            foreign_assets=r.uint_list("apas"),
            global_schema=r.record("apgs", StateSchema),
            local_schema=r.record("apls", StateSchema),
            extra_pages=r.uint("apep"),
        )


TxPayload = Payment | KeyRegistration | AssetConfig | AssetTransfer | AssetFreeze | ApplicationCall

PAYLOAD_TYPES: Dict[str, Type[Record]] = {
    cls.TYPE: cls
    for cls in (Payment, KeyRegistration, AssetConfig, AssetTransfer, AssetFreeze, ApplicationCall)
}


# ---- transaction ----

@dataclass(frozen=True)
class Transaction(Record):
    sender: Address = field(default_factory=Address.zero)
    fee: int = 0
    first_valid: int = 0
    last_valid: int = 0
    note: bytes = b""
    genesis_id: str = ""
    genesis_hash: Optional[bytes] = None
    group: Optional[bytes] = None
    lease: Optional[bytes] = None
    rekey_to: Address = field(default_factory=Address.zero)
    payload: Optional[TxPayload] = None

    def __post_init__(self) -> None:
        check_address("Transaction.sender", self.sender)
        for name in ("fee", "first_valid", "last_valid"):
            _norm(self, name, check_uint(f"Transaction.{name}", getattr(self, name)))
        _norm(self, "note", check_bytes("Transaction.note", self.note, max_len=NOTE_MAX))
        check_text("Transaction.genesis_id", self.genesis_id)
        for name in ("genesis_hash", "group", "lease"):
            _norm(self, name, check_digest(f"Transaction.{name}", getattr(self, name)))
        check_address("Transaction.rekey_to", self.rekey_to)
        if self.payload is not None and type(self.payload) not in PAYLOAD_TYPES.values():
            raise TypeError("Transaction.payload must be a transaction payload record")

    @property
    def type(self) -> str:
        return self.payload.TYPE if self.payload is not None else ""

    def wire_items(self) -> Items:
        yield ("snd", self.sender)
        yield ("fee", self.fee)
        yield ("fv", self.first_valid)
        yield ("lv", self.last_valid)
        yield ("note", self.note)
        yield ("gen", self.genesis_id)
        yield ("gh", self.genesis_hash)
        yield ("grp", self.group)
        yield ("lx", self.lease)
        yield ("rekey", self.rekey_to)
        yield ("type", self.type)
        if self.payload is not None:
            yield from self.payload.wire_items()

    @classmethod
    def read(cls, r: FieldReader) -> "Transaction":
        kind = r.text("type")
        payload = None
        if kind:
            payload_cls = PAYLOAD_TYPES.get(kind)
            if payload_cls is None:
                raise r.error("type", "unknown transaction type", type=kind)
            payload = payload_cls.read(r)
        return cls(
            sender=r.address("snd"),
            fee=r.uint("fee"),
            first_valid=r.uint("fv"),
            last_valid=r.uint("lv"),
            note=r.bytes_("note"),
            genesis_id=r.text("gen"),
            genesis_hash=r.digest("gh"),
            group=r.digest("grp"),
            lease=r.digest("lx"),
            rekey_to=r.address("rekey"),
            payload=payload,
        )

    # -- derived values --

    def with_sender(self, sender: Address) -> "Transaction":
        return replace(self, sender=sender)

    def sign_bytes(self) -> bytes:
        return signing_bytes(self)

    def txid(self) -> str:
        return transaction_id(self)

    def __str__(self) -> str:
        return f"Transaction(type={self.type or '-'}, sender={self.sender.to_text()}, fee={self.fee})"

    # -- convenience builders --

    @classmethod
    def payment(
        cls, *, receiver: Address, amount: int, close_remainder_to: Optional[Address] = None, **header: Any
    ) -> "Transaction":
        return cls(
            payload=Payment(
                receiver=receiver,
                amount=amount,
                close_remainder_to=close_remainder_to or Address.zero(),
            ),
            **header,
        )

    @classmethod
    def key_registration(
        cls,
        *,
        vote_pk: bytes = b"",
        selection_pk: bytes = b"",
        state_proof_pk: bytes = b"",
        vote_first: int = 0,
        vote_last: int = 0,
        vote_key_dilution: int = 0,
        nonparticipation: bool = False,
        **header: Any,
    ) -> "Transaction":
        return cls(
            payload=KeyRegistration(
                vote_pk=vote_pk,
                selection_pk=selection_pk,
                state_proof_pk=state_proof_pk,
                vote_first=vote_first,
                vote_last=vote_last,
                vote_key_dilution=vote_key_dilution,
                nonparticipation=nonparticipation,
            ),
            **header,
        )

    @classmethod
    def asset_config(
        cls, *, asset_id: int = 0, params: Optional[AssetParams] = None, **header: Any
    ) -> "Transaction":
        return cls(payload=AssetConfig(asset_id=asset_id, params=params or AssetParams()), **header)

    @classmethod
    def asset_transfer(
        cls,
        *,
        asset_id: int,
        amount: int = 0,
        receiver: Optional[Address] = None,
        asset_sender: Optional[Address] = None,
        close_to: Optional[Address] = None,
        **header: Any,
    ) -> "Transaction":
        return cls(
            payload=AssetTransfer(
                asset_id=asset_id,
                amount=amount,
                asset_sender=asset_sender or Address.zero(),
                receiver=receiver or Address.zero(),
                close_to=close_to or Address.zero(),
            ),
            **header,
        )

    @classmethod
    def asset_freeze(cls, *, account: Address, asset_id: int, frozen: bool, **header: Any) -> "Transaction":
        return cls(payload=AssetFreeze(account=account, asset_id=asset_id, frozen=frozen), **header)

    @classmethod
    def application_call(
        cls,
        *,
        app_id: int = 0,
        on_complete: OnComplete = OnComplete.NO_OP,
        accounts: Iterable[Address] = (),
        approval_program: bytes = b"",
        app_args: Iterable[bytes] = (),
        clear_program: bytes = b"",
        foreign_apps: Iterable[int] = (),
        foreign_assets: Iterable[int] = (),
        global_schema: Optional[StateSchema] = None,
        local_schema: Optional[StateSchema] = None,
        extra_pages: int = 0,
        **header: Any,
    ) -> "Transaction":
        return cls(
            payload=ApplicationCall(
                app_id=app_id,
                on_complete=on_complete,
                accounts=tuple(accounts),
                approval_program=approval_program,
                app_args=tuple(app_args),
                clear_program=clear_program,
                foreign_apps=tuple(foreign_apps),
                foreign_assets=tuple(foreign_assets),
                global_schema=global_schema or StateSchema(),
                local_schema=local_schema or StateSchema(),
                extra_pages=extra_pages,
            ),
            **header,
        )


def signing_bytes(tx: Transaction) -> bytes:
    """Domain-separated bytes a key signs: ``b"TX" || encode(tx)``."""
    return TX_TAG + encode(tx)


def transaction_id(tx: Transaction) -> str:
    digest = sha512_256(signing_bytes(tx))
    return base64.b32encode(digest).decode("ascii").rstrip("=")


__all__ = [
    "TX_TAG",
    "NOTE_MAX",
    "OnComplete",
    "StateSchema",
    "AssetParams",
    "Payment",
    "KeyRegistration",
    "AssetConfig",
    "AssetTransfer",
    "AssetFreeze",
    "ApplicationCall",
    "TxPayload",
    "PAYLOAD_TYPES",
    "Transaction",
    "signing_bytes",
    "transaction_id",
]
