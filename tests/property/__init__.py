"""
tests.property
==============

Hypothesis strategies shared by the property suites.
"""

from __future__ import annotations

from hypothesis import HealthCheck, strategies as st

from algorand.address import Address
from algorand.crypto.signature import SecretKey
from algorand.types.transaction import (
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
)

SLOW = [HealthCheck.too_slow, HealthCheck.data_too_large]

u64 = st.integers(min_value=0, max_value=2**64 - 1)
small = st.integers(min_value=0, max_value=2**16)
digests = st.none() | st.binary(min_size=32, max_size=32)
addresses = st.binary(min_size=32, max_size=32).map(Address)
maybe_addresses = st.just(Address.zero()) | addresses
blobs = st.binary(max_size=64)
texts = st.text(max_size=16)

secret_keys = st.binary(min_size=32, max_size=32).map(SecretKey.from_seed)
programs = st.binary(max_size=128)
program_args = st.lists(st.binary(max_size=32), max_size=4)

schemas = st.builds(StateSchema, num_uint=small, num_byte_slice=small)

asset_params = st.builds(
    AssetParams,
    total=u64,
    decimals=st.integers(0, 19),
    default_frozen=st.booleans(),
    unit_name=texts,
    asset_name=texts,
    url=texts,
    metadata_hash=digests,
    manager=maybe_addresses,
    reserve=maybe_addresses,
    freeze=maybe_addresses,
    clawback=maybe_addresses,
)

payloads = st.one_of(
    st.none(),
    st.builds(Payment, receiver=maybe_addresses, amount=u64, close_remainder_to=maybe_addresses),
    st.builds(
        KeyRegistration,
        vote_pk=st.just(b"") | st.binary(min_size=32, max_size=32),
        selection_pk=st.just(b"") | st.binary(min_size=32, max_size=32),
        state_proof_pk=st.just(b"") | st.binary(min_size=64, max_size=64),
        vote_first=u64,
        vote_last=u64,
        vote_key_dilution=u64,
        nonparticipation=st.booleans(),
    ),
    st.builds(AssetConfig, asset_id=u64, params=asset_params),
    st.builds(
        AssetTransfer,
        asset_id=u64,
        amount=u64,
        asset_sender=maybe_addresses,
        receiver=maybe_addresses,
        close_to=maybe_addresses,
    ),
    st.builds(AssetFreeze, account=maybe_addresses, asset_id=u64, frozen=st.booleans()),
    st.builds(
        ApplicationCall,
        app_id=u64,
        on_complete=st.sampled_from(list(OnComplete)),
        accounts=st.lists(addresses, max_size=4).map(tuple),
        approval_program=blobs,
        app_args=st.lists(blobs, max_size=4).map(tuple),
        clear_program=blobs,
        foreign_apps=st.lists(u64, max_size=4).map(tuple),
        foreign_assets=st.lists(u64, max_size=4).map(tuple),
        global_schema=schemas,
        local_schema=schemas,
        extra_pages=st.integers(0, 3),
    ),
)

transactions = st.builds(
    Transaction,
    sender=maybe_addresses,
    fee=u64,
    first_valid=u64,
    last_valid=u64,
    note=st.binary(max_size=1024),
    genesis_id=texts,
    genesis_hash=digests,
    group=digests,
    lease=digests,
    rekey_to=maybe_addresses,
    payload=payloads,
)

unsigned_transactions = transactions.map(lambda tx: tx.with_sender(Address.zero()))
