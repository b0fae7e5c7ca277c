"""
algorand.node
=============

Hand signed transactions to a node.

The wire body for `POST /v2/transactions` is the plain concatenation of the
canonical encodings of the signed transactions (content type
``application/x-binary``). The node answers with a JSON object whose `txId` is
the id of the first transaction.

No HTTP client ships here: callers pass any object satisfying `Transport`
(an adapter over httpx, requests, a test double, ...).

Primary entry points
--------------------
- encode_transactions(stxs) -> bytes
- submit_transactions(transport, stxs) -> str
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from .encoding.msgpack import encode
from .errors import AlgorandError, TransportError
from .logging import get_logger, with_fields
from .types.signed import SignedTransaction

log = get_logger(__name__)

BINARY_CONTENT_TYPE = "application/x-binary"
TRANSACTIONS_PATH = "/v2/transactions"


class Transport(Protocol):
    """
    Minimal interface expected from a node client.
    Returns the decoded JSON response body.
    """

    def request(
        self, method: str, path: str, *, body: bytes, content_type: str
    ) -> Mapping[str, Any]: ...


def encode_transactions(stxs: Iterable[SignedTransaction]) -> bytes:
    """Concatenated canonical encodings, in order."""
    return b"".join(encode(stx) for stx in stxs)


def submit_transactions(transport: Transport, stxs: Iterable[SignedTransaction]) -> str:
    """
    POST the signed transactions to /v2/transactions; return the node's `txId`.

    Raises TransportError if the transport fails or the response has no txId.
    """
    stxs = list(stxs)
    if not stxs:
        raise TransportError("nothing to submit")
    body = encode_transactions(stxs)
    slog = with_fields(log, path=TRANSACTIONS_PATH, count=len(stxs))
    slog.debug("submitting transactions", extra={"size": len(body)})
    try:
        resp = transport.request("POST", TRANSACTIONS_PATH, body=body, content_type=BINARY_CONTENT_TYPE)
    except AlgorandError:
        raise
    except Exception as e:  # map transport failures to a stable type
        raise TransportError(f"POST {TRANSACTIONS_PATH} failed: {e}", path=TRANSACTIONS_PATH) from e
    txid = resp.get("txId") if isinstance(resp, Mapping) else None
    if not isinstance(txid, str) or not txid:
        raise TransportError("response has no txId", path=TRANSACTIONS_PATH)
    slog.debug("submitted", extra={"txid": txid})
    return txid


__all__ = [
    "BINARY_CONTENT_TYPE",
    "TRANSACTIONS_PATH",
    "Transport",
    "encode_transactions",
    "submit_transactions",
]
