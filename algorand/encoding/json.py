"""
algorand.encoding.json
======================

Human-facing JSON view of records and envelopes, derived from the canonical form:
same keys, same zero-stripping, keys sorted. Opaque values are spelled as text:

- bytes       → standard base64
- Address     → 58-char checksummed text
- Signature   → base64

Round-trip law: ``signed_from_json(to_json(stx)) == stx``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

import msgspec

from ..errors import DecodeError
from ..types.signed import SignedTransaction, signed_from_obj
from .record import Record, WireFormat, to_wire

Reader = Union[type, Callable[..., Any]]


def to_json(value: Any) -> Any:
    """Plain JSON-compatible object for `value`."""
    return to_wire(value, WireFormat.JSON)


def dumps(value: Any, *, indent: Optional[int] = None) -> str:
    buf = msgspec.json.encode(to_json(value))
    if indent:
        buf = msgspec.json.format(buf, indent=indent)
    return buf.decode("utf-8")


def from_json(obj: Any, reader: Reader) -> Any:
    """Parse a JSON object with a Record subclass or an `(obj, fmt)` reader."""
    if isinstance(reader, type) and issubclass(reader, Record):
        return reader.from_obj(obj, WireFormat.JSON)
    return reader(obj, WireFormat.JSON)


def loads(text: Union[str, bytes], reader: Reader) -> Any:
    try:
        obj = msgspec.json.decode(text)
    except RecursionError as e:
        raise DecodeError("malformed JSON: nesting too deep") from e
    except msgspec.DecodeError as e:
        raise DecodeError(f"malformed JSON: {e}") from e
    return from_json(obj, reader)


def signed_from_json(obj: Any) -> SignedTransaction:
    return signed_from_obj(obj, WireFormat.JSON)


__all__ = ["to_json", "dumps", "from_json", "loads", "signed_from_json"]
