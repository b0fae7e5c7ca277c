"""
algorand.encoding.msgpack
=========================

Canonical MessagePack codec (msgspec underneath).

Encoding rules
--------------
- maps: string keys, sorted; zero-valued fields omitted (see `record.is_nonzero`)
- integers: smallest msgpack representation (msgspec does this natively)
- byte strings: `bin`; text: `str`

Decoding is total over untrusted input: every failure is a `DecodeError`
(truncation, trailing bytes, wrong types or sizes, out-of-range integers,
unknown keys, oversize payloads). With `require_canonical=True` (or config
`strict_decode`) the input must also be byte-identical to the re-encoding of the
decoded value.

Limits left unset by the caller come from `algorand.config.get_config()`. They
are resolved before any input is read, so an invalid `ALGORAND_*` variable
raises `ConfigError` up front rather than a `DecodeError`.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple, Union

import msgspec

from ..config import get_config
from ..errors import DecodeError
from ..logging import get_logger
from .record import Record, WireFormat, to_wire

log = get_logger(__name__)

Reader = Union[type, Callable[..., Any]]

_encoder = msgspec.msgpack.Encoder()
_decoder = msgspec.msgpack.Decoder()


def encode(value: Any) -> bytes:
    """Canonical bytes of `value` (a Record, or any plain wire value)."""
    return _encoder.encode(to_wire(value, WireFormat.MSGPACK))


def decode_obj(data: bytes, *, max_size: Optional[int] = None) -> Any:
    """Decode one msgpack object into plain Python values."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError("expected bytes", got=type(data).__name__)
    limit = max_size if max_size is not None else get_config().max_payload_bytes
    if len(data) > limit:
        raise DecodeError("payload too large", size=len(data), limit=limit)
    try:
        return _decoder.decode(data)
    except RecursionError as e:
        raise DecodeError("malformed msgpack: nesting too deep") from e
    except (msgspec.DecodeError, TypeError, ValueError) as e:
        raise DecodeError(f"malformed msgpack: {e}") from e


def _limits(require_canonical: Optional[bool], max_size: Optional[int]) -> Tuple[bool, int]:
    if require_canonical is not None and max_size is not None:
        return require_canonical, max_size
    cfg = get_config()
    return (
        cfg.strict_decode if require_canonical is None else require_canonical,
        cfg.max_payload_bytes if max_size is None else max_size,
    )


def _from_obj(reader: Reader) -> Callable[[Any, WireFormat], Any]:
    if isinstance(reader, type) and issubclass(reader, Record):
        return reader.from_obj
    return reader


def decode(
    data: bytes,
    reader: Reader,
    *,
    require_canonical: Optional[bool] = None,
    max_size: Optional[int] = None,
) -> Any:
    """
    Decode `data` as one `reader` value.

    `reader` is a Record subclass, or a callable `(obj, fmt) -> value` such as
    `algorand.types.signed.signed_from_obj`.

    Raises DecodeError for malformed input, and ConfigError when a limit is
    left to the environment and the environment is invalid.
    """
    strict, limit = _limits(require_canonical, max_size)
    obj = decode_obj(data, max_size=limit)
    value = _from_obj(reader)(obj, WireFormat.MSGPACK)
    if strict and encode(value) != bytes(data):
        raise DecodeError("non-canonical encoding", size=len(data))
    log.debug("decoded %s", type(value).__name__, extra={"size": len(data)})
    return value


__all__ = ["encode", "decode", "decode_obj"]
