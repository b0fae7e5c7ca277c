"""
algorand.encoding.record
========================

Shared machinery behind the canonical msgpack form and the JSON view:

- `is_nonzero(value)`: the one zero-value test every encodable type answers.
  Records, addresses, keys and signatures answer it themselves through an
  `is_nonzero()` method; builtins (int, bool, bytes, str, sequences, None) are
  handled here.
- `Record`: mixin for frozen dataclasses that list their wire fields via
  `wire_items()` and parse themselves from a `FieldReader` via `read()`.
  `to_obj()` yields a map with keys sorted and zero-valued fields dropped.
- `to_wire(value, fmt)`: lower a value to plain msgpack/JSON objects.
- `FieldReader`: typed, path-aware access to a decoded map. Every key must be
  consumed; anything left over is an unknown field and a DecodeError.

The two formats differ only in how opaque values are spelled:

    value        MSGPACK        JSON
    bytes        bin            base64 string
    Address      bin (32)       58-char checksummed text
    Signature    bin (64)       base64 string
"""

from __future__ import annotations

import base64
import binascii
from enum import IntEnum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, TypeVar

from ..address import ADDRESS_SIZE, Address, from_text as _address_from_text
from ..crypto.signature import PublicKey, Signature
from ..errors import AddressError, DecodeError, EncodeError

UINT64_MAX = 2**64 - 1
DIGEST_SIZE = 32

T = TypeVar("T")
R = TypeVar("R", bound="Record")

_MISSING = object()


class WireFormat(IntEnum):
    MSGPACK = 0
    JSON = 1

    def __str__(self) -> str:  # pragma: no cover - trivial
        return "msgpack" if self is WireFormat.MSGPACK else "json"


# ------------------------------------------
# Zero values
# ------------------------------------------


def is_nonzero(value: Any) -> bool:
    """False for the zero value of `value`'s type (dropped from canonical maps)."""
    probe = getattr(value, "is_nonzero", None)
    if probe is not None:
        return bool(probe())
    if value is None:
        return False
    if isinstance(value, (bytes, bytearray, str, list, tuple)):
        return len(value) > 0
    if isinstance(value, (bool, int)):
        return value != 0
    raise EncodeError("value has no zero test", type=type(value).__name__)


# ------------------------------------------
# Record mixin
# ------------------------------------------


class Record:
    """
    Base for wire records. Subclasses are frozen dataclasses implementing
    `wire_items()` and `read()`; everything else comes from here.
    """

    __slots__ = ()

    def wire_items(self) -> Iterable[Tuple[str, Any]]:  # pragma: no cover - abstract
        raise NotImplementedError

    @classmethod
    def read(cls: Type[R], r: "FieldReader") -> R:  # pragma: no cover - abstract
        raise NotImplementedError

    def is_nonzero(self) -> bool:
        return any(is_nonzero(v) for _, v in self.wire_items())

    def to_obj(self, fmt: WireFormat = WireFormat.MSGPACK) -> Dict[str, Any]:
        return canonical_map(self.wire_items(), fmt)

    @classmethod
    def from_obj(cls: Type[R], obj: Any, fmt: WireFormat = WireFormat.MSGPACK, path: str = "") -> R:
        return read_record(obj, cls.read, fmt, path)


def canonical_map(items: Iterable[Tuple[str, Any]], fmt: WireFormat) -> Dict[str, Any]:
    kept = [(k, v) for k, v in items if is_nonzero(v)]
    kept.sort(key=lambda kv: kv[0])
    return {k: to_wire(v, fmt) for k, v in kept}


def read_record(
    obj: Any,
    reader: Callable[["FieldReader"], T],
    fmt: WireFormat = WireFormat.MSGPACK,
    path: str = "",
) -> T:
    """Run `reader` over map `obj`; reject leftovers; surface bad values as DecodeError."""
    r = FieldReader(obj, fmt, path)
    try:
        value = reader(r)
    except DecodeError:
        raise
    except (ValueError, TypeError) as e:
        raise DecodeError(f"invalid value: {e}", path=path or "$") from e
    r.done()
    return value


# ------------------------------------------
# Lowering
# ------------------------------------------


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def to_wire(value: Any, fmt: WireFormat = WireFormat.MSGPACK) -> Any:
    """Lower `value` to plain objects msgspec can serialize in `fmt`."""
    if isinstance(value, Record):
        return value.to_obj(fmt)
    if isinstance(value, Address):
        return value.raw if fmt is WireFormat.MSGPACK else value.to_text()
    if isinstance(value, (Signature, PublicKey)):
        return value.raw if fmt is WireFormat.MSGPACK else _b64(value.raw)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) if fmt is WireFormat.MSGPACK else _b64(bytes(value))
    if isinstance(value, bool) or isinstance(value, str):
        return value
    if isinstance(value, int):
        if not 0 <= value <= UINT64_MAX:
            raise EncodeError("integer out of uint64 range", value=int(value))
        return int(value)
    if isinstance(value, (list, tuple)):
        return [to_wire(v, fmt) for v in value]
    raise EncodeError("value cannot be encoded", type=type(value).__name__)


# ------------------------------------------
# Constructor-side normalizers (used in __post_init__)
# ------------------------------------------


def check_uint(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"{name} must be an integer", field=name, type=type(value).__name__)
    if not 0 <= value <= UINT64_MAX:
        raise EncodeError(f"{name} out of uint64 range", field=name, value=int(value))
    return int(value)


def check_bytes(name: str, value: Any, *, size: Optional[int] = None, max_len: Optional[int] = None) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise EncodeError(f"{name} must be bytes", field=name, type=type(value).__name__)
    if size is not None and value and len(value) != size:
        raise EncodeError(f"{name} must be {size} bytes", field=name, got=len(value))
    if max_len is not None and len(value) > max_len:
        raise EncodeError(f"{name} longer than {max_len} bytes", field=name, got=len(value))
    # fixed-size arrays are zero when every byte is zero
    if size is not None and not any(value):
        return b""
    return bytes(value)


def check_digest(name: str, value: Any) -> Optional[bytes]:
    if value is None:
        return None
    if not isinstance(value, (bytes, bytearray)) or len(value) != DIGEST_SIZE:
        raise EncodeError(f"{name} must be {DIGEST_SIZE} bytes or None", field=name)
    return bytes(value) if any(value) else None


def check_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise EncodeError(f"{name} must be a string", field=name, type=type(value).__name__)
    return value


def check_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise EncodeError(f"{name} must be a bool", field=name, type=type(value).__name__)
    return value


def check_address(name: str, value: Any) -> Address:
    if not isinstance(value, Address):
        raise EncodeError(f"{name} must be an Address", field=name, type=type(value).__name__)
    return value


def check_tuple(name: str, value: Any, item: Callable[[str, Any], T]) -> Tuple[T, ...]:
    if not isinstance(value, (list, tuple)):
        raise EncodeError(f"{name} must be a sequence", field=name, type=type(value).__name__)
    return tuple(item(f"{name}[{i}]", v) for i, v in enumerate(value))


# ------------------------------------------
# Reading
# ------------------------------------------


class FieldReader:
    """
    Typed accessor over one decoded map. Absent keys yield the zero value of the
    requested type. Explicit zero values are accepted (strict mode catches them).
    """

    def __init__(self, obj: Any, fmt: WireFormat = WireFormat.MSGPACK, path: str = ""):
        if not isinstance(obj, dict):
            raise DecodeError("expected a map", path=path or "$", got=type(obj).__name__)
        for k in obj:
            if not isinstance(k, str):
                raise DecodeError("map keys must be strings", path=path or "$", key=repr(k))
        self._obj = obj
        self.fmt = fmt
        self.path = path
        self._seen: set[str] = set()

    # -- plumbing --

    def where(self, key: str) -> str:
        return f"{self.path}.{key}" if self.path else key

    def error(self, key: str, message: str, **data: Any) -> DecodeError:
        return DecodeError(message, path=self.where(key), **data)

    def has(self, key: str) -> bool:
        return key in self._obj

    def raw(self, key: str) -> Any:
        self._seen.add(key)
        return self._obj.get(key, _MISSING)

    def done(self) -> None:
        unknown = sorted(set(self._obj) - self._seen)
        if unknown:
            raise DecodeError("unknown field", path=self.where(unknown[0]), fields=unknown)

    # -- scalars --

    def _uint_value(self, key: str, v: Any) -> int:
        if isinstance(v, bool) or not isinstance(v, int):
            raise self.error(key, "expected an unsigned integer", got=type(v).__name__)
        if not 0 <= v <= UINT64_MAX:
            raise self.error(key, "integer out of uint64 range")
        return v

    def uint(self, key: str) -> int:
        v = self.raw(key)
        return 0 if v is _MISSING else self._uint_value(key, v)

    def boolean(self, key: str) -> bool:
        v = self.raw(key)
        if v is _MISSING:
            return False
        if not isinstance(v, bool):
            raise self.error(key, "expected a bool", got=type(v).__name__)
        return v

    def text(self, key: str) -> str:
        v = self.raw(key)
        if v is _MISSING:
            return ""
        if not isinstance(v, str):
            raise self.error(key, "expected a string", got=type(v).__name__)
        return v

    def _bytes_value(self, key: str, v: Any, size: Optional[int]) -> bytes:
        if self.fmt is WireFormat.MSGPACK:
            if not isinstance(v, (bytes, bytearray)):
                raise self.error(key, "expected a byte string", got=type(v).__name__)
            out = bytes(v)
        else:
            if not isinstance(v, str):
                raise self.error(key, "expected a base64 string", got=type(v).__name__)
            try:
                out = base64.b64decode(v, validate=True)
            except (binascii.Error, ValueError) as e:
                raise self.error(key, "invalid base64") from e
        if size is not None and len(out) != size:
            raise self.error(key, f"expected {size} bytes", got=len(out))
        return out

    def bytes_(self, key: str, size: Optional[int] = None) -> bytes:
        v = self.raw(key)
        return b"" if v is _MISSING else self._bytes_value(key, v, size)

    def digest(self, key: str) -> Optional[bytes]:
        v = self.raw(key)
        return None if v is _MISSING else self._bytes_value(key, v, DIGEST_SIZE)

    def _address_value(self, key: str, v: Any) -> Address:
        if self.fmt is WireFormat.MSGPACK:
            return Address(self._bytes_value(key, v, ADDRESS_SIZE))
        if not isinstance(v, str):
            raise self.error(key, "expected address text", got=type(v).__name__)
        try:
            return _address_from_text(v)
        except AddressError as e:
            raise self.error(key, e.message) from e

    def address(self, key: str) -> Address:
        v = self.raw(key)
        return Address.zero() if v is _MISSING else self._address_value(key, v)

    # -- sequences --

    def _list(self, key: str, item: Callable[[str, Any], T]) -> Tuple[T, ...]:
        v = self.raw(key)
        if v is _MISSING:
            return ()
        if not isinstance(v, list):
            raise self.error(key, "expected an array", got=type(v).__name__)
        return tuple(item(f"{key}[{i}]", x) for i, x in enumerate(v))

    def uint_list(self, key: str) -> Tuple[int, ...]:
        return self._list(key, self._uint_value)

    def bytes_list(self, key: str) -> Tuple[bytes, ...]:
        return self._list(key, lambda k, x: self._bytes_value(k, x, None))

    def address_list(self, key: str) -> Tuple[Address, ...]:
        return self._list(key, self._address_value)

    # -- nested --

    def record(self, key: str, cls: Type[R]) -> R:
        v = self.raw(key)
        if v is _MISSING:
            return cls()
        return cls.from_obj(v, self.fmt, self.where(key))


__all__ = [
    "UINT64_MAX",
    "DIGEST_SIZE",
    "WireFormat",
    "Record",
    "FieldReader",
    "is_nonzero",
    "canonical_map",
    "read_record",
    "to_wire",
    "check_uint",
    "check_bytes",
    "check_digest",
    "check_text",
    "check_bool",
    "check_address",
    "check_tuple",
]
