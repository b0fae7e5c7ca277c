"""
algorand.errors
---------------

A small, consistent error system for the signing core.

Design goals
------------
- One root `AlgorandError` with machine-friendly `code` and optional `data`.
- A clear split between *malformed input* (bytes/text that do not parse) and
  *verification failure* (well-formed values whose authorization does not check
  out), so callers can tell garbage from forgeries.
- Safe JSON representation (`to_dict`) suitable for logs and CLI output.

Parsing helpers that face attacker-controlled input (`pk_from_bytes`,
`sk_from_text`, `verify_transaction`, ...) return ``None``/``False`` instead of
raising; the classes below are raised by decoders and by the explicit
`authenticate` path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    INTERNAL = "ALGO/INTERNAL"
    CONFIG = "ALGO/CONFIG"

    # Encoding / decoding
    ENCODE = "ALGO/ENCODE"
    MALFORMED = "ALGO/MALFORMED"
    DECODE = "ALGO/DECODE"
    ADDRESS = "ALGO/ADDRESS"
    KEY_MISMATCH = "ALGO/KEY_MISMATCH"

    # Authorization
    VERIFICATION = "ALGO/VERIFICATION"

    # Key generation
    ENTROPY = "ALGO/ENTROPY"

    # Transport collaborator
    TRANSPORT = "ALGO/TRANSPORT"


@dataclass(eq=False)
class AlgorandError(Exception):
    """
    Root error for the package.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs; never contains key material.
    data: dict
        Optional machine data (field paths, sizes). Must be JSON-serializable.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{getattr(self.code, 'value', self.code)}: {self.message}")

    def with_context(self, **ctx: Any) -> "AlgorandError":
        """Return a *new* error with extra context merged (does not mutate)."""
        err = type(self).__new__(type(self))
        err.__dict__.update(self.__dict__)
        err.args = self.args
        err.data = {**self.data, **_jsonmap(ctx)}
        return err

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        out = {
            "code": str(getattr(self.code, "value", self.code)),
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:
        code = getattr(self.code, "value", self.code)
        parts = [f"{code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class ConfigError(AlgorandError, ValueError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


class EncodeError(AlgorandError, ValueError):
    """An in-memory value cannot be put on the wire (wrong type, out of range)."""

    def __init__(self, message="value cannot be encoded", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENCODE, message=message, data=_jsonmap(data))


class MalformedInput(AlgorandError, ValueError):
    """Bytes or text that do not parse into a well-formed value."""

    def __init__(self, message="malformed input", **data: Any) -> None:
        super().__init__(code=ErrorCode.MALFORMED, message=message, data=_jsonmap(data))


class DecodeError(MalformedInput):
    """Structural violation found while decoding canonical msgpack or JSON."""

    def __init__(self, message="malformed encoding", **data: Any) -> None:
        super().__init__(message, **data)
        self.code = ErrorCode.DECODE


class AddressError(MalformedInput):
    """Address text or bytes of the wrong shape, or a bad checksum."""

    def __init__(self, message="malformed address", **data: Any) -> None:
        super().__init__(message, **data)
        self.code = ErrorCode.ADDRESS


class KeyMismatchError(MalformedInput):
    """Imported secret and public key halves disagree."""

    def __init__(self, message="secret and public key do not match", **data: Any) -> None:
        super().__init__(message, **data)
        self.code = ErrorCode.KEY_MISMATCH


class VerificationError(AlgorandError):
    """A well-formed envelope whose authorization does not check out."""

    def __init__(self, message="verification failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.VERIFICATION, message=message, data=_jsonmap(data))


class EntropyError(AlgorandError):
    """The secure random source failed; never retried."""

    def __init__(self, message="secure random source failed", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENTROPY, message=message, data=_jsonmap(data))


class TransportError(AlgorandError):
    def __init__(self, message="transport error", **data: Any) -> None:
        super().__init__(code=ErrorCode.TRANSPORT, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "ErrorCode",
    "AlgorandError",
    "ConfigError",
    "EncodeError",
    "MalformedInput",
    "DecodeError",
    "AddressError",
    "KeyMismatchError",
    "VerificationError",
    "EntropyError",
    "TransportError",
]
