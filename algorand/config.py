"""
Library configuration: logging, decode guards and CLI key lookup.

- Loads sane defaults and supports overrides via environment variables (ALGORAND_*).
- Values are validated eagerly; a bad value raises ConfigError naming the variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ConfigError

_DEFAULT_MAX_PAYLOAD = 1024 * 1024  # 1 MiB; a signed txn group is far smaller
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")
_LOG_FORMATS = ("text", "json")
_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_bool(name: str, val: Optional[str], default: bool = False) -> bool:
    if val is None:
        return default
    s = val.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean", value=val)


def _parse_positive_int(name: str, val: Any, default: int) -> int:
    if val is None or val == "":
        return default
    try:
        n = int(str(val).strip(), 10)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer", value=val) from e
    if n <= 0:
        raise ConfigError(f"{name} must be positive", value=n)
    return n


def _parse_level(name: str, val: Optional[str]) -> str:
    level = (val or "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"{name} must be one of {', '.join(_LOG_LEVELS)}", value=val)
    return level


def _parse_format(name: str, val: Optional[str]) -> str:
    fmt = (val or "text").strip().lower()
    if fmt not in _LOG_FORMATS:
        raise ConfigError(f"{name} must be 'text' or 'json'", value=val)
    return fmt


@dataclass(slots=True)
class Config:
    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    # Codec guards
    max_payload_bytes: int = _DEFAULT_MAX_PAYLOAD
    strict_decode: bool = False
    # CLI
    secret_key_env: str = field(default="ALGORAND_SECRET_KEY")

    @classmethod
    def from_env(cls, prefix: str = "ALGORAND_") -> "Config":
        """
        Create config from environment variables:

        ALGORAND_LOG_LEVEL          (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        ALGORAND_LOG_FORMAT         (text|json)
        ALGORAND_MAX_PAYLOAD_BYTES  (int, decode guard)
        ALGORAND_STRICT_DECODE      (bool, reject non-canonical encodings)
        ALGORAND_SECRET_KEY_ENV     (name of the env var holding a base64 secret key)
        """
        return cls(
            log_level=_parse_level(f"{prefix}LOG_LEVEL", _env(f"{prefix}LOG_LEVEL")),
            log_format=_parse_format(f"{prefix}LOG_FORMAT", _env(f"{prefix}LOG_FORMAT")),
            max_payload_bytes=_parse_positive_int(
                f"{prefix}MAX_PAYLOAD_BYTES",
                _env(f"{prefix}MAX_PAYLOAD_BYTES"),
                _DEFAULT_MAX_PAYLOAD,
            ),
            strict_decode=_parse_bool(
                f"{prefix}STRICT_DECODE", _env(f"{prefix}STRICT_DECODE")
            ),
            secret_key_env=_env(f"{prefix}SECRET_KEY_ENV", f"{prefix}SECRET_KEY")
            or f"{prefix}SECRET_KEY",
        )

    @classmethod
    def with_overrides(cls, base: Optional["Config"] = None, **overrides: Any) -> "Config":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        data["log_level"] = _parse_level("log_level", str(data["log_level"]))
        data["log_format"] = _parse_format("log_format", str(data["log_format"]))
        data["max_payload_bytes"] = _parse_positive_int(
            "max_payload_bytes", data["max_payload_bytes"], _DEFAULT_MAX_PAYLOAD
        )
        data["strict_decode"] = bool(data["strict_decode"])
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log_level": self.log_level,
            "log_format": self.log_format,
            "max_payload_bytes": int(self.max_payload_bytes),
            "strict_decode": bool(self.strict_decode),
            "secret_key_env": self.secret_key_env,
        }


_current: Optional[Config] = None


def get_config() -> Config:
    """Process-wide config, read from the environment on first use."""
    global _current
    if _current is None:
        _current = Config.from_env()
    return _current


def set_config(cfg: Optional[Config]) -> None:
    """Install `cfg` as the process-wide config (None re-reads the environment)."""
    global _current
    _current = cfg


__all__ = ["Config", "get_config", "set_config"]
