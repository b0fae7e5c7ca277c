"""
Config: defaults, ALGORAND_* environment overrides, validation.
"""

from __future__ import annotations

import pytest

from algorand.config import Config, get_config, set_config
from algorand.errors import ConfigError


def test_defaults():
    cfg = Config.from_env()
    assert cfg.log_level == "INFO"
    assert cfg.log_format == "text"
    assert cfg.max_payload_bytes == 1024 * 1024
    assert cfg.strict_decode is False
    assert cfg.secret_key_env == "ALGORAND_SECRET_KEY"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ALGORAND_LOG_LEVEL", "debug")
    monkeypatch.setenv("ALGORAND_LOG_FORMAT", "JSON")
    monkeypatch.setenv("ALGORAND_MAX_PAYLOAD_BYTES", "4096")
    monkeypatch.setenv("ALGORAND_STRICT_DECODE", "yes")
    monkeypatch.setenv("ALGORAND_SECRET_KEY_ENV", "MY_KEY")
    cfg = Config.from_env()
    assert cfg.to_dict() == {
        "log_level": "DEBUG",
        "log_format": "json",
        "max_payload_bytes": 4096,
        "strict_decode": True,
        "secret_key_env": "MY_KEY",
    }


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("X_MAX_PAYLOAD_BYTES", "10")
    assert Config.from_env(prefix="X_").max_payload_bytes == 10


@pytest.mark.parametrize(
    "name, value",
    [
        ("ALGORAND_LOG_LEVEL", "LOUD"),
        ("ALGORAND_LOG_FORMAT", "xml"),
        ("ALGORAND_MAX_PAYLOAD_BYTES", "lots"),
        ("ALGORAND_MAX_PAYLOAD_BYTES", "0"),
        ("ALGORAND_STRICT_DECODE", "maybe"),
    ],
)
def test_invalid_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError) as exc:
        Config.from_env()
    assert name in exc.value.message


def test_with_overrides_validates_and_ignores_unknown():
    base = Config()
    cfg = Config.with_overrides(base, log_level="warning", nope=1)
    assert cfg.log_level == "WARNING"
    assert base.log_level == "INFO"
    with pytest.raises(ConfigError):
        Config.with_overrides(base, max_payload_bytes=-1)


def test_process_wide_config(monkeypatch):
    monkeypatch.setenv("ALGORAND_STRICT_DECODE", "1")
    assert get_config().strict_decode is True
    set_config(Config(strict_decode=False))
    assert get_config().strict_decode is False
