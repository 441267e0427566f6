"""Tests for settings and the security level table."""

from __future__ import annotations

import os

import pytest

from keyseal import ConfigError, InvalidType, SecurityLevel, Settings, get_settings
from keyseal.config import SECURITY_LEVELS


def test_defaults():
    settings = Settings.from_env()
    assert settings.default_security_level is SecurityLevel.INTERACTIVE
    assert settings.log_level == "WARNING"
    assert settings.benchmark_iterations == 100


def test_from_env(monkeypatch):
    monkeypatch.setenv("KEYSEAL_SECURITY_LEVEL", "Sensitive")
    monkeypatch.setenv("KEYSEAL_LOG_LEVEL", "debug")
    monkeypatch.setenv("KEYSEAL_BENCHMARK_ITERATIONS", "7")
    settings = Settings.from_env()
    assert settings.default_security_level is SecurityLevel.SENSITIVE
    assert settings.log_level == "DEBUG"
    assert settings.benchmark_iterations == 7


def test_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("KEYSEAL_BENCHMARK_ITERATIONS=3\n")
    try:
        assert Settings.from_env(str(env_file)).benchmark_iterations == 3
    finally:
        os.environ.pop("KEYSEAL_BENCHMARK_ITERATIONS", None)


@pytest.mark.parametrize(
    "name,value",
    [
        ("KEYSEAL_SECURITY_LEVEL", "paranoid"),
        ("KEYSEAL_LOG_LEVEL", "LOUD"),
        ("KEYSEAL_BENCHMARK_ITERATIONS", "many"),
        ("KEYSEAL_BENCHMARK_ITERATIONS", "0"),
    ],
)
def test_invalid_env(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        Settings.from_env()


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.log_level = "DEBUG"
    with pytest.raises(TypeError):
        SECURITY_LEVELS[SecurityLevel.INTERACTIVE] = None


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "level,prefix",
    [
        ("interactive", b"$argon2id$v=19$m=65536,t=2,p=1$"),
        ("moderate", b"$argon2id$v=19$m=262144,t=3,p=1$"),
        ("sensitive", b"$argon2id$v=19$m=1048576,t=4,p=1$"),
    ],
)
def test_level_table(level, prefix):
    assert Settings().kdf_limits(level).hash_prefix() == prefix


def test_unknown_level_is_an_error():
    with pytest.raises(InvalidType):
        Settings().kdf_limits("paranoid")
    with pytest.raises(InvalidType):
        Settings().kdf_limits(3)
