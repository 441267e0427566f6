"""
Pytest configuration and fixtures for keyseal tests.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from keyseal import HiddenString, Key, key_factory, symmetric
from keyseal.config import get_settings
from keyseal.keypair import EncryptionKeyPair, SignatureKeyPair
from keyseal.versions import EnvelopeConfig


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Build settings from a known environment for every test."""
    for name in (
        "KEYSEAL_SECURITY_LEVEL",
        "KEYSEAL_LOG_LEVEL",
        "KEYSEAL_BENCHMARK_ITERATIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def encryption_key() -> Key:
    """A fresh symmetric encryption key."""
    return key_factory.generate_encryption_key()


@pytest.fixture
def authentication_key() -> Key:
    return key_factory.generate_authentication_key()


@pytest.fixture
def signature_pair() -> SignatureKeyPair:
    return key_factory.generate_signature_key_pair()


@pytest.fixture
def encryption_pair() -> EncryptionKeyPair:
    return key_factory.generate_encryption_key_pair()


def make_envelope(
    plaintext: bytes, key: Key, additional_data: bytes, config: EnvelopeConfig
) -> str:
    """Produce an envelope in any version, including decode-only ones."""
    raw = symmetric.seal_envelope(plaintext, key, additional_data, config)
    return config.encoding.encode(raw)


@pytest.fixture
def envelope_factory():
    return make_envelope


@pytest.fixture
def secret() -> HiddenString:
    return HiddenString(b"Sensitive data protected by an authenticated envelope")
