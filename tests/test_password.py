"""Tests for hash-then-encrypt password storage."""

from __future__ import annotations

import pytest

from keyseal import (
    HiddenString,
    InvalidKey,
    InvalidMessage,
    InvalidSignature,
    InvalidType,
    Password,
    SecurityLevel,
    key_factory,
    symmetric,
)
from keyseal.config import get_settings


@pytest.fixture
def stored(encryption_key):
    """A password stored at the interactive level with additional data."""
    return Password.hash(
        HiddenString("correct horse battery staple"),
        encryption_key,
        SecurityLevel.INTERACTIVE,
        b"user:1",
    )


def test_verify_correct_password(stored, encryption_key):
    assert Password.verify(
        HiddenString("correct horse battery staple"), stored, encryption_key, b"user:1"
    )


def test_verify_wrong_password_is_false(stored, encryption_key):
    assert not Password.verify(
        HiddenString("Tr0ub4dor&3"), stored, encryption_key, b"user:1"
    )


def test_stored_value_is_an_envelope(stored, encryption_key):
    with symmetric.decrypt(stored, encryption_key, b"user:1") as hash_str:
        assert hash_str.get_bytes().startswith(b"$argon2id$v=19$m=65536,t=2,p=1$")
    assert b"correct horse" not in stored.encode("ascii")


def test_verify_requires_same_additional_data(stored, encryption_key):
    with pytest.raises(InvalidSignature):
        Password.verify(
            HiddenString("correct horse battery staple"), stored, encryption_key, b"user:2"
        )


def test_verify_with_wrong_key_raises(stored):
    with pytest.raises(InvalidSignature):
        Password.verify(
            HiddenString("correct horse battery staple"),
            stored,
            key_factory.generate_encryption_key(),
            b"user:1",
        )


def test_verify_rejects_truncated_hash(stored, encryption_key):
    with pytest.raises(InvalidMessage):
        Password.verify(HiddenString("x"), stored[:40], encryption_key, b"user:1")
    with pytest.raises(InvalidMessage):
        Password.verify(HiddenString("x"), "short", encryption_key)


def test_needs_rehash_same_level(stored, encryption_key):
    assert not Password.needs_rehash(stored, encryption_key, "interactive", b"user:1")
    assert not Password.needs_rehash(
        stored, encryption_key, SecurityLevel.INTERACTIVE, b"user:1"
    )


@pytest.mark.parametrize("level", ["moderate", SecurityLevel.SENSITIVE])
def test_needs_rehash_other_level(stored, encryption_key, level):
    assert Password.needs_rehash(stored, encryption_key, level, b"user:1")


def test_needs_rehash_non_argon2id(encryption_key):
    stored = symmetric.encrypt(
        HiddenString(b"$2y$10$abcdefghijklmnopqrstuv"), encryption_key
    )
    assert Password.needs_rehash(stored, encryption_key, "interactive")


def test_needs_rehash_wipes_decrypted_hash(stored, encryption_key, monkeypatch):
    opened = []
    real_decrypt = symmetric.decrypt

    def recording_decrypt(*args, **kwargs):
        hidden = real_decrypt(*args, **kwargs)
        opened.append(hidden)
        return hidden

    monkeypatch.setattr(symmetric, "decrypt", recording_decrypt)
    assert not Password.needs_rehash(stored, encryption_key, "interactive", b"user:1")
    assert Password.needs_rehash(stored, encryption_key, "moderate", b"user:1")
    assert len(opened) == 2
    assert all(hidden.wiped for hidden in opened)


def test_needs_rehash_unknown_level(stored, encryption_key):
    with pytest.raises(InvalidType):
        Password.needs_rehash(stored, encryption_key, "paranoid", b"user:1")
    with pytest.raises(InvalidType):
        Password.hash(HiddenString("pw"), encryption_key, "paranoid")


def test_default_level_comes_from_settings(encryption_key, monkeypatch):
    stored = Password.hash(HiddenString("pw"), encryption_key)
    assert not Password.needs_rehash(stored, encryption_key)

    monkeypatch.setenv("KEYSEAL_SECURITY_LEVEL", "moderate")
    get_settings.cache_clear()
    assert Password.needs_rehash(stored, encryption_key)


def test_hash_requires_symmetric_encryption_key(authentication_key):
    with pytest.raises(InvalidKey):
        Password.hash(HiddenString("pw"), authentication_key)


def test_password_must_be_hidden(encryption_key):
    with pytest.raises(InvalidType):
        Password.hash("plain str", encryption_key)
