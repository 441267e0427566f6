"""Tests for public-key operations."""

from __future__ import annotations

import pytest

from keyseal import (
    HiddenString,
    InvalidKey,
    InvalidMessage,
    InvalidSignature,
    Key,
    KeyKind,
    asymmetric,
    key_factory,
)
from keyseal.encoding import base64url_decode, base64url_encode


def test_shared_secret_agrees():
    alice = key_factory.generate_encryption_key_pair()
    bob = key_factory.generate_encryption_key_pair()
    assert asymmetric.get_shared_secret(
        alice.secret_key, bob.public_key
    ) == asymmetric.get_shared_secret(bob.secret_key, alice.public_key)


def test_shared_secret_rejects_low_order_public_key(encryption_pair):
    zero_public = Key(b"\x00" * 32, KeyKind.ENCRYPTION_PUBLIC)
    with pytest.raises(InvalidKey):
        asymmetric.get_shared_secret(encryption_pair.secret_key, zero_public)


def test_encrypt_decrypt_between_parties(secret):
    alice = key_factory.generate_encryption_key_pair()
    bob = key_factory.generate_encryption_key_pair()
    blob = asymmetric.encrypt(secret, alice.secret_key, bob.public_key, b"aad")
    decrypted = asymmetric.decrypt(blob, bob.secret_key, alice.public_key, b"aad")
    assert decrypted.equals(secret)

    eve = key_factory.generate_encryption_key_pair()
    with pytest.raises(InvalidSignature):
        asymmetric.decrypt(blob, eve.secret_key, alice.public_key, b"aad")
    with pytest.raises(InvalidSignature):
        asymmetric.decrypt(blob, bob.secret_key, alice.public_key, b"other")


def test_encrypt_rejects_signing_keys(signature_pair, encryption_pair, secret):
    with pytest.raises(InvalidKey):
        asymmetric.encrypt(secret, signature_pair.secret_key, encryption_pair.public_key)
    with pytest.raises(InvalidKey):
        asymmetric.encrypt(secret, encryption_pair.secret_key, signature_pair.public_key)


def test_seal_unseal(encryption_pair, secret):
    blob = asymmetric.seal(secret, encryption_pair.public_key)
    assert asymmetric.unseal(blob, encryption_pair.secret_key).equals(secret)


def test_unseal_tampered(encryption_pair, secret):
    raw = bytearray(base64url_decode(asymmetric.seal(secret, encryption_pair.public_key)))
    raw[-1] ^= 1
    with pytest.raises(InvalidSignature):
        asymmetric.unseal(base64url_encode(bytes(raw)), encryption_pair.secret_key)
    with pytest.raises(InvalidMessage):
        asymmetric.unseal(base64url_encode(b"short"), encryption_pair.secret_key)


def test_sign_verify(signature_pair):
    signature = asymmetric.sign(b"message", signature_pair.secret_key)
    assert asymmetric.verify(b"message", signature_pair.public_key, signature)
    assert not asymmetric.verify(b"massage", signature_pair.public_key, signature)
    other = key_factory.generate_signature_key_pair()
    assert not asymmetric.verify(b"message", other.public_key, signature)


def test_verify_rejects_malformed_signature(signature_pair):
    with pytest.raises(InvalidMessage):
        asymmetric.verify(b"message", signature_pair.public_key, base64url_encode(b"x" * 10))


def test_only_signing_secret_keys_sign(encryption_pair, encryption_key, signature_pair):
    with pytest.raises(InvalidKey):
        asymmetric.sign(b"message", encryption_pair.secret_key)
    with pytest.raises(InvalidKey):
        asymmetric.sign(b"message", encryption_key)
    with pytest.raises(InvalidKey):
        asymmetric.sign(b"message", signature_pair.public_key)


def test_sign_and_encrypt(secret):
    sender = key_factory.generate_signature_key_pair()
    recipient = key_factory.generate_signature_key_pair().get_encryption_key_pair()

    blob = asymmetric.sign_and_encrypt(secret, sender.secret_key, recipient.public_key)
    decrypted = asymmetric.verify_and_decrypt(blob, sender.public_key, recipient.secret_key)
    assert decrypted.equals(secret)

    impostor = key_factory.generate_signature_key_pair()
    with pytest.raises(InvalidSignature):
        asymmetric.verify_and_decrypt(blob, impostor.public_key, recipient.secret_key)


def test_verify_and_decrypt_rejects_forged_signature(secret):
    sender = key_factory.generate_signature_key_pair()
    recipient = key_factory.generate_encryption_key_pair()
    # Encrypted with the sender's converted key, but the signature is junk
    forged = asymmetric.encrypt(
        HiddenString(b"\x00" * 64 + secret.get_bytes()),
        sender.get_encryption_key_pair().secret_key,
        recipient.public_key,
    )
    with pytest.raises(InvalidSignature):
        asymmetric.verify_and_decrypt(forged, sender.public_key, recipient.secret_key)
