"""
Authenticated symmetric envelopes.

Envelope layout (before string encoding):

    header(4) || salt || nonce || ciphertext || tag

A fresh salt and the master key derive a per-message key; the header and
the caller's additional data are bound into the AEAD tag, so changing
either (or any other byte) makes decryption fail as a whole.

This module also provides symmetric message authentication with a
keyed BLAKE2b MAC.
"""

from __future__ import annotations

import logging

from . import primitives
from .encoding import base64url_decode, base64url_encode
from .errors import InvalidMessage, InvalidType
from .hidden import HiddenString
from .keys import Key, KeyKind
from .versions import CURRENT_VERSION, HEADER_SIZE, EnvelopeConfig, resolve

logger = logging.getLogger(__name__)

MAC_SIZE: int = 32


def _check_additional_data(additional_data: bytes) -> bytes:
    if isinstance(additional_data, str):
        return additional_data.encode("utf-8")
    if not isinstance(additional_data, (bytes, bytearray)):
        raise InvalidType("Additional data must be bytes or str")
    return bytes(additional_data)


def seal_envelope(
    plaintext: bytes, key: Key, additional_data: bytes, config: EnvelopeConfig
) -> bytes:
    """Build the raw envelope for ``plaintext`` under ``config``."""
    salt = primitives.generate_random_bytes(config.salt_length)
    nonce = primitives.generate_random_bytes(config.nonce_length)
    message_key = primitives.derive_message_key(
        key.get_raw_key_material(), salt, config.hkdf_info
    )
    sealed = primitives.authenticated_encrypt(
        config.cipher,
        plaintext,
        message_key,
        nonce,
        config.header + additional_data,
    )
    return config.header + salt + nonce + sealed


def open_envelope(raw: bytes, key: Key, additional_data: bytes, config: EnvelopeConfig) -> bytes:
    """Split a raw envelope and hand it to the AEAD for verification."""
    if len(raw) < config.shortest_ciphertext_length:
        raise InvalidMessage("Message is too short")
    if not primitives.constant_time_equal(raw[:HEADER_SIZE], config.header):
        raise InvalidMessage("Invalid version tag")

    salt_end = HEADER_SIZE + config.salt_length
    nonce_end = salt_end + config.nonce_length
    salt = raw[HEADER_SIZE:salt_end]
    nonce = raw[salt_end:nonce_end]
    sealed = raw[nonce_end:]

    message_key = primitives.derive_message_key(
        key.get_raw_key_material(), salt, config.hkdf_info
    )
    return primitives.authenticated_decrypt(
        config.cipher,
        sealed,
        message_key,
        nonce,
        config.header + additional_data,
    )


def encrypt(
    plaintext: HiddenString,
    key: Key,
    additional_data: bytes = b"",
) -> str:
    """
    Encrypt plaintext with authenticated additional data.

    Args:
        plaintext: The secret to encrypt
        key: A symmetric encryption key
        additional_data: Authenticated but unencrypted context; the same
            value must be supplied to decrypt()

    Returns:
        A base64url envelope in the current version

    Raises:
        InvalidKey: If key is not a symmetric encryption key
        InvalidType: If plaintext is not a HiddenString
        CannotPerformOperation: If the primitive layer fails
    """
    if not isinstance(plaintext, HiddenString):
        raise InvalidType("Plaintext must be a HiddenString")
    key.require(KeyKind.SYMMETRIC_ENCRYPTION)
    raw = seal_envelope(
        plaintext.get_bytes(),
        key,
        _check_additional_data(additional_data),
        CURRENT_VERSION,
    )
    return CURRENT_VERSION.encoding.encode(raw)


def decrypt(
    ciphertext: str,
    key: Key,
    additional_data: bytes = b"",
) -> HiddenString:
    """
    Verify and decrypt an envelope.

    Args:
        ciphertext: Envelope produced by encrypt() (or a legacy version)
        key: The symmetric encryption key used to encrypt
        additional_data: The additional data used to encrypt

    Returns:
        The plaintext in a fresh HiddenString

    Raises:
        InvalidMessage: If the envelope is malformed, truncated or of an
            unknown version
        InvalidSignature: If authentication fails (tampering, wrong key,
            wrong additional data)
    """
    key.require(KeyKind.SYMMETRIC_ENCRYPTION)
    additional_data = _check_additional_data(additional_data)
    config = resolve(ciphertext).config_or_raise()
    if len(ciphertext) < config.shortest_encoded_length:
        logger.debug("Rejected envelope shorter than %d characters", config.shortest_encoded_length)
        raise InvalidMessage("Message is too short")
    raw = config.encoding.decode(ciphertext)
    return HiddenString(open_envelope(raw, key, additional_data, config))


# =============================================================================
# Message Authentication
# =============================================================================


def authenticate(message: bytes, key: Key) -> str:
    """
    Calculate a MAC over a message.

    Args:
        message: Data to authenticate
        key: A symmetric authentication key

    Returns:
        base64url-encoded 32-byte MAC
    """
    key.require(KeyKind.SYMMETRIC_AUTHENTICATION)
    return base64url_encode(
        primitives.keyed_hash(bytes(message), key.get_raw_key_material(), MAC_SIZE)
    )


def verify(message: bytes, key: Key, mac: str) -> bool:
    """
    Check a MAC produced by authenticate().

    Returns:
        True if the MAC is valid, False otherwise

    Raises:
        InvalidMessage: If the MAC is not a well-formed 32-byte MAC
    """
    key.require(KeyKind.SYMMETRIC_AUTHENTICATION)
    decoded = base64url_decode(mac)
    if len(decoded) != MAC_SIZE:
        raise InvalidMessage("Message authentication code is not the correct length")
    expected = primitives.keyed_hash(bytes(message), key.get_raw_key_material(), MAC_SIZE)
    return primitives.constant_time_equal(expected, decoded)
