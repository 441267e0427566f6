"""
Key generation, password-based derivation, and key import/export.

Exported keys are hex strings:

    hex( KEY_HEADER(4) || raw key || BLAKE2b-256(header || raw key) )

Secret keys are always exported into a HiddenString. Key pairs export
(and are rebuilt from) their secret key.
"""

from __future__ import annotations

import logging

from . import primitives
from .config import LevelLike, get_settings
from .encoding import hex_decode, hex_encode
from .errors import InvalidKey, InvalidMessage, InvalidSalt, InvalidType
from .hidden import HiddenString
from .keypair import EncryptionKeyPair, KeyPair, SignatureKeyPair
from .keys import Key, KeyKind

logger = logging.getLogger(__name__)

KEY_HEADER: bytes = b"\x31\x40\x05\x00"
CHECKSUM_SIZE: int = 32


# =============================================================================
# Generation
# =============================================================================


def generate_encryption_key() -> Key:
    """Generate a random symmetric encryption key."""
    return Key(
        primitives.generate_random_bytes(primitives.SYMMETRIC_KEY_SIZE),
        KeyKind.SYMMETRIC_ENCRYPTION,
    )


def generate_authentication_key() -> Key:
    """Generate a random symmetric authentication (MAC) key."""
    return Key(
        primitives.generate_random_bytes(primitives.SYMMETRIC_KEY_SIZE),
        KeyKind.SYMMETRIC_AUTHENTICATION,
    )


def generate_encryption_key_pair() -> EncryptionKeyPair:
    return EncryptionKeyPair(
        Key(
            primitives.generate_random_bytes(primitives.X25519_KEY_SIZE),
            KeyKind.ENCRYPTION_SECRET,
        )
    )


def generate_signature_key_pair() -> SignatureKeyPair:
    secret, _ = primitives.signature_keypair_from_seed(
        primitives.generate_random_bytes(primitives.ED25519_SEED_SIZE)
    )
    return SignatureKeyPair(Key(secret, KeyKind.SIGNATURE_SECRET))


# =============================================================================
# Password-based derivation
# =============================================================================


def _derive(password: HiddenString, salt: bytes, level: LevelLike) -> bytes:
    if not isinstance(password, HiddenString):
        raise InvalidType("Password must be a HiddenString")
    if not isinstance(salt, (bytes, bytearray)):
        raise InvalidType("Salt must be bytes")
    if len(salt) != primitives.PWHASH_SALT_SIZE:
        raise InvalidSalt(
            f"Expected {primitives.PWHASH_SALT_SIZE} bytes of salt, got {len(salt)}"
        )
    limits = get_settings().kdf_limits(level)
    return primitives.derive_key_from_password(
        password.get_bytes(), bytes(salt), limits.opslimit, limits.memlimit
    )


def derive_encryption_key(
    password: HiddenString, salt: bytes, level: LevelLike = None
) -> Key:
    """Derive a symmetric encryption key from a password and a 16-byte salt."""
    return Key(_derive(password, salt, level), KeyKind.SYMMETRIC_ENCRYPTION)


def derive_authentication_key(
    password: HiddenString, salt: bytes, level: LevelLike = None
) -> Key:
    return Key(_derive(password, salt, level), KeyKind.SYMMETRIC_AUTHENTICATION)


def derive_encryption_key_pair(
    password: HiddenString, salt: bytes, level: LevelLike = None
) -> EncryptionKeyPair:
    return EncryptionKeyPair(
        Key(_derive(password, salt, level), KeyKind.ENCRYPTION_SECRET)
    )


def derive_signature_key_pair(
    password: HiddenString, salt: bytes, level: LevelLike = None
) -> SignatureKeyPair:
    secret, _ = primitives.signature_keypair_from_seed(_derive(password, salt, level))
    return SignatureKeyPair(Key(secret, KeyKind.SIGNATURE_SECRET))


# =============================================================================
# Import / Export
# =============================================================================


def _checksum(data: bytes) -> bytes:
    return primitives.generic_hash(data, CHECKSUM_SIZE)


def export_key(key: Key | KeyPair) -> HiddenString:
    """
    Serialize a key (or a key pair's secret key) for storage.

    Returns:
        Hex-encoded key with version header and checksum
    """
    if isinstance(key, KeyPair):
        key = key.secret_key
    if not isinstance(key, Key):
        raise InvalidType("Can only export Key or KeyPair objects")
    data = KEY_HEADER + key.get_raw_key_material()
    return HiddenString(hex_encode(data + _checksum(data)))


def import_key(exported: HiddenString | str, kind: KeyKind) -> Key:
    """
    Rebuild a key from export_key() output.

    Raises:
        InvalidKey: If the data is malformed, has the wrong header or
            length for ``kind``, or fails its checksum
    """
    if isinstance(exported, HiddenString):
        try:
            text = exported.get_string("ascii")
        except UnicodeDecodeError as e:
            raise InvalidKey("Exported key is not valid hex") from e
    elif isinstance(exported, str):
        text = exported
    else:
        raise InvalidType("Exported key must be a HiddenString or str")
    try:
        data = hex_decode(text)
    except InvalidMessage as e:
        raise InvalidKey("Exported key is not valid hex") from e

    expected_length = len(KEY_HEADER) + kind.length + CHECKSUM_SIZE
    if len(data) != expected_length:
        raise InvalidKey(
            f"Exported {kind} key has length {len(data)}, expected {expected_length}"
        )
    if not primitives.constant_time_equal(data[: len(KEY_HEADER)], KEY_HEADER):
        raise InvalidKey("Exported key has an unknown version header")

    body = data[:-CHECKSUM_SIZE]
    if not primitives.constant_time_equal(_checksum(body), data[-CHECKSUM_SIZE:]):
        logger.debug("Exported key checksum mismatch")
        raise InvalidKey("Checksum validation fail")
    return Key(body[len(KEY_HEADER) :], kind)


def import_encryption_key_pair(exported: HiddenString | str) -> EncryptionKeyPair:
    return EncryptionKeyPair(import_key(exported, KeyKind.ENCRYPTION_SECRET))


def import_signature_key_pair(exported: HiddenString | str) -> SignatureKeyPair:
    return SignatureKeyPair(import_key(exported, KeyKind.SIGNATURE_SECRET))
