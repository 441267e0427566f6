"""
Typed key material.

A Key is raw bytes plus a KeyKind. The kind is a closed enumeration;
everything an operation needs to know about a key (signing or
encryption, public or secret, symmetric or asymmetric) is derived from
it and cannot change after construction.
"""

from __future__ import annotations

from enum import Enum

from . import primitives
from .errors import InvalidKey, InvalidType


class KeyKind(Enum):
    """Every kind of key keyseal knows about."""

    SYMMETRIC_ENCRYPTION = "symmetric_encryption"
    SYMMETRIC_AUTHENTICATION = "symmetric_authentication"
    ENCRYPTION_SECRET = "encryption_secret"
    ENCRYPTION_PUBLIC = "encryption_public"
    SIGNATURE_SECRET = "signature_secret"
    SIGNATURE_PUBLIC = "signature_public"

    def __str__(self) -> str:
        return self.value

    @property
    def length(self) -> int:
        """Raw key length in bytes."""
        return _KEY_LENGTHS[self]

    @property
    def is_asymmetric(self) -> bool:
        return self not in (
            KeyKind.SYMMETRIC_ENCRYPTION,
            KeyKind.SYMMETRIC_AUTHENTICATION,
        )

    @property
    def is_public(self) -> bool:
        return self in (KeyKind.ENCRYPTION_PUBLIC, KeyKind.SIGNATURE_PUBLIC)

    @property
    def is_signing(self) -> bool:
        # Symmetric authentication keys "sign" with a MAC
        return self in (
            KeyKind.SYMMETRIC_AUTHENTICATION,
            KeyKind.SIGNATURE_SECRET,
            KeyKind.SIGNATURE_PUBLIC,
        )

    @property
    def is_encryption(self) -> bool:
        return self in (
            KeyKind.SYMMETRIC_ENCRYPTION,
            KeyKind.ENCRYPTION_SECRET,
            KeyKind.ENCRYPTION_PUBLIC,
        )


_KEY_LENGTHS = {
    KeyKind.SYMMETRIC_ENCRYPTION: primitives.SYMMETRIC_KEY_SIZE,
    KeyKind.SYMMETRIC_AUTHENTICATION: primitives.SYMMETRIC_KEY_SIZE,
    KeyKind.ENCRYPTION_SECRET: primitives.X25519_KEY_SIZE,
    KeyKind.ENCRYPTION_PUBLIC: primitives.X25519_KEY_SIZE,
    KeyKind.SIGNATURE_SECRET: primitives.ED25519_SECRET_KEY_SIZE,
    KeyKind.SIGNATURE_PUBLIC: primitives.ED25519_PUBLIC_KEY_SIZE,
}


class Key:
    """
    Immutable key material with automatic memory cleanup on deletion.

    Uses bytearray internally for mutable zeroing in __del__.
    Note: Python's garbage collector doesn't guarantee immediate cleanup,
    so this is best-effort zeroization.
    """

    __slots__ = ("_kind", "_bytes")

    def __init__(self, key_bytes: bytes | bytearray, kind: KeyKind) -> None:
        """
        Create a Key from raw bytes.

        Args:
            key_bytes: Raw key material
            kind: What the key may be used for

        Raises:
            InvalidType: If key_bytes is not bytes or kind is not a KeyKind
            InvalidKey: If the length does not match the kind
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidType("Key must be bytes or bytearray")
        if not isinstance(kind, KeyKind):
            raise InvalidType("Key kind must be a KeyKind")
        if len(key_bytes) != kind.length:
            raise InvalidKey(
                f"Invalid {kind} key size: expected {kind.length}, got {len(key_bytes)}"
            )
        if kind is KeyKind.SIGNATURE_SECRET and not primitives.constant_time_equal(
            bytes(key_bytes[primitives.ED25519_SEED_SIZE :]),
            primitives.signature_public_from_secret(bytes(key_bytes)),
        ):
            raise InvalidKey("Signature secret key does not embed its own public key")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_bytes", bytearray(key_bytes))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Key objects are immutable")

    @property
    def kind(self) -> KeyKind:
        return self._kind

    @property
    def is_asymmetric_key(self) -> bool:
        return self._kind.is_asymmetric

    @property
    def is_public_key(self) -> bool:
        return self._kind.is_public

    @property
    def is_secret_key(self) -> bool:
        return not self._kind.is_public

    @property
    def is_signing_key(self) -> bool:
        return self._kind.is_signing

    @property
    def is_encryption_key(self) -> bool:
        return self._kind.is_encryption

    def get_raw_key_material(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def require(self, *kinds: KeyKind) -> Key:
        """Return self if this key is one of ``kinds``, else raise InvalidKey."""
        if self._kind not in kinds:
            expected = " or ".join(str(k) for k in kinds)
            raise InvalidKey(f"Expected a {expected} key, got {self._kind}")
        return self

    def wipe(self) -> None:
        for i in range(len(self._bytes)):
            self._bytes[i] = 0

    def __len__(self) -> int:
        """Return key length in bytes."""
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return other._kind is self._kind and primitives.constant_time_equal(
            bytes(self._bytes), bytes(other._bytes)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        if self._kind.is_public:
            return f"Key({self._kind}, {bytes(self._bytes).hex()})"
        return f"Key({self._kind}, [REDACTED])"

    def __copy__(self):
        raise TypeError("Key cannot be copied implicitly")

    def __deepcopy__(self, memo):
        raise TypeError("Key cannot be copied implicitly")

    def __reduce__(self):
        raise TypeError("Key cannot be pickled")

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            self.wipe()


# =============================================================================
# Derivations between kinds
# =============================================================================


def derive_public_key(secret: Key) -> Key:
    """Deterministically derive the public key matching an asymmetric secret key."""
    secret.require(KeyKind.SIGNATURE_SECRET, KeyKind.ENCRYPTION_SECRET)
    raw = secret.get_raw_key_material()
    if secret.kind is KeyKind.SIGNATURE_SECRET:
        return Key(primitives.signature_public_from_secret(raw), KeyKind.SIGNATURE_PUBLIC)
    return Key(primitives.encryption_public_from_secret(raw), KeyKind.ENCRYPTION_PUBLIC)


def signature_secret_to_encryption_secret(secret: Key) -> Key:
    """Map an Ed25519 secret key onto its X25519 counterpart."""
    secret.require(KeyKind.SIGNATURE_SECRET)
    return Key(
        primitives.signature_secret_to_encryption_secret(
            secret.get_raw_key_material()
        ),
        KeyKind.ENCRYPTION_SECRET,
    )


def signature_public_to_encryption_public(public: Key) -> Key:
    """Map an Ed25519 public key onto its X25519 counterpart."""
    public.require(KeyKind.SIGNATURE_PUBLIC)
    return Key(
        primitives.signature_public_to_encryption_public(
            public.get_raw_key_material()
        ),
        KeyKind.ENCRYPTION_PUBLIC,
    )
