"""
Key pairs: one asymmetric secret key and the public key derived from it.

- SignatureKeyPair: Ed25519 secret + public key
- EncryptionKeyPair: X25519 secret + public key

The public key is always derived from the secret key. When a public key
is supplied as well, it is only accepted if it matches the derived one.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from .errors import InvalidKey
from .keys import (
    Key,
    KeyKind,
    derive_public_key,
    signature_public_to_encryption_public,
    signature_secret_to_encryption_secret,
)

logger = logging.getLogger(__name__)


class KeyPair:
    """A secret key and its matching public key."""

    SECRET_KIND: ClassVar[KeyKind]
    PUBLIC_KIND: ClassVar[KeyKind]

    __slots__ = ("_secret_key", "_public_key")

    def __init__(self, *keys: Key) -> None:
        """
        Pass it a secret key and the public key is derived automatically.

        Two keys are accepted in either order if one is the secret key and
        the other is its public key.

        Raises:
            InvalidKey: If the keys cannot form a pair of this kind
            TypeError: If not given one or two keys
        """
        if type(self) is KeyPair:
            raise TypeError("Use SignatureKeyPair or EncryptionKeyPair")
        if len(keys) == 2:
            first, second = keys
            if not first.is_asymmetric_key or not second.is_asymmetric_key:
                raise InvalidKey(
                    "Only keys intended for asymmetric cryptography can be used in a KeyPair"
                )
            if first.is_public_key and second.is_public_key:
                raise InvalidKey("Both keys cannot be public keys")
            if first.is_secret_key and second.is_secret_key:
                raise InvalidKey("Both keys cannot be secret keys")
            secret, public = (second, first) if first.is_public_key else (first, second)
            if public.kind is not self.PUBLIC_KIND:
                raise InvalidKey(
                    f"{type(self).__name__} requires a {self.PUBLIC_KIND} key, got {public.kind}"
                )
            self._setup(secret)
            if public != self._public_key:
                raise InvalidKey("Public key does not belong to the secret key")
        elif len(keys) == 1:
            (secret,) = keys
            if not secret.is_asymmetric_key:
                raise InvalidKey(
                    "Only keys intended for asymmetric cryptography can be used in a KeyPair"
                )
            if secret.is_public_key:
                raise InvalidKey(
                    "Cannot derive a key pair from a public key; a secret key is required"
                )
            self._setup(secret)
        else:
            raise TypeError(f"{type(self).__name__} expects 1 or 2 keys, got {len(keys)}")

    def _setup(self, secret: Key) -> None:
        if secret.kind is not self.SECRET_KIND:
            raise InvalidKey(
                f"{type(self).__name__} requires a {self.SECRET_KIND} key, got {secret.kind}"
            )
        # The pair owns its own copy; wiping the caller's key must not affect it
        self._secret_key = Key(secret.get_raw_key_material(), secret.kind)
        self._public_key = derive_public_key(self._secret_key)

    @property
    def secret_key(self) -> Key:
        return self._secret_key

    @property
    def public_key(self) -> Key:
        return self._public_key

    def __repr__(self) -> str:
        """Hide the secret key from debugging output."""
        return f"{type(self).__name__}(secret_key=[REDACTED], public_key={self._public_key!r})"


class EncryptionKeyPair(KeyPair):
    """X25519 key pair for public-key encryption."""

    SECRET_KIND = KeyKind.ENCRYPTION_SECRET
    PUBLIC_KIND = KeyKind.ENCRYPTION_PUBLIC

    __slots__ = ()


class SignatureKeyPair(KeyPair):
    """Ed25519 key pair for digital signatures."""

    SECRET_KIND = KeyKind.SIGNATURE_SECRET
    PUBLIC_KIND = KeyKind.SIGNATURE_PUBLIC

    __slots__ = ()

    def get_encryption_key_pair(self) -> EncryptionKeyPair:
        """
        Derive the X25519 key pair birationally equivalent to this Ed25519 pair.

        Deterministic: the same signing key always yields the same
        encryption key pair. The result links the two key pairs, so only
        use it where that link is acceptable.
        """
        logger.debug("Converting signature key pair to encryption key pair")
        return EncryptionKeyPair(
            signature_secret_to_encryption_secret(self._secret_key),
            signature_public_to_encryption_public(self._public_key),
        )
