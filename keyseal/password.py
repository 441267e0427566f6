"""
Secure password storage and verification.

Passwords are hashed with Argon2id and the resulting hash string is then
encrypted with a symmetric key, so a stolen database of stored hashes is
useless without that key.
"""

from __future__ import annotations

import logging

from . import primitives, symmetric
from .config import LevelLike, get_settings
from .errors import InvalidMessage, InvalidType
from .hidden import HiddenString
from .keys import Key, KeyKind
from .versions import resolve

logger = logging.getLogger(__name__)


class Password:
    """
    Hash-then-encrypt password storage.

    Provides static methods for hashing, verification and staleness checks.
    """

    @staticmethod
    def hash(
        password: HiddenString,
        secret_key: Key,
        level: LevelLike = None,
        additional_data: bytes = b"",
    ) -> str:
        """
        Hash then encrypt a password.

        Args:
            password: The user's password
            secret_key: The master key for all passwords
            level: Security level (default from settings)
            additional_data: Additional authenticated data

        Returns:
            An encrypted hash to store
        """
        if not isinstance(password, HiddenString):
            raise InvalidType("Password must be a HiddenString")
        secret_key.require(KeyKind.SYMMETRIC_ENCRYPTION)
        limits = get_settings().kdf_limits(level)

        with HiddenString(
            primitives.hash_password(
                password.get_bytes(), limits.opslimit, limits.memlimit
            )
        ) as hashed:
            return symmetric.encrypt(hashed, secret_key, additional_data)

    @staticmethod
    def verify(
        password: HiddenString,
        stored: str,
        secret_key: Key,
        additional_data: bytes = b"",
    ) -> bool:
        """
        Decrypt then verify a password.

        Args:
            password: The user's password
            stored: The encrypted password hash
            secret_key: The master key for all passwords
            additional_data: Additional authenticated data used by hash()

        Returns:
            Is this password valid?

        Raises:
            InvalidMessage: If the stored hash is malformed or truncated
            InvalidSignature: If the stored hash fails authentication
        """
        if not isinstance(password, HiddenString):
            raise InvalidType("Password must be a HiddenString")
        _check_stored_length(stored)
        with symmetric.decrypt(stored, secret_key, additional_data) as hash_str:
            return primitives.verify_password_hash(
                hash_str.get_bytes(), password.get_bytes()
            )

    @staticmethod
    def needs_rehash(
        stored: str,
        secret_key: Key,
        level: LevelLike = None,
        additional_data: bytes = b"",
    ) -> bool:
        """
        Is this password hash stale?

        Args:
            stored: Encrypted password hash
            secret_key: The master key for all passwords
            level: The security level the hash should have
            additional_data: Additional authenticated data used by hash()

        Returns:
            True if the hash should be regenerated at ``level``

        Raises:
            InvalidType: If the level is unknown
        """
        expected = get_settings().kdf_limits(level).hash_prefix()
        _check_stored_length(stored)
        prefix_length = len(primitives.PWHASH_STR_PREFIX)
        with symmetric.decrypt(stored, secret_key, additional_data) as hash_str:
            if not primitives.constant_time_equal(
                hash_str.get_bytes()[:prefix_length], primitives.PWHASH_STR_PREFIX
            ):
                logger.debug("Stored password hash does not use Argon2id")
                return True
            return not primitives.constant_time_equal(
                hash_str.get_bytes()[: len(expected)], expected
            )


def _check_stored_length(stored: str) -> None:
    config = resolve(stored).config_or_raise()
    if len(stored) < config.shortest_encoded_length:
        raise InvalidMessage("Encrypted password hash is too short.")
