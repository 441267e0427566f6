"""
Exception classes for keyseal operations.

Every failure path raises one of these; nothing is converted into a
default value. Callers that need to tell corrupted storage apart from
tampering can branch on InvalidMessage vs InvalidSignature.
"""

from __future__ import annotations


class KeysealError(Exception):
    """Base exception for all keyseal operations."""

    pass


class InvalidKey(KeysealError):
    """Key material has the wrong length or kind, or a key pair is illegal."""

    pass


class InvalidMessage(KeysealError):
    """Encoded blob is malformed, truncated, or uses an unknown version."""

    pass


class InvalidSignature(KeysealError):
    """Authentication tag or signature verification failed."""

    pass


class CannotPerformOperation(KeysealError):
    """The underlying primitive library failed for an environment reason."""

    pass


class InvalidType(KeysealError):
    """Argument has the wrong type, or a security level label is unknown."""

    pass


class InvalidSalt(KeysealError):
    """Salt has the wrong length for password-based key derivation."""

    pass


class ConfigError(KeysealError):
    """Configuration error."""

    pass
