"""
Strict string encodings used on the wire.

Decoding is strict: invalid alphabet characters, bad lengths and
non-canonical base64url (for example, trailing bits set in the final
character) are rejected with InvalidMessage rather than silently
repaired, so two distinct strings never decode to the same bytes.
"""

from __future__ import annotations

import base64
import binascii
from enum import Enum

from .errors import InvalidMessage


class Encoding(Enum):
    """String encoding of an envelope."""

    HEX = "hex"
    BASE64URL = "base64url"

    def __str__(self) -> str:
        return self.value

    def encode(self, data: bytes) -> str:
        if self is Encoding.HEX:
            return hex_encode(data)
        return base64url_encode(data)

    def decode(self, text: str) -> bytes:
        if self is Encoding.HEX:
            return hex_decode(text)
        return base64url_decode(text)

    def encoded_length(self, raw_length: int) -> int:
        """Length of the encoded form of ``raw_length`` bytes."""
        if self is Encoding.HEX:
            return raw_length * 2
        return (raw_length * 4 + 2) // 3


def base64url_encode(data: bytes) -> str:
    """Encode as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(text: str) -> bytes:
    """Decode unpadded base64url, rejecting anything non-canonical."""
    try:
        raw = text.encode("ascii")
    except UnicodeEncodeError as e:
        raise InvalidMessage("Invalid base64url encoding") from e
    if b"=" in raw or len(raw) % 4 == 1:
        raise InvalidMessage("Invalid base64url encoding")
    try:
        decoded = base64.b64decode(
            raw + b"=" * (-len(raw) % 4), altchars=b"-_", validate=True
        )
    except binascii.Error as e:
        raise InvalidMessage("Invalid base64url encoding") from e
    if base64url_encode(decoded).encode("ascii") != raw:
        raise InvalidMessage("Non-canonical base64url encoding")
    return decoded


def hex_encode(data: bytes) -> str:
    return binascii.hexlify(data).decode("ascii")


def hex_decode(text: str) -> bytes:
    """Decode lowercase hex, rejecting anything else."""
    try:
        decoded = binascii.unhexlify(text.encode("ascii"))
    except (UnicodeEncodeError, binascii.Error, ValueError) as e:
        raise InvalidMessage("Invalid hex encoding") from e
    if hex_encode(decoded) != text:
        raise InvalidMessage("Non-canonical hex encoding")
    return decoded
