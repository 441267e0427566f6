"""
Versioned envelope configuration.

Every envelope starts with a 4-byte header: 0x31 0x42 <major> <minor>.
The header selects the string encoding, the AEAD cipher and the field
lengths used to take the rest of the blob apart.

Version 5 is current. Version 4 (base64url) and version 3 (hex) are
decode-only: nothing keyseal encrypts today uses them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from . import primitives
from .encoding import Encoding
from .errors import InvalidMessage

logger = logging.getLogger(__name__)

HEADER_SIZE: int = 4
MAGIC: bytes = b"\x31\x42"

# Base64url rendering of the first bytes of each base64url header
VERSION_PREFIX: str = "MUIFA"
VERSION_OLD_PREFIX: str = "MUIEA"
PREFIX_LENGTH: int = 5

# Nothing with fewer characters can even carry a header
MINIMUM_BLOB_LENGTH: int = 8
LEGACY_HEADER_CHARS: int = HEADER_SIZE * 2


@dataclass(frozen=True)
class EnvelopeConfig:
    """Field layout and algorithms for one envelope version."""

    version: int
    header: bytes
    encoding: Encoding
    cipher: str
    salt_length: int
    nonce_length: int
    mac_length: int
    hkdf_info: bytes
    deprecated: bool = False
    legacy: bool = False

    @property
    def shortest_ciphertext_length(self) -> int:
        """Raw length of an envelope around an empty plaintext."""
        return HEADER_SIZE + self.salt_length + self.nonce_length + self.mac_length

    @property
    def shortest_encoded_length(self) -> int:
        return self.encoding.encoded_length(self.shortest_ciphertext_length)


VERSION_5 = EnvelopeConfig(
    version=5,
    header=MAGIC + b"\x05\x00",
    encoding=Encoding.BASE64URL,
    cipher=primitives.CIPHER_AES_256_GCM,
    salt_length=32,
    nonce_length=primitives.AEAD_NONCE_SIZE,
    mac_length=primitives.AEAD_TAG_SIZE,
    hkdf_info=b"keyseal|v5|EncryptionKey",
)

VERSION_4 = EnvelopeConfig(
    version=4,
    header=MAGIC + b"\x04\x00",
    encoding=Encoding.BASE64URL,
    cipher=primitives.CIPHER_CHACHA20_POLY1305,
    salt_length=32,
    nonce_length=primitives.AEAD_NONCE_SIZE,
    mac_length=primitives.AEAD_TAG_SIZE,
    hkdf_info=b"keyseal|v4|EncryptionKey",
    deprecated=True,
)

VERSION_3 = EnvelopeConfig(
    version=3,
    header=MAGIC + b"\x03\x00",
    encoding=Encoding.HEX,
    cipher=primitives.CIPHER_CHACHA20_POLY1305,
    salt_length=32,
    nonce_length=primitives.AEAD_NONCE_SIZE,
    mac_length=primitives.AEAD_TAG_SIZE,
    hkdf_info=b"keyseal|EncryptionKey",
    deprecated=True,
    legacy=True,
)

CURRENT_VERSION = VERSION_5

_CONFIGS: Dict[int, EnvelopeConfig] = {
    c.version: c for c in (VERSION_5, VERSION_4, VERSION_3)
}


def config_for_header(header: bytes) -> Optional[EnvelopeConfig]:
    """Look up the config whose header matches exactly, or None."""
    if len(header) < HEADER_SIZE or header[:2] != MAGIC:
        return None
    config = _CONFIGS.get(header[2])
    if config is None or not primitives.constant_time_equal(
        header[:HEADER_SIZE], config.header
    ):
        return None
    return config


# =============================================================================
# Resolution
# =============================================================================


class ResolutionPath(Enum):
    """How a blob's header was classified."""

    CURRENT = "current"
    DEPRECATED = "deprecated"
    LEGACY = "legacy"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Resolution:
    """Outcome of classifying a blob: a config, or the reason there is none."""

    path: ResolutionPath
    config: Optional[EnvelopeConfig] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.path is not ResolutionPath.REJECTED

    def config_or_raise(self) -> EnvelopeConfig:
        """Return the resolved config, or raise InvalidMessage with the reason."""
        if self.config is None:
            raise InvalidMessage(self.reason)
        return self.config

    @classmethod
    def rejected(cls, reason: str) -> Resolution:
        logger.debug("Rejected envelope header: %s", reason)
        return cls(ResolutionPath.REJECTED, reason=reason)


def resolve(blob: str) -> Resolution:
    """
    Classify an encoded blob by its header.

    Blobs that start with a known base64url prefix are decoded and looked
    up in the version table. Anything else may only be a hex-encoded
    legacy envelope; its first eight characters must be a strict hex
    header naming a legacy version.
    """
    if not isinstance(blob, str):
        return Resolution.rejected("Encoded envelope must be a string")
    if len(blob) < MINIMUM_BLOB_LENGTH:
        return Resolution.rejected("Encoded envelope is way too short")

    prefix = blob[:PREFIX_LENGTH].encode("ascii", "replace")
    if primitives.constant_time_equal(
        prefix, VERSION_PREFIX.encode("ascii")
    ) or primitives.constant_time_equal(prefix, VERSION_OLD_PREFIX.encode("ascii")):
        # Only the header is needed; 8 characters decode to 6 bytes
        try:
            header = Encoding.BASE64URL.decode(blob[:MINIMUM_BLOB_LENGTH])
        except InvalidMessage as e:
            return Resolution.rejected(str(e))
        config = config_for_header(header)
        if config is None or config.encoding is not Encoding.BASE64URL:
            return Resolution.rejected("Invalid version tag")
        if config.deprecated:
            logger.info("Decoding deprecated envelope version %d", config.version)
            return Resolution(ResolutionPath.DEPRECATED, config)
        return Resolution(ResolutionPath.CURRENT, config)

    return _resolve_legacy(blob)


def _resolve_legacy(blob: str) -> Resolution:
    """Hex-encoded envelopes that predate the base64url prefixes."""
    try:
        header = Encoding.HEX.decode(blob[:LEGACY_HEADER_CHARS])
    except InvalidMessage:
        return Resolution.rejected("Unrecognized envelope prefix")
    config = config_for_header(header)
    if config is None or not config.legacy:
        return Resolution.rejected("Invalid version tag")
    logger.info("Decoding legacy envelope version %d", config.version)
    return Resolution(ResolutionPath.LEGACY, config)
