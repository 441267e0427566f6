"""
Public-key operations.

- encrypt/decrypt: X25519 key agreement feeding the symmetric envelope
- seal/unseal: anonymous sealed boxes
- sign/verify: Ed25519 detached signatures
- sign_and_encrypt/verify_and_decrypt: signed, then encrypted to a recipient
"""

from __future__ import annotations

import logging

from . import primitives, symmetric
from .encoding import base64url_decode, base64url_encode
from .errors import InvalidMessage, InvalidSignature, InvalidType
from .hidden import HiddenString
from .keys import (
    Key,
    KeyKind,
    derive_public_key,
    signature_public_to_encryption_public,
    signature_secret_to_encryption_secret,
)

logger = logging.getLogger(__name__)


def get_shared_secret(our_secret: Key, their_public: Key) -> Key:
    """
    Derive a symmetric encryption key both parties can compute.

    The X25519 shared point is hashed together with both public keys
    (in sorted order, so either side gets the same result).
    """
    our_secret.require(KeyKind.ENCRYPTION_SECRET)
    their_public.require(KeyKind.ENCRYPTION_PUBLIC)
    shared = primitives.scalarmult(
        our_secret.get_raw_key_material(), their_public.get_raw_key_material()
    )
    publics = sorted(
        [
            derive_public_key(our_secret).get_raw_key_material(),
            their_public.get_raw_key_material(),
        ]
    )
    return Key(
        primitives.generic_hash(shared + publics[0] + publics[1]),
        KeyKind.SYMMETRIC_ENCRYPTION,
    )


def encrypt(
    plaintext: HiddenString,
    our_secret: Key,
    their_public: Key,
    additional_data: bytes = b"",
) -> str:
    """Encrypt to a recipient's public key; they decrypt with our public key."""
    return symmetric.encrypt(
        plaintext, get_shared_secret(our_secret, their_public), additional_data
    )


def decrypt(
    ciphertext: str,
    our_secret: Key,
    their_public: Key,
    additional_data: bytes = b"",
) -> HiddenString:
    """Decrypt a message from the holder of ``their_public``."""
    return symmetric.decrypt(
        ciphertext, get_shared_secret(our_secret, their_public), additional_data
    )


def seal(plaintext: HiddenString, public_key: Key) -> str:
    """Anonymous public-key encryption; only the secret key holder can unseal."""
    if not isinstance(plaintext, HiddenString):
        raise InvalidType("Plaintext must be a HiddenString")
    public_key.require(KeyKind.ENCRYPTION_PUBLIC)
    return base64url_encode(
        primitives.seal_box(plaintext.get_bytes(), public_key.get_raw_key_material())
    )


def unseal(ciphertext: str, secret_key: Key) -> HiddenString:
    """
    Open a sealed message.

    Raises:
        InvalidMessage: If the message is malformed or too short
        InvalidSignature: If the message fails authentication
    """
    secret_key.require(KeyKind.ENCRYPTION_SECRET)
    raw = base64url_decode(ciphertext)
    if len(raw) < primitives.SEALED_BOX_OVERHEAD:
        raise InvalidMessage("Message is too short")
    return HiddenString(primitives.unseal_box(raw, secret_key.get_raw_key_material()))


def sign(message: bytes, secret_key: Key) -> str:
    """Ed25519 signature over message, base64url-encoded."""
    secret_key.require(KeyKind.SIGNATURE_SECRET)
    return base64url_encode(
        primitives.sign_detached(bytes(message), secret_key.get_raw_key_material())
    )


def verify(message: bytes, public_key: Key, signature: str) -> bool:
    """
    Check an Ed25519 signature.

    Returns:
        True if valid, False if the signature does not match

    Raises:
        InvalidMessage: If the signature is malformed
    """
    public_key.require(KeyKind.SIGNATURE_PUBLIC)
    decoded = base64url_decode(signature)
    if len(decoded) != primitives.ED25519_SIGNATURE_SIZE:
        raise InvalidMessage("Signature is not the correct length")
    return primitives.verify_detached(
        bytes(message), decoded, public_key.get_raw_key_material()
    )


def sign_and_encrypt(
    message: HiddenString,
    our_signing_secret: Key,
    their_encryption_public: Key,
) -> str:
    """
    Sign a message, then encrypt signature and message to a recipient.

    The encryption secret is derived from our signing key, so the
    recipient only needs our signature public key.
    """
    if not isinstance(message, HiddenString):
        raise InvalidType("Message must be a HiddenString")
    our_signing_secret.require(KeyKind.SIGNATURE_SECRET)
    signature = primitives.sign_detached(
        message.get_bytes(), our_signing_secret.get_raw_key_material()
    )
    with HiddenString(signature + message.get_bytes()) as signed:
        return encrypt(
            signed,
            signature_secret_to_encryption_secret(our_signing_secret),
            their_encryption_public,
        )


def verify_and_decrypt(
    ciphertext: str,
    their_signing_public: Key,
    our_encryption_secret: Key,
) -> HiddenString:
    """
    Decrypt a message from sign_and_encrypt() and check its signature.

    Raises:
        InvalidSignature: If decryption or signature verification fails
        InvalidMessage: If the envelope or its contents are malformed
    """
    their_signing_public.require(KeyKind.SIGNATURE_PUBLIC)
    with decrypt(
        ciphertext,
        our_encryption_secret,
        signature_public_to_encryption_public(their_signing_public),
    ) as signed:
        decrypted = signed.get_bytes()

    if len(decrypted) < primitives.ED25519_SIGNATURE_SIZE:
        raise InvalidMessage("Decrypted message is too short to be signed")
    signature = decrypted[: primitives.ED25519_SIGNATURE_SIZE]
    message = decrypted[primitives.ED25519_SIGNATURE_SIZE :]
    if not primitives.verify_detached(
        message, signature, their_signing_public.get_raw_key_material()
    ):
        logger.debug("Signature check failed after decryption")
        raise InvalidSignature("Invalid signature for decrypted message")
    return HiddenString(message)
