"""
Cryptographic primitives consumed by the keyseal protocol layer.

This module is the only place that talks to the primitive libraries:
- cryptography: AES-256-GCM, ChaCha20-Poly1305 and HKDF-SHA256
- PyNaCl (libsodium): Ed25519, X25519, Argon2id, BLAKE2b, sealed boxes

Every function here is a thin, single-call delegation working on raw
bytes. Library exceptions are translated into keyseal errors; nothing
above this layer imports the primitive libraries directly.
"""

from __future__ import annotations

import hmac
import secrets
from typing import Tuple

import nacl.bindings
import nacl.encoding
import nacl.exceptions
import nacl.hash
import nacl.public
import nacl.pwhash
import nacl.signing
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .errors import CannotPerformOperation, InvalidKey, InvalidSignature

# Cryptographic constants
SYMMETRIC_KEY_SIZE: int = 32  # 256 bits
AEAD_NONCE_SIZE: int = 12  # 96 bits
AEAD_TAG_SIZE: int = 16  # 128 bits
X25519_KEY_SIZE: int = nacl.bindings.crypto_scalarmult_BYTES  # 32
ED25519_SEED_SIZE: int = nacl.bindings.crypto_sign_SEEDBYTES  # 32
ED25519_SECRET_KEY_SIZE: int = nacl.bindings.crypto_sign_SECRETKEYBYTES  # 64
ED25519_PUBLIC_KEY_SIZE: int = nacl.bindings.crypto_sign_PUBLICKEYBYTES  # 32
ED25519_SIGNATURE_SIZE: int = nacl.bindings.crypto_sign_BYTES  # 64
PWHASH_SALT_SIZE: int = nacl.pwhash.argon2id.SALTBYTES  # 16
PWHASH_STR_PREFIX: bytes = b"$argon2id$"
SEALED_BOX_OVERHEAD: int = nacl.bindings.crypto_box_SEALBYTES  # 48

CIPHER_AES_256_GCM = "aes-256-gcm"
CIPHER_CHACHA20_POLY1305 = "chacha20-poly1305"

_AEAD_CIPHERS = {
    CIPHER_AES_256_GCM: AESGCM,
    CIPHER_CHACHA20_POLY1305: ChaCha20Poly1305,
}


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without short-circuiting on content."""
    return hmac.compare_digest(a, b)


# =============================================================================
# Authenticated Symmetric Encryption
# =============================================================================


def derive_message_key(key: bytes, salt: bytes, info: bytes) -> bytes:
    """Derive a per-message 32-byte key from a master key and random salt."""
    try:
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=SYMMETRIC_KEY_SIZE,
            salt=salt,
            info=info,
        )
        return hkdf.derive(key)
    except Exception as e:
        raise CannotPerformOperation(f"Key derivation error: {e}") from e


def authenticated_encrypt(
    cipher: str, plaintext: bytes, key: bytes, nonce: bytes, aad: bytes
) -> bytes:
    """
    Encrypt plaintext with an AEAD cipher.

    Returns:
        ciphertext || tag
    """
    try:
        return _AEAD_CIPHERS[cipher](key).encrypt(nonce, plaintext, aad)
    except Exception as e:
        raise CannotPerformOperation(f"Encryption error: {e}") from e


def authenticated_decrypt(
    cipher: str, ciphertext: bytes, key: bytes, nonce: bytes, aad: bytes
) -> bytes:
    """
    Verify the tag and decrypt ciphertext || tag.

    Raises:
        InvalidSignature: If the tag does not verify
        CannotPerformOperation: If the cipher could not run
    """
    try:
        aead = _AEAD_CIPHERS[cipher](key)
    except Exception as e:
        raise CannotPerformOperation(f"Decryption error: {e}") from e
    try:
        return aead.decrypt(nonce, ciphertext, aad)
    except InvalidTag:
        # Generic error to prevent oracle attacks
        raise InvalidSignature("Invalid message authentication code") from None


def keyed_hash(data: bytes, key: bytes, digest_size: int = 32) -> bytes:
    """Keyed BLAKE2b."""
    try:
        return nacl.hash.blake2b(
            data, digest_size=digest_size, key=key, encoder=nacl.encoding.RawEncoder
        )
    except nacl.exceptions.CryptoError as e:
        raise CannotPerformOperation(f"BLAKE2b error: {e}") from e


def generic_hash(data: bytes, digest_size: int = 32) -> bytes:
    """Unkeyed BLAKE2b."""
    return nacl.hash.blake2b(
        data, digest_size=digest_size, encoder=nacl.encoding.RawEncoder
    )


# =============================================================================
# Asymmetric Keys
# =============================================================================


def signature_keypair_from_seed(seed: bytes) -> Tuple[bytes, bytes]:
    """Return (secret_key, public_key) for an Ed25519 seed."""
    public, secret = nacl.bindings.crypto_sign_seed_keypair(seed)
    return secret, public


def signature_public_from_secret(secret: bytes) -> bytes:
    """Recompute the Ed25519 public key from the seed half of a secret key."""
    seed = nacl.bindings.crypto_sign_ed25519_sk_to_seed(secret)
    public, _ = nacl.bindings.crypto_sign_seed_keypair(seed)
    return public


def encryption_public_from_secret(secret: bytes) -> bytes:
    return nacl.bindings.crypto_scalarmult_base(secret)


def signature_secret_to_encryption_secret(secret: bytes) -> bytes:
    """Convert an Ed25519 secret key into the matching X25519 secret key."""
    try:
        return nacl.bindings.crypto_sign_ed25519_sk_to_curve25519(secret)
    except nacl.exceptions.CryptoError as e:
        raise CannotPerformOperation(f"Key conversion error: {e}") from e


def signature_public_to_encryption_public(public: bytes) -> bytes:
    """Convert an Ed25519 public key into the matching X25519 public key."""
    try:
        return nacl.bindings.crypto_sign_ed25519_pk_to_curve25519(public)
    except nacl.exceptions.CryptoError as e:
        raise CannotPerformOperation(f"Key conversion error: {e}") from e


def scalarmult(secret: bytes, public: bytes) -> bytes:
    """X25519 shared point."""
    try:
        return nacl.bindings.crypto_scalarmult(secret, public)
    except nacl.exceptions.CryptoError as e:
        # libsodium refuses low-order points
        raise InvalidKey(f"Unusable public key for key exchange: {e}") from e


# =============================================================================
# Signatures and Sealed Boxes
# =============================================================================


def sign_detached(message: bytes, secret: bytes) -> bytes:
    seed = nacl.bindings.crypto_sign_ed25519_sk_to_seed(secret)
    return nacl.signing.SigningKey(seed).sign(message).signature


def verify_detached(message: bytes, signature: bytes, public: bytes) -> bool:
    try:
        nacl.signing.VerifyKey(public).verify(message, signature)
    except nacl.exceptions.BadSignatureError:
        return False
    return True


def seal_box(plaintext: bytes, public: bytes) -> bytes:
    try:
        return nacl.public.SealedBox(nacl.public.PublicKey(public)).encrypt(plaintext)
    except nacl.exceptions.CryptoError as e:
        raise CannotPerformOperation(f"Sealing error: {e}") from e


def unseal_box(ciphertext: bytes, secret: bytes) -> bytes:
    try:
        return nacl.public.SealedBox(nacl.public.PrivateKey(secret)).decrypt(
            ciphertext
        )
    except nacl.exceptions.CryptoError:
        raise InvalidSignature("Incorrect message integrity") from None


# =============================================================================
# Password Hashing
# =============================================================================


def hash_password(password: bytes, opslimit: int, memlimit: int) -> bytes:
    """Argon2id hash string, e.g. ``$argon2id$v=19$m=65536,t=2,p=1$...``."""
    try:
        return nacl.pwhash.argon2id.str(password, opslimit=opslimit, memlimit=memlimit)
    except (nacl.exceptions.CryptoError, MemoryError) as e:
        raise CannotPerformOperation(f"Password hashing error: {e}") from e


def verify_password_hash(hash_string: bytes, password: bytes) -> bool:
    try:
        return nacl.pwhash.argon2id.verify(hash_string, password)
    except nacl.exceptions.InvalidkeyError:
        return False


def derive_key_from_password(
    password: bytes, salt: bytes, opslimit: int, memlimit: int, size: int = 32
) -> bytes:
    """Raw Argon2id key derivation."""
    try:
        return nacl.pwhash.argon2id.kdf(
            size, password, salt, opslimit=opslimit, memlimit=memlimit
        )
    except (nacl.exceptions.CryptoError, MemoryError) as e:
        raise CannotPerformOperation(f"Key derivation error: {e}") from e
