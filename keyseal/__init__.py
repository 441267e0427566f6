"""
keyseal

Misuse-resistant, versioned cryptography for Python: authenticated
envelopes with additional data, hash-then-encrypt password storage, and
typed keys that refuse to be used for the wrong job.

Quick Start
-----------
```python
from keyseal import HiddenString, Password, key_factory, symmetric

key = key_factory.generate_encryption_key()

# Encrypt data bound to a record id
blob = symmetric.encrypt(HiddenString(b"Sensitive data"), key, b"record:42")
with symmetric.decrypt(blob, key, b"record:42") as plaintext:
    print(plaintext.get_bytes())

# Store a password
stored = Password.hash(HiddenString("hunter2"), key)
assert Password.verify(HiddenString("hunter2"), stored, key)
if Password.needs_rehash(stored, key, "moderate"):
    stored = Password.hash(HiddenString("hunter2"), key, "moderate")
```

Key Features
------------
- **Versioned envelopes**: self-describing headers, old versions decode-only
- **AEAD with AAD**: AES-256-GCM with per-message HKDF keys
- **Typed keys**: a signing key can never be used as an encryption key
- **Password storage**: Argon2id hash, then authenticated encryption
- **Memory hygiene**: best-effort wiping of keys and sensitive strings
"""

__version__ = "0.1.0"

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    CannotPerformOperation,
    ConfigError,
    InvalidKey,
    InvalidMessage,
    InvalidSalt,
    InvalidSignature,
    InvalidType,
    KeysealError,
)

# =============================================================================
# Key Exports
# =============================================================================

from .hidden import HiddenString
from .keys import Key, KeyKind
from .keypair import EncryptionKeyPair, KeyPair, SignatureKeyPair

# =============================================================================
# Protocol Exports
# =============================================================================

from . import asymmetric, key_factory, symmetric
from .config import SecurityLevel, Settings, get_settings
from .encoding import Encoding
from .password import Password
from .versions import (
    CURRENT_VERSION,
    VERSION_OLD_PREFIX,
    VERSION_PREFIX,
    EnvelopeConfig,
    Resolution,
    ResolutionPath,
    resolve,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Errors
    "KeysealError",
    "InvalidKey",
    "InvalidMessage",
    "InvalidSignature",
    "CannotPerformOperation",
    "InvalidType",
    "InvalidSalt",
    "ConfigError",
    # Keys
    "HiddenString",
    "Key",
    "KeyKind",
    "KeyPair",
    "EncryptionKeyPair",
    "SignatureKeyPair",
    # Protocol
    "asymmetric",
    "symmetric",
    "key_factory",
    "Password",
    "SecurityLevel",
    "Settings",
    "get_settings",
    "Encoding",
    "CURRENT_VERSION",
    "VERSION_PREFIX",
    "VERSION_OLD_PREFIX",
    "EnvelopeConfig",
    "Resolution",
    "ResolutionPath",
    "resolve",
]
