"""
keyseal Benchmark CLI.

Usage:
    keyseal-benchmark

Or run directly:
    python -m keyseal.benchmark

Configuration:
    Set KEYSEAL_BENCHMARK_ITERATIONS, KEYSEAL_SECURITY_LEVEL and
    KEYSEAL_LOG_LEVEL in the environment or a .env file.
"""

from __future__ import annotations

import logging
import sys
import time

from dotenv import load_dotenv

from keyseal import asymmetric, key_factory, symmetric
from keyseal.config import Settings
from keyseal.errors import ConfigError
from keyseal.hidden import HiddenString
from keyseal.password import Password


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


def run_benchmark(settings: Settings) -> None:
    """Run the keyseal benchmark."""
    print("=== keyseal Benchmark ===\n")

    iterations = settings.benchmark_iterations
    level = settings.default_security_level
    print(f"Testing with {iterations} iterations at security level '{level}'\n")

    key = key_factory.generate_encryption_key()
    aad = b"benchmark|record-42"

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Envelope encryption/decryption
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 1: Envelope Encryption/Decryption                           |")
    print("+" + "-" * 68 + "+")

    blobs = []
    encrypt_start = time.perf_counter()
    for _ in range(iterations):
        with HiddenString(b"Sensitive data protected by an authenticated envelope") as plaintext:
            blobs.append(symmetric.encrypt(plaintext, key, aad))
    encrypt_duration = time.perf_counter() - encrypt_start

    decrypt_start = time.perf_counter()
    for blob in blobs:
        symmetric.decrypt(blob, key, aad).wipe()
    decrypt_duration = time.perf_counter() - decrypt_start

    print(f"[OK] {iterations} envelopes encrypted/decrypted")
    print(f"[PERF] Encryption: {encrypt_duration * 1000:.3f}ms ({_rate(iterations, encrypt_duration)} ops/sec)")
    print(f"[PERF] Decryption: {decrypt_duration * 1000:.3f}ms ({_rate(iterations, decrypt_duration)} ops/sec)\n")

    # ========================================================================
    # Demo 2: Signatures
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 2: Ed25519 Signatures                                       |")
    print("+" + "-" * 68 + "+")

    pair = key_factory.generate_signature_key_pair()
    message = b"Signed by the benchmark"

    sign_start = time.perf_counter()
    signatures = [asymmetric.sign(message, pair.secret_key) for _ in range(iterations)]
    sign_duration = time.perf_counter() - sign_start

    verify_start = time.perf_counter()
    valid = all(asymmetric.verify(message, pair.public_key, s) for s in signatures)
    verify_duration = time.perf_counter() - verify_start

    print(f"[OK] Signatures valid: {valid}")
    print(f"[PERF] Sign:   {sign_duration * 1000:.3f}ms ({_rate(iterations, sign_duration)} ops/sec)")
    print(f"[PERF] Verify: {verify_duration * 1000:.3f}ms ({_rate(iterations, verify_duration)} ops/sec)\n")

    # ========================================================================
    # Demo 3: Password storage (single run, Argon2id is deliberately slow)
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 3: Password Hash-then-Encrypt                               |")
    print("+" + "-" * 68 + "+")

    with HiddenString("correct horse battery staple") as password:
        hash_start = time.perf_counter()
        stored = Password.hash(password, key, level, aad)
        hash_duration = time.perf_counter() - hash_start

        verify_pw_start = time.perf_counter()
        ok = Password.verify(password, stored, key, aad)
        verify_pw_duration = time.perf_counter() - verify_pw_start

    stale = Password.needs_rehash(stored, key, level, aad)

    print(f"[OK] Password verified: {ok} | Needs rehash: {stale}")
    print(f"[PERF] Hash:   {hash_duration * 1000:.3f}ms")
    print(f"[PERF] Verify: {verify_pw_duration * 1000:.3f}ms\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("Test Configuration:")
    print(f"  - Iterations: {iterations}")
    print("  - Envelope: version 5, AES-256-GCM, HKDF-SHA256 per-message keys")
    print(f"  - Password hashing: Argon2id ({level})")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for keyseal-benchmark command."""
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_benchmark(settings)


if __name__ == "__main__":
    main()
