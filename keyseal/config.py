"""
Process-wide settings and the security level table.

Settings are read once from the environment and never mutated. The
security level table maps each level to the Argon2id (opslimit,
memlimit) pair used for password hashing and key derivation.

Environment variables:
    KEYSEAL_SECURITY_LEVEL: default security level (interactive)
    KEYSEAL_LOG_LEVEL: logging level for the benchmark CLI (WARNING)
    KEYSEAL_BENCHMARK_ITERATIONS: benchmark iterations (100)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Union

import nacl.pwhash
from dotenv import load_dotenv

from .errors import ConfigError, InvalidType


class SecurityLevel(Enum):
    """Named work-factor presets for password hashing."""

    INTERACTIVE = "interactive"
    MODERATE = "moderate"
    SENSITIVE = "sensitive"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, s: str) -> SecurityLevel:
        """Parse from string."""
        try:
            return cls(s.lower())
        except (ValueError, AttributeError):
            raise InvalidType(f"Invalid security level: {s!r}") from None


@dataclass(frozen=True)
class KdfLimits:
    """Argon2id cost parameters."""

    opslimit: int  # time cost (passes)
    memlimit: int  # memory cost in bytes

    @property
    def memory_kib(self) -> int:
        return self.memlimit // 1024

    def hash_prefix(self) -> bytes:
        """The parameter header Argon2id embeds in hash strings for these limits."""
        return f"$argon2id$v=19$m={self.memory_kib},t={self.opslimit},p=1$".encode(
            "ascii"
        )


SECURITY_LEVELS: Mapping[SecurityLevel, KdfLimits] = MappingProxyType(
    {
        SecurityLevel.INTERACTIVE: KdfLimits(
            nacl.pwhash.argon2id.OPSLIMIT_INTERACTIVE,
            nacl.pwhash.argon2id.MEMLIMIT_INTERACTIVE,
        ),
        SecurityLevel.MODERATE: KdfLimits(
            nacl.pwhash.argon2id.OPSLIMIT_MODERATE,
            nacl.pwhash.argon2id.MEMLIMIT_MODERATE,
        ),
        SecurityLevel.SENSITIVE: KdfLimits(
            nacl.pwhash.argon2id.OPSLIMIT_SENSITIVE,
            nacl.pwhash.argon2id.MEMLIMIT_SENSITIVE,
        ),
    }
)

LevelLike = Union[SecurityLevel, str, None]


@dataclass(frozen=True)
class Settings:
    """Immutable keyseal configuration."""

    default_security_level: SecurityLevel = SecurityLevel.INTERACTIVE
    log_level: str = "WARNING"
    benchmark_iterations: int = 100
    security_levels: Mapping[SecurityLevel, KdfLimits] = field(
        default_factory=lambda: SECURITY_LEVELS, repr=False
    )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> Settings:
        """
        Build settings from environment variables.

        Args:
            env_file: Optional .env file to load first (existing variables win)

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        if env_file is not None:
            load_dotenv(env_file)

        try:
            level = SecurityLevel.from_str(
                os.environ.get("KEYSEAL_SECURITY_LEVEL", "interactive")
            )
        except InvalidType as e:
            raise ConfigError(f"KEYSEAL_SECURITY_LEVEL: {e}") from e

        log_level = os.environ.get("KEYSEAL_LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"KEYSEAL_LOG_LEVEL: unknown level {log_level!r}")

        raw_iterations = os.environ.get("KEYSEAL_BENCHMARK_ITERATIONS", "100")
        try:
            iterations = int(raw_iterations)
        except ValueError:
            raise ConfigError(
                f"KEYSEAL_BENCHMARK_ITERATIONS: not an integer: {raw_iterations!r}"
            ) from None
        if iterations < 1:
            raise ConfigError("KEYSEAL_BENCHMARK_ITERATIONS must be at least 1")

        return cls(
            default_security_level=level,
            log_level=log_level,
            benchmark_iterations=iterations,
        )

    def resolve_level(self, level: LevelLike = None) -> SecurityLevel:
        """Normalize a level argument; None means the configured default."""
        if level is None:
            return self.default_security_level
        if isinstance(level, SecurityLevel):
            return level
        if isinstance(level, str):
            return SecurityLevel.from_str(level)
        raise InvalidType(f"Invalid security level: {level!r}")

    def kdf_limits(self, level: LevelLike = None) -> KdfLimits:
        """
        Look up the Argon2id limits for a level.

        Raises:
            InvalidType: If the level is unknown
        """
        return self.security_levels[self.resolve_level(level)]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, built from the environment on first use."""
    return Settings.from_env()
