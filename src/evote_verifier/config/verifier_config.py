"""Verifier configuration.

Environment Variables:
- VERIFIER_DIRECT_TRUST_DIR: Directory holding the direct-trust keystore
  (default: unset, authenticity verifications then report errors)
- VERIFIER_ENVIRONMENT: 'production' (JSON logs) or 'development' (console)
  (default: production)
- VERIFIER_LOG_LEVEL: Log level name (default: INFO)
- VERIFIER_PARALLEL_WORKERS: Worker threads, 0 runs sequentially (default: 0)
- VERIFIER_CHECK_TIMEOUT_SECONDS: Per-verification timeout for parallel
  runs, 0 disables it (default: 0)
- VERIFIER_GROUP_BIT_LENGTH: Bit length of derived ElGamal groups
  (default: 3072)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from evote_verifier.domain.services.elgamal import DEFAULT_BIT_LENGTH

ENVIRONMENTS: tuple[str, ...] = ("production", "development")


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class VerifierConfig:
    """Configuration of one verifier run.

    Attributes:
        direct_trust_dir: Directory with the keystore and its password file.
        environment: Logging environment ('production' or 'development').
        log_level: Log level name.
        parallel_workers: Worker threads; 0 selects the sequential strategy.
        check_timeout_seconds: Per-verification timeout for parallel runs,
            None when disabled.
        group_bit_length: Bit length of derived ElGamal groups.
    """

    direct_trust_dir: Path | None = None
    environment: str = "production"
    log_level: str = "INFO"
    parallel_workers: int = 0
    check_timeout_seconds: float | None = None
    group_bit_length: int = DEFAULT_BIT_LENGTH

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {ENVIRONMENTS}, got {self.environment!r}"
            )
        if self.parallel_workers < 0:
            raise ValueError(
                f"parallel_workers must be >= 0, got {self.parallel_workers}"
            )
        if self.check_timeout_seconds is not None and self.check_timeout_seconds <= 0:
            raise ValueError(
                "check_timeout_seconds must be positive, "
                f"got {self.check_timeout_seconds}"
            )
        if self.group_bit_length <= 0 or self.group_bit_length % 8 != 0:
            raise ValueError(
                "group_bit_length must be a positive multiple of 8, "
                f"got {self.group_bit_length}"
            )

    @property
    def is_parallel(self) -> bool:
        return self.parallel_workers > 0

    @classmethod
    def from_environment(cls) -> VerifierConfig:
        """Create configuration from environment variables."""
        trust_dir = os.environ.get("VERIFIER_DIRECT_TRUST_DIR")
        timeout = _get_float_env("VERIFIER_CHECK_TIMEOUT_SECONDS", 0.0)
        return cls(
            direct_trust_dir=Path(trust_dir) if trust_dir else None,
            environment=os.environ.get("VERIFIER_ENVIRONMENT", "production"),
            log_level=os.environ.get("VERIFIER_LOG_LEVEL", "INFO"),
            parallel_workers=_get_int_env("VERIFIER_PARALLEL_WORKERS", 0),
            check_timeout_seconds=timeout if timeout > 0 else None,
            group_bit_length=_get_int_env(
                "VERIFIER_GROUP_BIT_LENGTH", DEFAULT_BIT_LENGTH
            ),
        )

    def with_overrides(self, **changes: object) -> VerifierConfig:
        """Return a copy with some fields replaced (CLI options)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_VERIFIER_CONFIG = VerifierConfig()
