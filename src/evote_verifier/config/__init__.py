"""Configuration module for evote-verifier."""

from evote_verifier.config.verifier_config import (
    DEFAULT_VERIFIER_CONFIG,
    VerifierConfig,
)

__all__ = [
    "DEFAULT_VERIFIER_CONFIG",
    "VerifierConfig",
]
