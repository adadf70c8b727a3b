"""Test helpers for the verifier tests.

Helpers:
    SigningKeys: RSA keys, certificates and keystores per authority
    DatasetBuilder: Writes small, consistent, validly signed datasets

Usage:
    from tests.helpers import DatasetBuilder, SigningKeys
"""

from tests.helpers.dataset import DatasetBuilder
from tests.helpers.keystore import SigningKeys

__all__ = ["DatasetBuilder", "SigningKeys"]
