"""
ECIES Protocol Implementation

Elliptic Curve Integrated Encryption Scheme built from an elliptic-curve key
agreement and a symmetric authenticated-encryption construction.

Module Structure:
- core/: Error taxonomy, types, encodings, and cryptographic operations
- security/: Curve providers, KDFs, ciphers, and the ECIES orchestrator
- messages/: EncryptionEnvelope binary/JSON encoding

Only core/ is re-exported here; import the orchestrator from
protocols.security (it depends on interfaces/, which depends on core/).

Author: SecureECIES Project
Date: October 2025
"""

__version__ = "1.0.0"

from .core import (
    # Errors
    ECIESError,
    InvalidKeyError,
    AuthenticationError,
    PaddingError,
    TruncatedInputError,

    # Types
    CurveName,
    KdfAlgorithm,
    CipherAlgorithm,
    KeyPair,
    CipherResult,
    EncryptionEnvelope,
)

__all__ = [
    "__version__",

    # Errors
    "ECIESError",
    "InvalidKeyError",
    "AuthenticationError",
    "PaddingError",
    "TruncatedInputError",

    # Types
    "CurveName",
    "KdfAlgorithm",
    "CipherAlgorithm",
    "KeyPair",
    "CipherResult",
    "EncryptionEnvelope",
]
