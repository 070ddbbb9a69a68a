"""
ECIES Core Types and Utilities

This module provides the foundational types, encodings, and cryptographic
operations for the ECIES implementation.

Submodules:
- exceptions: Error taxonomy (InvalidKeyError, AuthenticationError, ...)
- types: Enumerations, curve parameters, KeyPair and EncryptionEnvelope
- primitives: Hex normalization, EC key encoding/decoding, PKCS#7 padding
- crypto: Cryptographic operations (ECDH, KDFs, HMAC, secret wiping)

Author: SecureECIES Project
Date: October 2025
"""

# Re-export all core functionality for convenience
from .exceptions import (
    ECIESError,
    InvalidKeyError,
    AuthenticationError,
    PaddingError,
    TruncatedInputError,
)

from .types import (
    # Enums
    CurveName,
    KdfAlgorithm,
    CipherAlgorithm,

    # Curve parameters
    CurveParameters,
    CURVE_PARAMETERS,
    get_curve_parameters,

    # Data containers
    KeyPair,
    CipherResult,
    EncryptionEnvelope,
)

from .primitives import (
    normalize_key_bytes,
    coerce_bytes,
    encode_public_key,
    encode_public_key_hex,
    decode_public_key,
    compress_public_key_hex,
    encode_private_key_hex,
    decode_private_key,
    pkcs7_pad,
    pkcs7_unpad,
)

from .crypto import (
    compute_ecdh_shared_secret,
    derive_key_hkdf,
    derive_key_sha256_truncate,
    compute_hmac_sha256,
    verify_hmac_sha256,
    wipe,
    transient_secret,
)

__all__ = [
    # Errors
    "ECIESError",
    "InvalidKeyError",
    "AuthenticationError",
    "PaddingError",
    "TruncatedInputError",

    # Enums
    "CurveName",
    "KdfAlgorithm",
    "CipherAlgorithm",

    # Curve parameters
    "CurveParameters",
    "CURVE_PARAMETERS",
    "get_curve_parameters",

    # Data containers
    "KeyPair",
    "CipherResult",
    "EncryptionEnvelope",

    # Encoding
    "normalize_key_bytes",
    "coerce_bytes",
    "encode_public_key",
    "encode_public_key_hex",
    "decode_public_key",
    "compress_public_key_hex",
    "encode_private_key_hex",
    "decode_private_key",
    "pkcs7_pad",
    "pkcs7_unpad",

    # Crypto
    "compute_ecdh_shared_secret",
    "derive_key_hkdf",
    "derive_key_sha256_truncate",
    "compute_hmac_sha256",
    "verify_hmac_sha256",
    "wipe",
    "transient_secret",
]
