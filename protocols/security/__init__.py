"""
ECIES Security Operations

This module provides the capability implementations and the ECIES
orchestrator:
- Curve providers (secp256k1, P-256, P-384) for key generation and ECDH
- Key derivation functions (HKDF-SHA256, SHA-256 truncation)
- Symmetric ciphers (AES-CBC + HMAC-SHA256, AES-GCM)
- ECIES encryption/decryption

Author: SecureECIES Project
Date: October 2025
"""

from .curves import (
    EllipticCurveProvider,
    Secp256k1Curve,
    P256Curve,
    get_curve_provider,
)
from .kdf import HkdfSha256Kdf, Sha256TruncateKdf, get_kdf
from .ciphers import AesCbcHmacCipher, AesGcmCipher, get_cipher
from .ecies import ECIES, ecies_encrypt, ecies_decrypt

__all__ = [
    # Curves
    "EllipticCurveProvider",
    "Secp256k1Curve",
    "P256Curve",
    "get_curve_provider",

    # Key derivation
    "HkdfSha256Kdf",
    "Sha256TruncateKdf",
    "get_kdf",

    # Ciphers
    "AesCbcHmacCipher",
    "AesGcmCipher",
    "get_cipher",

    # ECIES
    "ECIES",
    "ecies_encrypt",
    "ecies_decrypt",
]
