"""
ECIES Error Taxonomy

Every failure of an encrypt/decrypt call surfaces as one of these classes.
All derive from ValueError, so callers that only handle ValueError keep
working.

Author: SecureECIES Project
Date: October 2025
"""


class ECIESError(ValueError):
    """Base class for all ECIES failures."""


class InvalidKeyError(ECIESError):
    """Malformed or off-curve public key, or a private key that is not a valid scalar."""


class AuthenticationError(ECIESError):
    """MAC verification failed (tampering, wrong key, or corrupted ciphertext)."""


class PaddingError(ECIESError):
    """MAC passed but the PKCS#7 padding is inconsistent."""


class TruncatedInputError(ECIESError):
    """Ciphertext too short or not aligned to the cipher block size."""
