"""
ECIES Cryptographic Operations

Provides core cryptographic operations for the ECIES suite:
- ECDH shared secret computation
- HKDF and SHA-256 truncation key derivation
- HMAC-SHA256 computation and constant-time verification
- Best-effort zeroing of transient secrets

Standards Reference:
- NIST SP 800-56A Rev. 3 - ECDH
- RFC 5869 - HKDF
- RFC 2104 - HMAC

Author: SecureECIES Project
Date: October 2025
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .exceptions import InvalidKeyError


# ============================================================================
# ECDH OPERATIONS (NIST SP 800-56A)
# ============================================================================


def compute_ecdh_shared_secret(
    private_key: EllipticCurvePrivateKey,
    public_key: EllipticCurvePublicKey
) -> bytes:
    """
    Compute ECDH shared secret (x-coordinate of d * Q).

    Args:
        private_key: Local private key
        public_key: Remote public key (same curve)

    Returns:
        bytes: Shared secret (32 bytes for 256-bit curves)

    Raises:
        InvalidKeyError: If the keys are on different curves or the
            exchange fails
    """
    if private_key.curve.name != public_key.curve.name:
        raise InvalidKeyError(
            f"Curve mismatch: {private_key.curve.name} vs {public_key.curve.name}"
        )
    try:
        return private_key.exchange(ec.ECDH(), public_key)
    except ValueError as e:
        raise InvalidKeyError(f"Failed to compute ECDH shared secret: {e}") from e


# ============================================================================
# KEY DERIVATION
# ============================================================================


def derive_key_hkdf(
    input_key_material: bytes,
    length: int,
    info: bytes,
    salt: Optional[bytes] = None
) -> bytes:
    """
    Derive key using HKDF-SHA256.

    Args:
        input_key_material: Input keying material (e.g., ECDH shared secret)
        length: Desired output key length in bytes
        info: Context label (domain separation)
        salt: Optional salt value (None = zero-length salt)

    Returns:
        bytes: Derived key material

    Raises:
        ValueError: If parameters are invalid
    """
    if not input_key_material:
        raise ValueError("Input key material cannot be empty")

    if length < 1 or length > 255 * 32:  # HKDF-SHA256 limit
        raise ValueError(f"Invalid output length: {length} (must be 1-8160)")

    kdf = HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        info=info,
    )
    return kdf.derive(bytes(input_key_material))


def derive_key_sha256_truncate(
    secret: bytes,
    length: int,
    label: Optional[bytes] = None
) -> bytes:
    """
    SHA-256(label || secret) truncated to length bytes.

    With label=None this is the plain hash-and-truncate derivation.
    """
    if not secret:
        raise ValueError("Secret cannot be empty")

    if length < 1 or length > 32:
        raise ValueError(f"Invalid output length: {length} (must be 1-32)")

    digest = hashes.Hash(hashes.SHA256())
    if label:
        digest.update(label)
    digest.update(bytes(secret))
    return digest.finalize()[:length]


# ============================================================================
# HMAC (RFC 2104)
# ============================================================================


def compute_hmac_sha256(key: bytes, data: bytes) -> bytes:
    """HMAC-SHA256 tag (32 bytes)."""
    h = hmac.HMAC(bytes(key), hashes.SHA256())
    h.update(data)
    return h.finalize()


def verify_hmac_sha256(key: bytes, data: bytes, tag: bytes) -> bool:
    """
    Verify HMAC-SHA256 tag in constant time.

    Returns:
        bool: True if the tag matches, False otherwise
    """
    h = hmac.HMAC(bytes(key), hashes.SHA256())
    h.update(data)
    try:
        h.verify(tag)
        return True
    except InvalidSignature:
        return False


# ============================================================================
# SECRET LIFETIME
# ============================================================================


def wipe(buffer: bytearray) -> None:
    """Overwrite a mutable buffer with zeros."""
    for i in range(len(buffer)):
        buffer[i] = 0


@contextmanager
def transient_secret(data: Union[bytes, bytearray]) -> Iterator[bytearray]:
    """
    Hold a secret in a mutable buffer that is zeroed on exit.

    Immutable copies handed to the crypto backend cannot be wiped; this
    only bounds the lifetime of the copy owned by the caller.

    Usage:
        with transient_secret(shared) as secret:
            key = kdf.derive_key(bytes(secret))
    """
    buffer = bytearray(data)
    try:
        yield buffer
    finally:
        wipe(buffer)
