"""
ECIES Encoding Primitives

Provides the encodings used at the ECIES trust boundary:
- Hex / raw bytes normalization
- EC public key encoding/decoding (X9.62 uncompressed and compressed points)
- EC private key encoding/decoding (fixed-size big-endian scalars)
- PKCS#7 padding

Standards Reference:
- SEC 1 v2.0 Section 2.3.3 / 2.3.4 - Elliptic-Curve-Point conversions
- RFC 5652 Section 6.3 - PKCS#7 padding

Author: SecureECIES Project
Date: October 2025
"""

from typing import Type, Union

from cryptography.hazmat.primitives import padding, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)

from config.ecies_config import ECIES_CONSTANTS
from .exceptions import ECIESError, InvalidKeyError, PaddingError, TruncatedInputError
from .types import get_curve_parameters

KeyInput = Union[str, bytes, bytearray]


# ============================================================================
# HEX / BYTES NORMALIZATION
# ============================================================================


def normalize_key_bytes(key: KeyInput, field: str = "key") -> bytes:
    """
    Convert a key given as hex string or raw bytes to bytes.

    Accepts an optional "0x" prefix on hex strings.

    Raises:
        InvalidKeyError: If the value is not valid hex or has an unsupported type
    """
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, str):
        text = key.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        try:
            return bytes.fromhex(text)
        except ValueError:
            raise InvalidKeyError(f"{field} is not a valid hex string")
    raise InvalidKeyError(f"{field} must be a hex string or bytes, got {type(key).__name__}")


def coerce_bytes(
    value: Union[str, bytes, bytearray],
    field: str,
    error: Type[ECIESError] = TruncatedInputError,
) -> bytes:
    """
    Accept bytes as-is, hex strings are decoded (ciphertext, MAC fields).

    Undecodable input raises `error` so decrypt failures stay ECIESError.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise error(f"{field} is not a valid hex string") from e
    raise error(f"{field} must be bytes or hex string, got {type(value).__name__}")


# ============================================================================
# PUBLIC KEY ENCODING (SEC 1 Section 2.3.3)
# ============================================================================


def encode_public_key(public_key: EllipticCurvePublicKey, compressed: bool = False) -> bytes:
    """
    Encode EC public key as X9.62 point.

    Args:
        public_key: EllipticCurvePublicKey object
        compressed: True for 0x02/0x03 || x, False for 0x04 || x || y

    Returns:
        bytes: Encoded point
    """
    point_format = (
        serialization.PublicFormat.CompressedPoint
        if compressed
        else serialization.PublicFormat.UncompressedPoint
    )
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=point_format,
    )


def encode_public_key_hex(public_key: EllipticCurvePublicKey) -> str:
    """Uncompressed point as lowercase hex (130 chars for 256-bit curves)."""
    return encode_public_key(public_key).hex()


def decode_public_key(curve_name, data: KeyInput) -> EllipticCurvePublicKey:
    """
    Decode an X9.62 encoded point into a public key on the given curve.

    Accepts both uncompressed (0x04 || x || y) and compressed (0x02/0x03 || x)
    encodings, as hex string or raw bytes.

    Args:
        curve_name: Curve name or CurveName
        data: Encoded point

    Returns:
        EllipticCurvePublicKey

    Raises:
        InvalidKeyError: Malformed length, unknown prefix, point not on curve
            or point at infinity
    """
    params = get_curve_parameters(curve_name)
    encoded = normalize_key_bytes(data, field="public key")

    if len(encoded) == params.uncompressed_size:
        if encoded[0] != 0x04:
            raise InvalidKeyError("Invalid uncompressed point prefix")
    elif len(encoded) == params.compressed_size:
        if encoded[0] not in (0x02, 0x03):
            raise InvalidKeyError("Invalid compressed point prefix")
    else:
        raise InvalidKeyError(
            f"Invalid public key length: {len(encoded)} bytes "
            f"(expected {params.uncompressed_size} or {params.compressed_size})"
        )

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(params.curve_class(), encoded)
    except ValueError as e:
        raise InvalidKeyError(f"Public key is not a valid point on the curve: {e}") from e


def compress_public_key_hex(curve_name, data: KeyInput) -> str:
    """Re-encode a public key in compressed form (hex)."""
    return encode_public_key(decode_public_key(curve_name, data), compressed=True).hex()


# ============================================================================
# PRIVATE KEY ENCODING
# ============================================================================


def encode_private_key_hex(private_key: EllipticCurvePrivateKey) -> str:
    """Private scalar as zero-padded big-endian hex."""
    params = get_curve_parameters(private_key.curve.name)
    value = private_key.private_numbers().private_value
    return value.to_bytes(params.scalar_size, byteorder="big").hex()


def decode_private_key(curve_name, data: KeyInput) -> EllipticCurvePrivateKey:
    """
    Decode a fixed-size big-endian scalar into a private key.

    Raises:
        InvalidKeyError: Wrong length or scalar outside [1, n-1]
    """
    params = get_curve_parameters(curve_name)
    raw = normalize_key_bytes(data, field="private key")

    if len(raw) != params.scalar_size:
        raise InvalidKeyError(
            f"Invalid private key length: {len(raw)} bytes (expected {params.scalar_size})"
        )

    value = int.from_bytes(raw, byteorder="big")
    if not 1 <= value < params.order:
        raise InvalidKeyError("Private key scalar out of range")

    try:
        return ec.derive_private_key(value, params.curve_class())
    except ValueError as e:
        raise InvalidKeyError(f"Invalid private key: {e}") from e


# ============================================================================
# PKCS#7 PADDING (RFC 5652 Section 6.3)
# ============================================================================


def pkcs7_pad(data: bytes, block_size: int = ECIES_CONSTANTS.AES_BLOCK_SIZE) -> bytes:
    """
    Pad data to a multiple of block_size.

    A full block of padding is appended when data is already aligned.
    """
    padder = padding.PKCS7(block_size * 8).padder()
    return padder.update(data) + padder.finalize()


def pkcs7_unpad(data: bytes, block_size: int = ECIES_CONSTANTS.AES_BLOCK_SIZE) -> bytes:
    """
    Validate and strip PKCS#7 padding.

    Raises:
        PaddingError: Pad length outside [1, block_size], pad bytes not all
            equal to the pad length, or data not block aligned
    """
    if not data or len(data) % block_size != 0:
        raise PaddingError("Padded data is not aligned to the block size")

    unpadder = padding.PKCS7(block_size * 8).unpadder()
    try:
        return unpadder.update(data) + unpadder.finalize()
    except ValueError as e:
        raise PaddingError("Invalid padding bytes") from e
