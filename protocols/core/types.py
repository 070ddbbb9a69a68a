"""
ECIES Core Types and Constants

Defines the enumerations, curve parameters and data containers shared by the
curve providers, key derivation functions, ciphers and the ECIES orchestrator.

Author: SecureECIES Project
Date: October 2025
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Type

from cryptography.hazmat.primitives.asymmetric import ec

from config.ecies_config import ECIES_CONSTANTS


# ============================================================================
# ENUMERATIONS
# ============================================================================


class CurveName(Enum):
    """Named curves supported by EllipticCurveProvider."""

    SECP256K1 = "secp256k1"
    SECP256R1 = "secp256r1"  # NIST P-256
    SECP384R1 = "secp384r1"  # NIST P-384


class KdfAlgorithm(Enum):
    """Key derivation functions"""

    HKDF_SHA256 = "hkdf-sha256"
    SHA256_TRUNCATE = "sha256-truncate"


class CipherAlgorithm(Enum):
    """Symmetric authenticated-encryption constructions"""

    AES_128_CBC_HMAC_SHA256 = "aes-128-cbc-hmac-sha256"
    AES_128_GCM = "aes-128-gcm"


# ============================================================================
# CURVE PARAMETERS
# ============================================================================


@dataclass(frozen=True)
class CurveParameters:
    """
    Static parameters of a named curve.

    Attributes:
        curve_class: cryptography curve class (e.g. ec.SECP256K1)
        scalar_size: Size of a private scalar / field element in bytes
        order: Group order n (valid private scalars are in [1, n-1])
    """

    curve_class: Type[ec.EllipticCurve]
    scalar_size: int
    order: int

    @property
    def uncompressed_size(self) -> int:
        return 1 + 2 * self.scalar_size

    @property
    def compressed_size(self) -> int:
        return 1 + self.scalar_size


CURVE_PARAMETERS: Dict[CurveName, CurveParameters] = {
    CurveName.SECP256K1: CurveParameters(
        curve_class=ec.SECP256K1,
        scalar_size=32,
        order=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    ),
    CurveName.SECP256R1: CurveParameters(
        curve_class=ec.SECP256R1,
        scalar_size=32,
        order=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    ),
    CurveName.SECP384R1: CurveParameters(
        curve_class=ec.SECP384R1,
        scalar_size=48,
        order=int(
            "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
            "C7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973",
            16,
        ),
    ),
}


def get_curve_parameters(curve_name) -> CurveParameters:
    """
    Look up curve parameters by name or CurveName.

    Raises:
        ValueError: If the curve is not supported
    """
    try:
        return CURVE_PARAMETERS[CurveName(curve_name)]
    except ValueError:
        supported = [c.value for c in CurveName]
        raise ValueError(f"Unsupported curve: {curve_name}. Supported: {supported}")


# ============================================================================
# DATA CONTAINERS
# ============================================================================


@dataclass(frozen=True)
class KeyPair:
    """
    EC key pair as hex strings.

    public_key: X9.62 uncompressed point (04 || x || y)
    private_key: big-endian scalar, zero-padded to the curve size
    """

    public_key: str
    private_key: str

    def __repr__(self):
        return f"KeyPair(public_key={self.public_key!r}, private_key='[REDACTED]')"


@dataclass(frozen=True)
class CipherResult:
    """Output of SymmetricCipher.encrypt: IV-prefixed ciphertext and MAC."""

    ciphertext: bytes
    mac: bytes


@dataclass(frozen=True)
class EncryptionEnvelope:
    """
    Everything the receiver needs besides their own private key.

    The IV (or GCM nonce) travels as the first iv_size bytes of ciphertext.
    """

    ciphertext: bytes
    mac: bytes
    ephemeral_public_key: str
    iv_size: int = ECIES_CONSTANTS.IV_SIZE

    @property
    def iv(self) -> bytes:
        return self.ciphertext[: self.iv_size]

    @property
    def body(self) -> bytes:
        """Ciphertext without the IV prefix."""
        return self.ciphertext[self.iv_size:]
